"""Tests for the Caffe engine wrapper."""

import types

import cv2
import numpy as np
import pytest

from facerec.core import caffe_helper
from facerec.core.caffe_helper import CaffeNet, ModelLoadError, NativeLibraryError, to_bgr

from conftest import solid_image, RED


@pytest.fixture
def model_files(tmp_path):
    model = tmp_path / "deploy.prototxt"
    weights = tmp_path / "weights.caffemodel"
    model.write_text("dummy")
    weights.write_text("dummy")
    return str(model), str(weights)


def test_load_native_library_runs_once(monkeypatch):
    monkeypatch.setattr(caffe_helper, "_native_loaded", False)
    caffe_helper.load_native_library()
    assert caffe_helper._native_loaded

    # second call must not touch cv2 again
    monkeypatch.setattr(caffe_helper, "cv2", types.SimpleNamespace())
    caffe_helper.load_native_library()
    assert caffe_helper._native_loaded


def test_load_native_library_without_dnn(monkeypatch):
    monkeypatch.setattr(caffe_helper, "_native_loaded", False)
    monkeypatch.setattr(caffe_helper, "cv2", types.SimpleNamespace(__version__="0"))
    with pytest.raises(NativeLibraryError):
        caffe_helper.load_native_library()
    assert not caffe_helper._native_loaded


def test_load_model_missing_files(tmp_path):
    net = CaffeNet()
    with pytest.raises(ModelLoadError):
        net.load_model(str(tmp_path / "missing.prototxt"), str(tmp_path / "missing.caffemodel"))
    assert not net.loaded


def test_load_model_unparseable_file(model_files):
    # the real OpenCV loader rejects the dummy prototxt
    net = CaffeNet()
    with pytest.raises(ModelLoadError):
        net.load_model(*model_files)


def test_forward_takes_layer_output(fake_net, model_files):
    net = CaffeNet(input_size=8)
    net.load_model(*model_files)
    net.set_mean((104, 117, 123))

    output = net.get_representation_layer_from_image(solid_image(RED), "fc7")

    assert output.dtype == np.float32
    assert output.shape == (2, 3)
    np.testing.assert_allclose(output[0], [30 - 104, 30 - 117, 200 - 123], atol=1e-4)
    assert fake_net[0].forward_calls == ["fc7"]


def test_forward_from_path(fake_net, model_files, tmp_path):
    path = str(tmp_path / "face.png")
    cv2.imwrite(path, solid_image(RED))

    net = CaffeNet(input_size=8)
    net.load_model(*model_files)
    from_path = net.get_representation_layer(path, "fc7")
    from_memory = net.get_representation_layer_from_image(solid_image(RED), "fc7")
    np.testing.assert_allclose(from_path, from_memory)


def test_forward_unreadable_path(fake_net, model_files, tmp_path):
    net = CaffeNet(input_size=8)
    net.load_model(*model_files)
    with pytest.raises(OSError):
        net.get_representation_layer(str(tmp_path / "nope.png"), "fc7")


def test_forward_before_load():
    with pytest.raises(ModelLoadError):
        CaffeNet().get_representation_layer_from_image(solid_image(RED), "fc7")


def test_set_mean_requires_three_values():
    net = CaffeNet()
    with pytest.raises(ValueError):
        net.set_mean((1.0, 2.0))
    net.set_mean([1, 2, 3])
    assert net.mean == (1.0, 2.0, 3.0)


def test_to_bgr_channel_handling():
    gray = np.zeros((4, 4), dtype=np.uint8)
    assert to_bgr(gray).shape == (4, 4, 3)
    assert to_bgr(gray[:, :, None]).shape == (4, 4, 3)
    assert to_bgr(np.zeros((4, 4, 4), dtype=np.uint8)).shape == (4, 4, 3)
    with pytest.raises(ValueError):
        to_bgr(np.zeros((4, 4, 2), dtype=np.uint8))
