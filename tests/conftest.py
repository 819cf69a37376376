"""Shared fixtures: fake Caffe network and isolated settings."""

import os

import numpy as np
import pytest

from facerec.core import caffe_helper
from facerec.core.settings import Settings


class FakeNet:
    """Stand-in for cv2.dnn_Net: features are the per-channel blob means."""

    def __init__(self):
        self.blob = None
        self.forward_calls = []

    def empty(self):
        return False

    def setInput(self, blob):
        self.blob = blob

    def forward(self, layer):
        self.forward_calls.append(layer)
        features = self.blob.mean(axis=(2, 3)).reshape(1, -1)
        # second row must never reach the classifier
        return np.vstack([features, np.full_like(features, -999.0)])


def solid_image(bgr, size=16, noise=0, gray=False):
    """Uniform colour image with a small deterministic offset."""
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:] = [min(255, max(0, c + noise)) for c in bgr]
    if gray:
        return img[:, :, 0].copy()
    return img


RED = (30, 30, 200)
BLUE = (200, 30, 30)


@pytest.fixture
def fake_net(monkeypatch):
    nets = []

    def _read_net(model_path, weights_path):
        net = FakeNet()
        nets.append(net)
        return net

    monkeypatch.setattr(caffe_helper, "_read_net", _read_net)
    return nets


@pytest.fixture
def make_settings(tmp_path):
    """Settings pointing at a temp data dir with dummy model files."""

    def _make(**overrides):
        values = dict(CONFIG_PATH=None, DATA_DIR=str(tmp_path), CAFFE_INPUT_SIZE=8)
        values.update(overrides)
        settings = Settings(**values)
        caffe_dir = os.path.join(str(tmp_path), "caffe")
        os.makedirs(caffe_dir, exist_ok=True)
        for name in (settings.CAFFE_MODEL_FILE, settings.CAFFE_WEIGHTS_FILE):
            if isinstance(name, str) and name:
                with open(os.path.join(caffe_dir, name), "w") as f:
                    f.write("dummy")
        return settings

    return _make
