"""Tests for the SVM and KNN classifiers on feature vectors."""

import os

import cv2
import numpy as np
import pytest

from facerec.core.file_helper import FileHelper
from facerec.recognition import (
    SupportVectorMachine,
    KNearestNeighbor,
    LabelMap,
    TRAINING,
    RECOGNITION,
)

CLASSIFIERS = [SupportVectorMachine, KNearestNeighbor]


def cluster(center, n=5, seed=0):
    rng = np.random.RandomState(seed)
    return [np.asarray(center, dtype=np.float32) + rng.uniform(-1, 1, len(center)).astype(np.float32)
            for _ in range(n)]


ALICE = [10.0, 0.0, 0.0, 5.0]
BOB = [-10.0, 0.0, 0.0, -5.0]


@pytest.fixture
def file_helper(tmp_path):
    return FileHelper(str(tmp_path))


def trained(cls, file_helper):
    clf = cls(file_helper, TRAINING)
    for vec in cluster(ALICE, seed=1):
        clf.add_image(vec, "alice")
    for vec in cluster(BOB, seed=2):
        clf.add_image(vec, "bob")
    assert clf.train() is True
    return clf


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_train_and_recognize(cls, file_helper):
    clf = trained(cls, file_helper)
    assert clf.recognize(np.array(ALICE)) == "alice"
    assert clf.recognize(BOB) == "bob"


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_recognize_is_deterministic(cls, file_helper):
    clf = trained(cls, file_helper)
    sample = np.array([3.0, 1.0, -1.0, 0.5], dtype=np.float32)
    first = clf.recognize(sample)
    assert all(clf.recognize(sample) == first for _ in range(5))


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_recognize_untrained_returns_empty(cls, file_helper):
    clf = cls(file_helper, TRAINING)
    assert clf.recognize(ALICE) == ""


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_train_empty_returns_false(cls, file_helper):
    assert cls(file_helper, TRAINING).train() is False


def test_svm_needs_two_labels(file_helper):
    svm = SupportVectorMachine(file_helper, TRAINING)
    for vec in cluster(ALICE):
        svm.add_image(vec, "alice")
    assert svm.train() is False
    assert not svm.trained


def test_knn_single_label(file_helper):
    knn = KNearestNeighbor(file_helper, TRAINING, k=10)
    for vec in cluster(ALICE, n=2):
        knn.add_image(vec, "alice")
    assert knn.train() is True
    assert knn.recognize(BOB) == "alice"


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_recognition_mode_loads_saved_model(cls, file_helper):
    trained(cls, file_helper)
    clf = cls(file_helper, RECOGNITION)
    assert clf.trained
    assert clf.recognize(ALICE) == "alice"
    assert clf.recognize(BOB) == "bob"


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_recognition_mode_without_model(cls, file_helper):
    clf = cls(file_helper, RECOGNITION)
    assert not clf.trained
    assert clf.recognize(ALICE) == ""


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_add_image_in_recognition_mode_goes_to_test_set(cls, file_helper):
    trained(cls, file_helper)
    clf = cls(file_helper, RECOGNITION)
    clf.add_image(ALICE, "alice")
    assert clf.training_size() == 0
    assert clf.test_size() == 1


def test_training_data_written_in_libsvm_format(file_helper):
    svm = trained(SupportVectorMachine, file_helper)
    with open(svm.training_data_path) as f:
        lines = f.read().splitlines()
    assert len(lines) == 10
    label_id, *features = lines[0].split(" ")
    assert label_id == "0"
    assert [feat.split(":")[0] for feat in features] == ["1", "2", "3", "4"]


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_save_test_data(cls, file_helper):
    clf = trained(cls, file_helper)
    clf.recognize(ALICE, "alice")
    clf.recognize(BOB, "bob")
    clf.recognize(BOB, "carol")
    clf.recognize(BOB)          # no expected label: not recorded
    clf.save_test_data()

    with open(clf.test_data_path) as f:
        lines = f.read().splitlines()
    assert [line.split(" ")[0] for line in lines] == ["0", "1", "-1"]
    assert lines[0] == "0 1:10 2:0 3:0 4:5"


@pytest.mark.parametrize("cls", CLASSIFIERS)
def test_save_test_data_clears_memory_and_appends(cls, file_helper):
    clf = trained(cls, file_helper)
    clf.recognize(ALICE, "alice")
    clf.save_test_data()
    assert clf.test_size() == 0

    clf.save_test_data()                # nothing new: file unchanged
    clf.recognize(BOB, "bob")
    clf.save_test_data()
    assert clf.test_size() == 0

    with open(clf.test_data_path) as f:
        lines = f.read().splitlines()
    assert [line.split(" ")[0] for line in lines] == ["0", "1"]


def test_new_classifier_overwrites_test_data(file_helper):
    first = trained(KNearestNeighbor, file_helper)
    first.recognize(ALICE, "alice")
    first.recognize(BOB, "bob")
    first.save_test_data()

    second = KNearestNeighbor(file_helper, RECOGNITION)
    second.recognize(BOB, "bob")
    second.save_test_data()

    with open(second.test_data_path) as f:
        assert f.read().splitlines() == ["1 1:-10 2:0 3:0 4:-5"]


def test_opencv_ml_module_available():
    # classifiers are built on cv2.ml, which OpenCV 5 no longer ships
    assert int(cv2.__version__.split(".")[0]) == 4
    assert hasattr(cv2.ml, "SVM_create") and hasattr(cv2.ml, "KNearest_create")


def test_empty_vector_rejected(file_helper):
    with pytest.raises(ValueError):
        KNearestNeighbor(file_helper, TRAINING).add_image([], "alice")


def test_label_map_round_trip(tmp_path):
    labels = LabelMap(["alice", "bob"])
    assert labels.get_or_add("alice") == 0
    assert labels.get_or_add("carol") == 2
    assert labels.get_label(1) == "bob"
    assert labels.get_label(7) == ""
    assert labels.get_id("dave") == -1

    path = os.path.join(str(tmp_path), "labels", "map.json")
    labels.save(path)
    assert LabelMap.load(path).labels == ["alice", "bob", "carol"]
