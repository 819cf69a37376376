# facerec/recognition/classifier.py
"""
Phần dùng chung của các classifier trên feature vector.

Subclass chỉ cần cài đặt _fit / _predict / save_to_file / load_from_file.
Việc tích lũy training set, test set và ghi file libsvm nằm ở đây.
"""
import os
import logging
from abc import abstractmethod

import numpy as np

from .base import Recognition, TRAINING, RECOGNITION
from .labels import LabelMap

logger = logging.getLogger(__name__)

LABEL_MAP_FILE = "label_map.json"
TRAINING_DATA_FILE = "training_data.txt"
TEST_DATA_FILE = "test_data.txt"


def as_feature_vector(vector):
    """Chuyển vector bất kỳ (list, ndarray 1xD, ...) về float32 1-D."""
    arr = np.asarray(vector, dtype=np.float32).ravel()
    if arr.size == 0:
        raise ValueError("Feature vector rỗng")
    return np.ascontiguousarray(arr)


class VectorClassifier(Recognition):
    """Classifier nhận feature vector, làm việc ở mode TRAINING hoặc RECOGNITION."""

    name = "classifier"

    def __init__(self, file_helper, method=TRAINING):
        self.file_helper = file_helper
        self.method = method
        self.model_dir = self._model_dir()
        self.label_map = LabelMap()
        self._training = []   # [(label, vector)]
        self._test = []       # [(label, vector)]
        self._test_data_written = False
        self._trained = False

        if method == RECOGNITION:
            self.load_from_file()

    @abstractmethod
    def _model_dir(self) -> str:
        pass

    @abstractmethod
    def _fit(self, samples, responses) -> bool:
        """Train model. Trả về False nếu training set không đủ."""

    @abstractmethod
    def _predict(self, vector) -> int:
        """Trả về label id dự đoán cho một vector."""

    @property
    def trained(self):
        return self._trained

    @property
    def label_map_path(self):
        return os.path.join(self.model_dir, LABEL_MAP_FILE)

    @property
    def test_data_path(self):
        return os.path.join(self.model_dir, TEST_DATA_FILE)

    @property
    def training_data_path(self):
        return os.path.join(self.model_dir, TRAINING_DATA_FILE)

    def training_size(self):
        return len(self._training)

    def test_size(self):
        return len(self._test)

    def add_image(self, vector, label):
        vector = as_feature_vector(vector)
        if self.method == TRAINING:
            self.label_map.get_or_add(label)
            self._training.append((label, vector))
        else:
            self._test.append((label, vector))

    def train(self):
        if not self._training:
            logger.warning(f"[{self.name}] Training set rỗng, bỏ qua train")
            return False

        samples = np.vstack([vec for _, vec in self._training]).astype(np.float32)
        responses = np.array(
            [self.label_map.get_or_add(label) for label, _ in self._training],
            dtype=np.int32
        )

        if not self._fit(samples, responses):
            return False

        self._trained = True
        self.file_helper.write_libsvm(
            self.training_data_path,
            zip(responses.tolist(), samples)
        )
        self.save_to_file()
        logger.info(f"[{self.name}] Trained: {len(samples)} vectors, {len(self.label_map)} labels")
        return True

    def recognize(self, vector, expected_label=None):
        vector = as_feature_vector(vector)
        if expected_label:
            self._test.append((expected_label, vector))

        if not self._trained:
            logger.warning(f"[{self.name}] Model chưa được train")
            return ""

        return self.label_map.get_label(self._predict(vector))

    def save_test_data(self):
        """
        Ghi test set ra file libsvm rồi xóa khỏi bộ nhớ.
        Lần ghi đầu tiên tạo file mới, các lần sau ghi nối vào cuối file.
        Label chưa biết được ghi với id -1.
        """
        records = [(self.label_map.get_id(label), vec) for label, vec in self._test]
        count = self.file_helper.write_libsvm(
            self.test_data_path, records, append=self._test_data_written
        )
        self._test = []
        self._test_data_written = True
        logger.info(f"[{self.name}] Test data: {count} dòng -> {self.test_data_path}")
