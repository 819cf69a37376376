# facerec/recognition/knn.py
"""
K-Nearest-Neighbor classifier trên feature vector (cv2.ml.KNearest).

KNN không có tham số học, nên thứ được lưu là chính training set:
    <DATA_DIR>/knn/knn_data.npz  (samples, responses)
"""
import os
import logging

import cv2
import numpy as np

from .base import TRAINING
from .classifier import VectorClassifier
from .labels import LabelMap

logger = logging.getLogger(__name__)

DATA_FILE = "knn_data.npz"


class KNearestNeighbor(VectorClassifier):

    name = "KNN"

    def __init__(self, file_helper, method=TRAINING, k=3):
        try:
            k = int(k)
        except (TypeError, ValueError):
            k = 3
        self.k = max(1, k)
        self._knn = None
        self._samples = None
        self._responses = None
        super().__init__(file_helper, method)

    def _model_dir(self):
        return self.file_helper.knn_path

    @property
    def data_path(self):
        return os.path.join(self.model_dir, DATA_FILE)

    def _fit(self, samples, responses):
        if len(samples) == 0:
            return False
        knn = cv2.ml.KNearest_create()
        knn.setIsClassifier(True)
        knn.train(samples, cv2.ml.ROW_SAMPLE, responses.astype(np.float32).reshape(-1, 1))
        self._knn = knn
        self._samples = samples
        self._responses = responses
        return True

    def _predict(self, vector):
        k = min(self.k, len(self._samples))
        _, results, _, _ = self._knn.findNearest(vector.reshape(1, -1), k)
        return int(round(float(results[0][0])))

    def save_to_file(self):
        if self._knn is None:
            return
        self.file_helper.ensure_dir(self.model_dir)
        np.savez(self.data_path, samples=self._samples, responses=self._responses)
        self.label_map.save(self.label_map_path)

    def load_from_file(self):
        if not os.path.exists(self.data_path) or not os.path.exists(self.label_map_path):
            logger.warning(f"[KNN] Chưa có training set đã lưu: {self.data_path}")
            return
        with np.load(self.data_path) as data:
            samples = data['samples'].astype(np.float32)
            responses = data['responses'].astype(np.int32)
        self.label_map = LabelMap.load(self.label_map_path)
        self._trained = self._fit(samples, responses)
        logger.info(f"[KNN] Loaded {len(samples)} vectors, {len(self.label_map)} labels")
