# facerec/recognition/svm.py
"""
Support Vector Machine classifier trên feature vector (cv2.ml.SVM, C-SVC).

Files (trong <DATA_DIR>/svm/):
    svm_model.xml       model đã train
    label_map.json      label <-> id
    training_data.txt   training set (libsvm format)
    test_data.txt       test set (libsvm format)
"""
import os
import logging

import cv2

from .base import TRAINING
from .classifier import VectorClassifier
from .labels import LabelMap

logger = logging.getLogger(__name__)

MODEL_FILE = "svm_model.xml"

_KERNELS = {
    'linear': cv2.ml.SVM_LINEAR,
    'rbf': cv2.ml.SVM_RBF,
}


class SupportVectorMachine(VectorClassifier):

    name = "SVM"

    def __init__(self, file_helper, method=TRAINING, c=1.0, kernel='linear'):
        try:
            c = float(c)
        except (TypeError, ValueError):
            c = 1.0
        self.c = c if c > 0 else 1.0
        self.kernel = kernel if kernel in _KERNELS else 'linear'
        self._svm = None
        super().__init__(file_helper, method)

    def _model_dir(self):
        return self.file_helper.svm_path

    @property
    def model_path(self):
        return os.path.join(self.model_dir, MODEL_FILE)

    def _create_svm(self, feature_dim):
        svm = cv2.ml.SVM_create()
        svm.setType(cv2.ml.SVM_C_SVC)
        svm.setKernel(_KERNELS[self.kernel])
        svm.setC(self.c)
        if self.kernel == 'rbf':
            svm.setGamma(1.0 / max(1, feature_dim))
        svm.setTermCriteria((cv2.TERM_CRITERIA_MAX_ITER + cv2.TERM_CRITERIA_EPS, 1000, 1e-6))
        return svm

    def _fit(self, samples, responses):
        if len(set(responses.tolist())) < 2:
            logger.warning("[SVM] Cần ít nhất 2 label để train")
            return False
        svm = self._create_svm(samples.shape[1])
        svm.train(samples, cv2.ml.ROW_SAMPLE, responses.reshape(-1, 1))
        self._svm = svm
        return True

    def _predict(self, vector):
        _, result = self._svm.predict(vector.reshape(1, -1))
        return int(round(float(result[0][0])))

    def save_to_file(self):
        if self._svm is None:
            return
        self.file_helper.ensure_dir(self.model_dir)
        self._svm.save(self.model_path)
        self.label_map.save(self.label_map_path)

    def load_from_file(self):
        if not os.path.exists(self.model_path) or not os.path.exists(self.label_map_path):
            logger.warning(f"[SVM] Chưa có model đã train: {self.model_path}")
            return
        self._svm = cv2.ml.SVM_load(self.model_path)
        self.label_map = LabelMap.load(self.label_map_path)
        self._trained = True
        logger.info(f"[SVM] Loaded model: {len(self.label_map)} labels")
