# facerec/recognition/caffe.py
"""
Caffe Recognizer
================
Trích xuất feature vector bằng Caffe network (qua OpenCV DNN) rồi chuyển
cho classifier (SVM hoặc KNN) để train / nhận diện.

Pipeline cho mỗi ảnh:
1. (Tùy chọn CAFFE_USE_TEMP_FILE) ghi ảnh ra <DATA_DIR>/caffe/caffe_vector.png
2. Forward pass, lấy output của layer CAFFE_OUTPUT_LAYER
3. Lấy hàng đầu tiên (batch = 1) làm feature vector
4. Chuyển về float32 1-D cho classifier
"""
import logging

import numpy as np

from ..core.settings import settings as default_settings, CaffeConfig
from ..core.caffe_helper import CaffeNet, load_native_library
from ..core.file_helper import FileHelper
from .base import Recognition, TRAINING
from .svm import SupportVectorMachine
from .knn import KNearestNeighbor

logger = logging.getLogger(__name__)

TEMP_IMAGE_NAME = "caffe_vector"


class CaffeRecognizer(Recognition):
    """
    Adapter giữa ảnh khuôn mặt và classifier, thông qua Caffe feature extractor.

    Args:
        settings: Settings instance (None = singleton)
        method: TRAINING hoặc RECOGNITION, được chuyển cho classifier
        classifier: classifier có sẵn (None = chọn theo CLASSIFICATION_METHOD_SVM)

    Raises:
        NativeLibraryError, ModelLoadError: không load được engine/model
    """

    def __init__(self, settings=None, method=TRAINING, classifier=None):
        if settings is None:
            settings = default_settings
        self.settings = settings
        self.method = method
        self.file_helper = FileHelper(settings.data_dir)
        self.config = CaffeConfig.from_settings(settings, self.file_helper.caffe_path)

        load_native_library()
        self.caffe = CaffeNet(input_size=self.config.input_size)
        self.caffe.set_num_threads(self.config.num_threads)
        self.caffe.load_model(self.config.model_path, self.config.weights_path)
        self.caffe.set_mean(self.config.mean_values)

        if classifier is not None:
            self.classifier = classifier
        elif self.config.use_svm:
            self.classifier = SupportVectorMachine(
                self.file_helper, method,
                c=settings.SVM_C, kernel=settings.SVM_KERNEL
            )
        else:
            self.classifier = KNearestNeighbor(self.file_helper, method, k=settings.KNN_K)

        logger.info(f"[Caffe Recognizer] Layer: {self.config.output_layer}, "
                    f"mean={self.config.mean_values}, "
                    f"classifier={type(self.classifier).__name__}")

    @property
    def layer(self):
        return self.config.output_layer

    def train(self):
        return self.classifier.train()

    def recognize(self, img, expected_label=None):
        return self.classifier.recognize(self.get_feature_vector(img), expected_label)

    def add_image(self, img, label):
        self.classifier.add_image(self.get_feature_vector(img), label)

    def save_test_data(self):
        self.classifier.save_test_data()

    def save_to_file(self):
        pass

    def load_from_file(self):
        pass

    def get_feature_vector(self, img):
        """
        Feature vector của một ảnh (BGR hoặc grayscale).

        Returns:
            numpy float32 array shape (feature_dim,)
        """
        if self.config.use_temp_file:
            path = self._save_temp_image(img)
            output = self.caffe.get_representation_layer(path, self.layer)
        else:
            output = self.caffe.get_representation_layer_from_image(img, self.layer)
        return np.ascontiguousarray(output[0], dtype=np.float32)

    def _save_temp_image(self, img):
        return self.file_helper.save_image(TEMP_IMAGE_NAME, img, self.file_helper.caffe_path)
