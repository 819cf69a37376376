# facerec/core/caffe_helper.py
"""
Helper module cho Caffe inference engine.

Forward pass được thực hiện bởi OpenCV DNN (cv2.dnn.readNetFromCaffe),
module này chỉ là lớp bọc mỏng:
- load_native_library(): khởi tạo một lần cho toàn process
- CaffeNet: load model, set mean, set threads, lấy output của một layer
"""
import os
import threading
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class NativeLibraryError(RuntimeError):
    """OpenCV DNN không khả dụng trong process."""


class ModelLoadError(RuntimeError):
    """Không load được model/weights hoặc layer không tồn tại."""


_native_lock = threading.Lock()
_native_loaded = False


def load_native_library():
    """
    Khởi tạo native engine một lần duy nhất.
    Các lần gọi sau là no-op.

    Raises:
        NativeLibraryError: nếu bản OpenCV đang cài không có module dnn
    """
    global _native_loaded

    if _native_loaded:
        return
    with _native_lock:
        if _native_loaded:
            return
        if not hasattr(cv2, 'dnn') or not hasattr(cv2.dnn, 'readNetFromCaffe'):
            raise NativeLibraryError(
                "OpenCV không có module dnn!\n"
                "Cài đặt: pip install 'opencv-python>=4.5,<5'"
            )
        logger.info(f"[Caffe] OpenCV DNN {cv2.__version__}")
        _native_loaded = True


def _read_net(model_path, weights_path):
    return cv2.dnn.readNetFromCaffe(model_path, weights_path)


def to_bgr(img):
    """Chuẩn hóa ảnh về 3 kênh BGR (gray -> BGR, BGRA -> BGR)."""
    img = np.asarray(img)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.ndim == 3 and img.shape[2] == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2BGR)
    if img.ndim == 3 and img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    if img.ndim == 3 and img.shape[2] == 3:
        return img
    raise ValueError(f"Ảnh không hợp lệ, shape={img.shape}")


class CaffeNet:
    """
    Caffe network chạy trên OpenCV DNN.

    Usage:
        net = CaffeNet()
        net.set_num_threads(4)
        net.load_model("deploy.prototxt", "weights.caffemodel")
        net.set_mean((104, 117, 123))
        features = net.get_representation_layer("face.png", "fc7")  # shape (1, D)
    """

    def __init__(self, input_size=224):
        self.input_size = int(input_size)
        self.mean = (0.0, 0.0, 0.0)
        self.num_threads = None
        self._net = None

    @property
    def loaded(self):
        return self._net is not None

    def set_num_threads(self, num_threads):
        self.num_threads = max(1, int(num_threads))
        cv2.setNumThreads(self.num_threads)

    def load_model(self, model_path, weights_path):
        """
        Load network từ file prototxt + caffemodel.

        Raises:
            ModelLoadError: file không tồn tại hoặc OpenCV không parse được
        """
        for path in (model_path, weights_path):
            if not os.path.isfile(path):
                raise ModelLoadError(f"Không tìm thấy file model: {path}")
        try:
            net = _read_net(model_path, weights_path)
        except cv2.error as e:
            raise ModelLoadError(f"Không load được Caffe model {model_path}: {e}") from e
        if net is None or (hasattr(net, 'empty') and net.empty()):
            raise ModelLoadError(f"Caffe model rỗng: {model_path}")
        self._net = net
        logger.info(f"[Caffe] Model: {model_path}")
        logger.info(f"[Caffe] Weights: {weights_path}")

    def set_mean(self, mean_values):
        values = tuple(float(v) for v in mean_values)
        if len(values) != 3:
            raise ValueError(f"Mean phải có đúng 3 giá trị, nhận {len(values)}")
        self.mean = values

    def _blob(self, img):
        img = to_bgr(img)
        return cv2.dnn.blobFromImage(
            img,
            scalefactor=1.0,
            size=(self.input_size, self.input_size),
            mean=self.mean,
            swapRB=False,
            crop=False,
        )

    def get_representation_layer_from_image(self, img, layer):
        """
        Forward một ảnh (BGR/gray numpy array) và lấy output của `layer`.

        Returns:
            numpy float32 array shape (batch, feature_dim)
        """
        if not self.loaded:
            raise ModelLoadError("Model chưa được load")
        self._net.setInput(self._blob(img))
        try:
            output = self._net.forward(layer)
        except cv2.error as e:
            raise ModelLoadError(f"Không forward được layer '{layer}': {e}") from e
        output = np.asarray(output, dtype=np.float32)
        return output.reshape(output.shape[0], -1)

    def get_representation_layer(self, image_path, layer):
        """Giống get_representation_layer_from_image nhưng đọc ảnh từ path."""
        img = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)
        if img is None:
            raise FileNotFoundError(f"Không đọc được ảnh: {image_path}")
        return self.get_representation_layer_from_image(img, layer)
