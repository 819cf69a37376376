# facerec/core/settings.py
"""
Configuration cho facerec.

Settings được load từ `config/config.json` nếu có, còn lại dùng default.
CaffeConfig là phần cấu hình riêng của Caffe recognizer: được resolve một lần
khi khởi tạo recognizer, giá trị sai kiểu sẽ tự động quay về default.
"""
import os
import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# === PATHS ===
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
CONFIG_PATH = os.path.join(BASE_DIR, 'config', 'config.json')

# === CAFFE DEFAULTS ===
DEFAULT_MODEL_FILE = "VGG_FACE_deploy.prototxt"
DEFAULT_WEIGHTS_FILE = "VGG_FACE.caffemodel"
DEFAULT_OUTPUT_LAYER = "fc7"
DEFAULT_MEAN_VALUES_STRING = "104,117,123"
DEFAULT_MEAN_VALUES = (104.0, 117.0, 123.0)
DEFAULT_INPUT_SIZE = 224
DEFAULT_NUM_THREADS = 4


def _load_json_config(path: str) -> dict:
    """Load config từ JSON file, trả về {} nếu lỗi."""
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Không đọc được config {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class Settings:
    """Runtime settings - tương đương shared preferences của app."""

    BASE_DIR: str = field(default_factory=lambda: BASE_DIR)
    CONFIG_PATH: Optional[str] = field(default_factory=lambda: CONFIG_PATH)

    # === DATA ===
    DATA_DIR: str = "data"               # Tương đối với BASE_DIR nếu không phải absolute

    # === CAFFE ===
    CAFFE_MODEL_FILE: str = DEFAULT_MODEL_FILE
    CAFFE_WEIGHTS_FILE: str = DEFAULT_WEIGHTS_FILE
    CAFFE_OUTPUT_LAYER: str = DEFAULT_OUTPUT_LAYER
    CAFFE_MEAN_VALUES: str = DEFAULT_MEAN_VALUES_STRING
    CAFFE_INPUT_SIZE: int = DEFAULT_INPUT_SIZE
    CAFFE_NUM_THREADS: int = DEFAULT_NUM_THREADS
    CAFFE_USE_TEMP_FILE: bool = False    # True = ghi ảnh ra file rồi forward theo path

    # === CLASSIFIER ===
    CLASSIFICATION_METHOD_SVM: bool = True   # True = SVM, False = KNN
    KNN_K: int = 3
    SVM_C: float = 1.0
    SVM_KERNEL: str = "linear"

    # === WEB SERVER ===
    WEB_PORT: int = 5000

    def __post_init__(self):
        self._load_from_json()

    def _load_from_json(self):
        """Load settings từ config.json nếu có."""
        config = _load_json_config(self.CONFIG_PATH)
        for key, value in config.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)

    @property
    def data_dir(self) -> str:
        if os.path.isabs(self.DATA_DIR):
            return self.DATA_DIR
        return os.path.join(self.BASE_DIR, self.DATA_DIR)


# === CAFFE CONFIG RESOLUTION ===

def parse_mean_values(raw) -> Tuple[float, float, float]:
    """
    Parse chuỗi mean pixel "B,G,R" thành tuple 3 float.

    Nếu chuỗi không tách được thành đúng 3 số thì dùng DEFAULT_MEAN_VALUES.
    """
    if isinstance(raw, (list, tuple)):
        parts = [str(p) for p in raw]
    elif isinstance(raw, str):
        parts = raw.split(',')
    else:
        return DEFAULT_MEAN_VALUES

    if len(parts) != 3:
        logger.debug(f"Mean values '{raw}' không đủ 3 giá trị, dùng default")
        return DEFAULT_MEAN_VALUES
    try:
        return tuple(float(p) for p in parts)
    except ValueError:
        logger.debug(f"Mean values '{raw}' không hợp lệ, dùng default")
        return DEFAULT_MEAN_VALUES


def _resolve_str(value, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _resolve_bool(value, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('true', '1', 'yes'):
            return True
        if lowered in ('false', '0', 'no'):
            return False
    return default


def _resolve_positive_int(value, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class CaffeConfig:
    """Cấu hình đã resolve cho CaffeRecognizer. Immutable sau khi tạo."""
    model_path: str
    weights_path: str
    output_layer: str
    mean_values: Tuple[float, float, float]
    use_svm: bool
    input_size: int = DEFAULT_INPUT_SIZE
    num_threads: int = DEFAULT_NUM_THREADS
    use_temp_file: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, caffe_dir: str) -> "CaffeConfig":
        model_file = _resolve_str(settings.CAFFE_MODEL_FILE, DEFAULT_MODEL_FILE)
        weights_file = _resolve_str(settings.CAFFE_WEIGHTS_FILE, DEFAULT_WEIGHTS_FILE)
        return cls(
            model_path=os.path.join(caffe_dir, model_file),
            weights_path=os.path.join(caffe_dir, weights_file),
            output_layer=_resolve_str(settings.CAFFE_OUTPUT_LAYER, DEFAULT_OUTPUT_LAYER),
            mean_values=parse_mean_values(settings.CAFFE_MEAN_VALUES),
            use_svm=_resolve_bool(settings.CLASSIFICATION_METHOD_SVM, True),
            input_size=_resolve_positive_int(settings.CAFFE_INPUT_SIZE, DEFAULT_INPUT_SIZE),
            num_threads=_resolve_positive_int(settings.CAFFE_NUM_THREADS, DEFAULT_NUM_THREADS),
            use_temp_file=_resolve_bool(settings.CAFFE_USE_TEMP_FILE, False),
        )


# === SINGLETON ===
settings = Settings()
