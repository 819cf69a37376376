# facerec/core/model_factory.py
"""
Factory module để tạo recognizer.

Usage:
    from facerec.core.model_factory import create_recognizer

    recognizer = create_recognizer(method=RECOGNITION)
"""
from .settings import settings as default_settings


def create_recognizer(settings=None, method=None):
    """
    Tạo Caffe Recognizer.

    Args:
        settings: Settings instance (None = singleton)
        method: TRAINING / RECOGNITION (None = TRAINING)

    Returns:
        CaffeRecognizer instance
    """
    from ..recognition import CaffeRecognizer, TRAINING

    if settings is None:
        settings = default_settings
    if method is None:
        method = TRAINING

    print(f"[Recognizer] Data: {settings.data_dir}")
    print(f"[Recognizer] Model: {settings.CAFFE_MODEL_FILE} / {settings.CAFFE_WEIGHTS_FILE}")
    return CaffeRecognizer(settings=settings, method=method)
