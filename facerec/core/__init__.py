# facerec/core/__init__.py
"""
Core modules - Infrastructure & Configuration.

- settings: Settings + CaffeConfig
- caffe_helper: native engine (OpenCV DNN) wrapper
- file_helper: data directories & file output
- model_factory: Factory cho recognizer
"""

from .settings import settings, Settings, CaffeConfig, parse_mean_values
from .caffe_helper import CaffeNet, load_native_library, ModelLoadError, NativeLibraryError
from .file_helper import FileHelper

__all__ = [
    'settings',
    'Settings',
    'CaffeConfig',
    'parse_mean_values',
    'CaffeNet',
    'load_native_library',
    'ModelLoadError',
    'NativeLibraryError',
    'FileHelper',
]
