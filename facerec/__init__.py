# facerec package
"""
facerec - Face Recognition với Caffe feature extractor (OpenCV DNN)

Structure:
    facerec/
    ├── core/                     # Core infrastructure
    │   ├── settings.py           # Configuration
    │   ├── caffe_helper.py       # Caffe network (OpenCV DNN)
    │   ├── file_helper.py        # Data directories, libsvm files
    │   └── model_factory.py      # Factory cho recognizer
    ├── recognition/              # Recognizer + classifiers
    │   ├── caffe.py              # CaffeRecognizer
    │   ├── svm.py                # SVM classifier
    │   └── knn.py                # KNN classifier
    ├── web/                      # Flask API
    │   └── server.py
    └── main.py                   # CLI

Usage:
    from facerec import create_recognizer

    recognizer = create_recognizer()
    recognizer.add_image(face_img, "alice")
    recognizer.train()
"""

from .core.model_factory import create_recognizer
from .core.settings import settings, Settings
from .recognition import CaffeRecognizer, SupportVectorMachine, KNearestNeighbor, TRAINING, RECOGNITION

__all__ = [
    'settings',
    'Settings',
    'create_recognizer',
    'CaffeRecognizer',
    'SupportVectorMachine',
    'KNearestNeighbor',
    'TRAINING',
    'RECOGNITION',
]
