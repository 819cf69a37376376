# facerec/recognition/__init__.py
"""
Recognition module.

- CaffeRecognizer: Caffe feature extractor + classifier
- SupportVectorMachine / KNearestNeighbor: classifier trên feature vector
"""

from .base import Recognition, TRAINING, RECOGNITION
from .labels import LabelMap
from .svm import SupportVectorMachine
from .knn import KNearestNeighbor
from .caffe import CaffeRecognizer

__all__ = [
    'Recognition',
    'TRAINING',
    'RECOGNITION',
    'LabelMap',
    'SupportVectorMachine',
    'KNearestNeighbor',
    'CaffeRecognizer',
]
