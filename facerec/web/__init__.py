# facerec/web/__init__.py
"""
Web module - Flask API cho recognizer.
"""
from .server import create_app, run_server, recognition_bp, init_recognition

__all__ = [
    'create_app',
    'run_server',
    'recognition_bp',
    'init_recognition',
]
