# facerec/web/server.py
"""
Web API - thêm ảnh, train và nhận diện từ xa.

Endpoints:
- GET  /api/status       - Trạng thái recognizer
- POST /api/images       - Thêm ảnh cho một label (form: label, file: image)
- POST /api/train        - Train classifier
- POST /api/recognize    - Nhận diện (file: image, form: expected - tùy chọn)
- POST /api/test-data    - Ghi test data ra file
"""
import logging

import cv2
import numpy as np
from flask import Flask, Blueprint, request, jsonify

logger = logging.getLogger(__name__)

recognition_bp = Blueprint('recognition', __name__)

# Global reference - được set từ main.py
_recognizer = None


def init_recognition(recognizer):
    """Gắn recognizer instance cho các endpoint."""
    global _recognizer
    _recognizer = recognizer
    print("[Web] Initialized with recognizer")


def _read_upload(field='image'):
    """Đọc ảnh upload. Trả về (image, error_message)."""
    if field not in request.files:
        return None, 'Thiếu file ảnh'
    image_file = request.files[field]
    if image_file.filename == '':
        return None, 'Chưa chọn file'
    nparr = np.frombuffer(image_file.read(), np.uint8)
    if nparr.size == 0:
        return None, 'File ảnh rỗng'
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None, 'Không thể đọc file ảnh'
    return img, None


def _not_ready():
    return jsonify({'success': False, 'error': 'Recognizer chưa được khởi tạo'}), 500


@recognition_bp.route('/api/status', methods=['GET'])
def api_status():
    if _recognizer is None:
        return jsonify({'ready': False})
    return jsonify({
        'ready': True,
        'classifier': type(_recognizer.classifier).__name__,
        'layer': _recognizer.layer,
        'method': _recognizer.method,
    })


@recognition_bp.route('/api/images', methods=['POST'])
def api_add_image():
    """
    POST /api/images
    Form data:
        - label: Tên người
        - image: File ảnh khuôn mặt (JPEG/PNG)
    """
    if _recognizer is None:
        return _not_ready()

    label = request.form.get('label', '').strip()
    if not label:
        return jsonify({'success': False, 'error': 'Thiếu label'}), 400

    img, error = _read_upload()
    if error:
        return jsonify({'success': False, 'error': error}), 400

    try:
        _recognizer.add_image(img, label)
    except Exception as e:
        logger.exception("add_image failed")
        return jsonify({'success': False, 'error': str(e)}), 500

    return jsonify({'success': True, 'label': label})


@recognition_bp.route('/api/train', methods=['POST'])
def api_train():
    if _recognizer is None:
        return _not_ready()
    try:
        trained = _recognizer.train()
    except Exception as e:
        logger.exception("train failed")
        return jsonify({'success': False, 'error': str(e)}), 500
    if not trained:
        return jsonify({'success': False, 'error': 'Training set không đủ để train'}), 400
    return jsonify({'success': True})


@recognition_bp.route('/api/recognize', methods=['POST'])
def api_recognize():
    """
    POST /api/recognize
    Response:
        {"success": true, "label": "..."}   (label rỗng = không nhận diện được)
    """
    if _recognizer is None:
        return _not_ready()

    img, error = _read_upload()
    if error:
        return jsonify({'success': False, 'error': error}), 400

    expected = request.form.get('expected', '').strip() or None
    try:
        label = _recognizer.recognize(img, expected)
    except Exception as e:
        logger.exception("recognize failed")
        return jsonify({'success': False, 'error': str(e)}), 500

    return jsonify({'success': True, 'label': label or ''})


@recognition_bp.route('/api/test-data', methods=['POST'])
def api_save_test_data():
    if _recognizer is None:
        return _not_ready()
    try:
        _recognizer.save_test_data()
    except OSError as e:
        logger.exception("save_test_data failed")
        return jsonify({'success': False, 'error': str(e)}), 500
    return jsonify({'success': True})


def create_app(recognizer=None):
    """Tạo Flask app với recognition routes."""
    app = Flask(__name__)
    app.register_blueprint(recognition_bp)
    if recognizer is not None:
        init_recognition(recognizer)
    return app


def run_server(recognizer, host='0.0.0.0', port=5000):
    app = create_app(recognizer)
    print(f"[Web] http://{host}:{port}")
    app.run(host=host, port=port, debug=False, threaded=False)
