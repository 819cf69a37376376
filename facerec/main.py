# facerec/main.py
"""
facerec - Main Entry Point.

Usage:
    python -m facerec.main --train data/faces            # Train (mỗi thư mục con = 1 label)
    python -m facerec.main --recognize face.jpg          # Nhận diện một ảnh
    python -m facerec.main --test data/test_faces        # Nhận diện + ghi test data
    python -m facerec.main --serve --port 5000           # Chạy web API
    python -m facerec.main --knn --train data/faces      # Dùng KNN thay cho SVM
"""
import os
import sys
import logging
import argparse

import cv2

from .core.settings import settings as default_settings, Settings
from .core.model_factory import create_recognizer
from .core.caffe_helper import ModelLoadError, NativeLibraryError
from .recognition import TRAINING, RECOGNITION

# === LOGGING SETUP ===
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.pgm')


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='facerec - Caffe feature extraction + SVM/KNN face recognition',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m facerec.main --train data/faces
  python -m facerec.main --recognize face.jpg
  python -m facerec.main --serve --port 8080
        """
    )

    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument('--train', metavar='DIR', help='Train từ thư mục ảnh (mỗi thư mục con = 1 label)')
    action.add_argument('--recognize', metavar='IMAGE', help='Nhận diện một ảnh')
    action.add_argument('--test', metavar='DIR', help='Nhận diện thư mục ảnh có label và ghi test data')
    action.add_argument('--serve', action='store_true', help='Chạy web API')

    classifier = parser.add_mutually_exclusive_group()
    classifier.add_argument('--svm', action='store_true', help='Dùng SVM classifier')
    classifier.add_argument('--knn', action='store_true', help='Dùng KNN classifier')

    parser.add_argument('--config', metavar='PATH', help='Đường dẫn config.json')
    parser.add_argument('--data-dir', metavar='DIR', help='Thư mục dữ liệu (model, classifier)')
    parser.add_argument(
        '--port', '-p',
        type=int,
        metavar='PORT',
        help=f'Web server port (default: {default_settings.WEB_PORT})'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    return parser.parse_args(argv)


def apply_arguments(args, settings):
    """Apply command line arguments to settings."""
    changes = []

    if args.svm:
        settings.CLASSIFICATION_METHOD_SVM = True
        changes.append("Classifier: SVM")
    if args.knn:
        settings.CLASSIFICATION_METHOD_SVM = False
        changes.append("Classifier: KNN")
    if args.data_dir:
        settings.DATA_DIR = os.path.abspath(args.data_dir)
        changes.append(f"Data: {settings.DATA_DIR}")
    if args.port:
        settings.WEB_PORT = args.port
        changes.append(f"Port: {args.port}")
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        changes.append("Verbose: ON")

    return changes


def iter_labeled_images(root):
    """Yield (label, image_path) cho mỗi ảnh trong root/<label>/."""
    for label in sorted(os.listdir(root)):
        label_dir = os.path.join(root, label)
        if not os.path.isdir(label_dir):
            continue
        for name in sorted(os.listdir(label_dir)):
            if name.lower().endswith(IMAGE_EXTENSIONS):
                yield label, os.path.join(label_dir, name)


def _read_image(path):
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        logger.warning(f"Không đọc được ảnh: {path}")
    return img


def run_training(recognizer, root):
    count = 0
    for label, path in iter_labeled_images(root):
        img = _read_image(path)
        if img is None:
            continue
        recognizer.add_image(img, label)
        count += 1
    logger.info(f"Đã thêm {count} ảnh, bắt đầu train...")
    return recognizer.train()


def run_test(recognizer, root):
    """Nhận diện từng ảnh có label, trả về (correct, total)."""
    correct = 0
    total = 0
    for label, path in iter_labeled_images(root):
        img = _read_image(path)
        if img is None:
            continue
        predicted = recognizer.recognize(img, label)
        total += 1
        if predicted == label:
            correct += 1
        logger.debug(f"{path}: expected={label} predicted={predicted or '-'}")
    recognizer.save_test_data()
    return correct, total


def main(argv=None):
    args = parse_arguments(argv)
    settings = Settings(CONFIG_PATH=args.config) if args.config else default_settings

    for change in apply_arguments(args, settings):
        logger.info(change)

    # Web API nhận ảnh training mới nên chạy ở mode TRAINING
    method = TRAINING if (args.train or args.serve) else RECOGNITION
    try:
        recognizer = create_recognizer(settings=settings, method=method)
    except (ModelLoadError, NativeLibraryError) as e:
        logger.error(f"Lỗi khởi tạo: {e}")
        return 1

    if args.train:
        if not run_training(recognizer, args.train):
            logger.error("Train thất bại")
            return 1
        logger.info("✅ Train xong")
    elif args.recognize:
        img = _read_image(args.recognize)
        if img is None:
            return 1
        label = recognizer.recognize(img)
        print(label if label else "(unknown)")
    elif args.test:
        correct, total = run_test(recognizer, args.test)
        accuracy = (100.0 * correct / total) if total else 0.0
        print(f"Accuracy: {correct}/{total} ({accuracy:.1f}%)")
    elif args.serve:
        from .web.server import run_server
        # Dùng model đã lưu để /api/recognize chạy được trước khi train lại
        recognizer.classifier.load_from_file()
        run_server(recognizer, port=settings.WEB_PORT)

    return 0


if __name__ == "__main__":
    sys.exit(main())
