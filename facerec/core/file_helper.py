# facerec/core/file_helper.py
"""
File helper - quản lý thư mục dữ liệu và ghi file.

Layout:
    <DATA_DIR>/caffe/   model, weights, ảnh tạm cho forward pass
    <DATA_DIR>/svm/     SVM model, label map, training/test data
    <DATA_DIR>/knn/     KNN training set, label map, test data
"""
import os
import cv2
import numpy as np


class FileHelper:
    """Đường dẫn dữ liệu và các thao tác ghi file dùng chung."""

    def __init__(self, data_dir):
        self.data_dir = data_dir
        self.caffe_path = os.path.join(data_dir, 'caffe')
        self.svm_path = os.path.join(data_dir, 'svm')
        self.knn_path = os.path.join(data_dir, 'knn')

    @staticmethod
    def ensure_dir(path):
        os.makedirs(path, exist_ok=True)
        return path

    def save_image(self, name, img, directory, ext='.png'):
        """
        Ghi ảnh ra `directory/name.ext` và trả về path.

        Raises:
            OSError: nếu thư mục không tồn tại hoặc OpenCV không ghi được file
        """
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"Thư mục không tồn tại: {directory}")
        path = os.path.join(directory, name + ext)
        try:
            ok = cv2.imwrite(path, img)
        except cv2.error as e:
            raise OSError(f"Không ghi được ảnh {path}: {e}") from e
        if not ok:
            raise OSError(f"Không ghi được ảnh {path}")
        return path

    @staticmethod
    def format_libsvm_line(label_id, vector):
        """`<label> 1:<v1> 2:<v2> ...` - index bắt đầu từ 1 như libsvm."""
        values = np.asarray(vector, dtype=np.float32).ravel()
        features = " ".join(f"{i}:{float(v):g}" for i, v in enumerate(values, start=1))
        return f"{int(label_id)} {features}".rstrip()

    def write_libsvm(self, path, records, append=False):
        """
        Ghi danh sách (label_id, vector) ra file text format libsvm.
        append=True ghi nối vào cuối file có sẵn.

        Returns:
            Số dòng đã ghi
        """
        self.ensure_dir(os.path.dirname(path))
        count = 0
        with open(path, "a" if append else "w", encoding="utf-8") as f:
            for label_id, vector in records:
                f.write(self.format_libsvm_line(label_id, vector) + "\n")
                count += 1
        return count
