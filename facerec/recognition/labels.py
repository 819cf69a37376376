# facerec/recognition/labels.py
"""Map hai chiều giữa tên (label) và id số dùng làm response cho cv2.ml."""
import json
import os
from typing import Dict, List


class LabelMap:
    """Label string <-> integer id, id cấp liên tục từ 0."""

    def __init__(self, labels=None):
        self._labels: List[str] = []
        self._ids: Dict[str, int] = {}
        for label in labels or []:
            self.get_or_add(label)

    def get_or_add(self, label: str) -> int:
        if label not in self._ids:
            self._ids[label] = len(self._labels)
            self._labels.append(label)
        return self._ids[label]

    def get_id(self, label: str, default: int = -1) -> int:
        return self._ids.get(label, default)

    def get_label(self, label_id: int) -> str:
        if 0 <= label_id < len(self._labels):
            return self._labels[label_id]
        return ""

    @property
    def labels(self):
        return list(self._labels)

    def __len__(self):
        return len(self._labels)

    def save(self, path):
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._labels, f, ensure_ascii=False, indent=2)

    @classmethod
    def load(cls, path):
        with open(path, 'r', encoding='utf-8') as f:
            return cls(json.load(f))
