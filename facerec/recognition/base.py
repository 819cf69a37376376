# facerec/recognition/base.py
"""Interface chung cho recognizer và classifier."""
from abc import ABC, abstractmethod

# Method / mode truyền vào recognizer
TRAINING = 0
RECOGNITION = 1


class Recognition(ABC):
    """
    Capability set dùng chung:
    train, recognize, add_image, save_test_data, save_to_file, load_from_file.

    CaffeRecognizer nhận ảnh, còn SupportVectorMachine / KNearestNeighbor
    nhận feature vector.
    """

    @abstractmethod
    def train(self) -> bool:
        pass

    @abstractmethod
    def recognize(self, data, expected_label=None) -> str:
        pass

    @abstractmethod
    def add_image(self, data, label) -> None:
        pass

    @abstractmethod
    def save_test_data(self) -> None:
        pass

    @abstractmethod
    def save_to_file(self) -> None:
        pass

    @abstractmethod
    def load_from_file(self) -> None:
        pass
