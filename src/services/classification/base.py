"""Classification Protocol

교체 가능한 문자 분류 구현을 위한 인터페이스 정의.
"""

from typing import Protocol

import cv2
import numpy as np

from src.constants import Alphabet
from src.schemas.ocr import Classification
from src.services.errors import ClassificationError

__all__ = ["CharacterClassifier", "ClassificationError", "rank", "scale_fill"]


class CharacterClassifier(Protocol):
    """문자 이미지 분류 인터페이스

    구현체:
    - HFSpaceClassifier: HuggingFace Space API
    - TesseractClassifier: 로컬 Tesseract (단일 문자 모드)
    """

    def classify(self, image: np.ndarray) -> list[Classification]:
        """원근 보정된 문자 이미지를 분류

        Args:
            image: RGB 문자 이미지 (축 정렬, 임의 크기)

        Returns:
            list[Classification]: 신뢰도 내림차순 후보 목록

        Raises:
            ClassificationError: 모델 호출 실패 또는 응답 형식 불일치 시
        """
        ...


def scale_fill(image: np.ndarray, size: int) -> np.ndarray:
    """종횡비를 무시하고 size x size로 늘리거나 줄임 (모델 입력용)"""
    if image.shape[0] == size and image.shape[1] == size:
        return image
    interpolation = cv2.INTER_AREA if min(image.shape[:2]) > size else cv2.INTER_LINEAR
    return cv2.resize(image, (size, size), interpolation=interpolation)


def rank(candidates: list[Classification]) -> list[Classification]:
    """알파벳 밖 라벨 제거 후 신뢰도 내림차순 정렬"""
    valid = [c for c in candidates if c.label in Alphabet.CHARACTERS and len(c.label) == 1]
    return sorted(valid, key=lambda c: c.confidence, reverse=True)
