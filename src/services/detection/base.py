"""Detection Protocol

교체 가능한 텍스트 영역 탐지 구현을 위한 인터페이스 정의.
모든 좌표는 이미지 크기로 정규화된 단위 좌표 (0..1).
"""

from typing import Protocol

import numpy as np

from src.services.detection.schemas import DetectionResult
from src.services.errors import DetectionError

__all__ = ["DetectionError", "Detector"]


class Detector(Protocol):
    """텍스트 영역 + 문자 박스 탐지 인터페이스

    구현체:
    - HFSpaceDetection: HuggingFace Space API
    """

    def detect(self, image: np.ndarray) -> DetectionResult:
        """이미지에서 텍스트 영역과 영역별 문자 박스 탐지

        Args:
            image: RGB 이미지 (H, W, 3) uint8

        Returns:
            DetectionResult: 탐지 결과 (영역마다 문자 박스, 정규화 좌표)

        Raises:
            DetectionError: API 호출 실패 또는 응답 스키마 불일치 시
        """
        ...
