"""HuggingFace Space Detection 구현체"""

# pyright: reportMissingTypeStubs=false

import logging
import time
from typing import Any

import numpy as np
from gradio_client import Client, handle_file
from pydantic import ValidationError

from src.constants import Retry
from src.services.detection.schemas import DetectionResult
from src.services.errors import DetectionError, ModelLoadError
from src.services.image_io import temporary_png

logger = logging.getLogger(__name__)


class HFSpaceDetection:
    """HuggingFace Space API를 사용한 텍스트 영역/문자 박스 탐지

    Note: HF Space는 슬립 상태일 수 있음. 첫 호출 시 웜업 필요.
    """

    def __init__(self, space_url: str, api_timeout: int = 120) -> None:
        """
        Raises:
            ModelLoadError: Space 연결 실패 시
        """
        try:
            self._client = Client(space_url, httpx_kwargs={"timeout": api_timeout})
        except Exception as e:
            raise ModelLoadError(f"Detection Space 연결 실패: {space_url} - {e}") from e

    def detect(self, image: np.ndarray, max_retries: int = Retry.MAX_RETRIES) -> DetectionResult:
        """이미지에서 텍스트 영역과 문자 박스 탐지 (재시도 포함)

        Args:
            image: RGB 이미지
            max_retries: 최대 재시도 횟수

        Returns:
            DetectionResult: 탐지 결과 (정규화 좌표)

        Raises:
            DetectionError: API 호출 반복 실패 또는 응답 스키마 불일치 시 (후자는 재시도 없이 즉시)
        """
        with temporary_png(image) as image_path:
            raw = self._call_with_retry(image_path, max_retries)

        try:
            return DetectionResult.model_validate(raw)
        except ValidationError as e:
            raise DetectionError(f"Detection 응답 스키마 불일치: {e}") from e

    def _call_with_retry(self, image_path: str, max_retries: int) -> Any:
        last_error: Exception | None = None
        for attempt in range(1 + max_retries):
            try:
                return self._client.predict(handle_file(image_path), api_name="/detect")
            except Exception as e:
                last_error = e
                logger.warning(f"Detection API 호출 실패 ({attempt + 1}/{1 + max_retries}): {e}")
                if attempt < max_retries:
                    time.sleep(Retry.BACKOFF_BASE**attempt)

        raise DetectionError(f"Detection API 호출 실패: {last_error}") from last_error
