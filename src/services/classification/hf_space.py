"""HuggingFace Space Classification 구현체"""

# pyright: reportMissingTypeStubs=false

from typing import Any

import numpy as np
from gradio_client import Client, handle_file

from src.schemas.ocr import Classification
from src.services.classification.base import rank, scale_fill
from src.services.errors import ClassificationError, ModelLoadError
from src.services.image_io import temporary_png


class HFSpaceClassifier:
    """HuggingFace Space API를 사용한 단일 문자 분류

    Space는 gradio Label 출력을 반환한다고 가정:
        {"label": "A", "confidences": [{"label": "A", "confidence": 0.93}, ...]}
    """

    def __init__(self, space_url: str, api_timeout: int = 120, input_size: int = 28) -> None:
        try:
            self._client = Client(space_url, httpx_kwargs={"timeout": api_timeout})
        except Exception as e:
            raise ModelLoadError(f"Classification Space 연결 실패: {space_url} - {e}") from e
        self._input_size = input_size

    def classify(self, image: np.ndarray) -> list[Classification]:
        """문자 이미지 1개 분류

        Raises:
            ClassificationError: API 호출 실패, 빈 응답, 알파벳 밖 라벨만 반환된 경우
        """
        resized = scale_fill(image, self._input_size)

        with temporary_png(resized) as image_path:
            try:
                raw = self._client.predict(handle_file(image_path), api_name="/classify")
            except Exception as e:
                raise ClassificationError(f"Classification API 호출 실패: {e}") from e

        candidates = rank(self._parse(raw))
        if not candidates:
            raise ClassificationError(f"분류 결과 없음: {raw!r}")
        return candidates

    def _parse(self, raw: Any) -> list[Classification]:
        if not isinstance(raw, dict):
            raise ClassificationError(f"응답이 dict가 아님: {type(raw).__name__}")

        confidences = raw.get("confidences")
        if confidences:
            try:
                return [
                    Classification(label=str(item["label"]), confidence=float(item["confidence"]))
                    for item in confidences
                ]
            except (KeyError, TypeError, ValueError) as e:
                raise ClassificationError(f"confidences 파싱 실패: {e}") from e

        # confidences 없이 label만 오는 경우
        label = raw.get("label")
        if label is None:
            return []
        return [Classification(label=str(label), confidence=1.0)]
