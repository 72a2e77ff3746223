"""Tesseract 기반 문자 분류 구현체"""

# pyright: reportMissingTypeStubs=false

import cv2
import numpy as np
import pytesseract
from pytesseract import Output

from src.constants import Alphabet
from src.schemas.ocr import Classification
from src.services.classification.base import rank, scale_fill
from src.services.errors import ClassificationError, ModelLoadError

BORDER = 8  # 가장자리에 붙은 글자는 Tesseract가 놓치는 경우가 많음


def _cfg() -> str:
    # psm 10 = 이미지 전체를 문자 하나로 취급
    return f"--oem 1 --psm 10 -c tessedit_char_whitelist={Alphabet.CHARACTERS}"


class TesseractClassifier:
    """로컬 Tesseract를 단일 문자 분류기로 사용"""

    def __init__(self, tesseract_cmd: str = "", input_size: int = 28) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        try:
            pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise ModelLoadError(f"Tesseract 실행 파일을 찾을 수 없음: {e}") from e
        self._input_size = input_size

    def classify(self, image: np.ndarray) -> list[Classification]:
        gray = cv2.cvtColor(scale_fill(image, self._input_size), cv2.COLOR_RGB2GRAY)
        padded = cv2.copyMakeBorder(
            gray, BORDER, BORDER, BORDER, BORDER, cv2.BORDER_REPLICATE
        )

        try:
            data = pytesseract.image_to_data(padded, output_type=Output.DICT, config=_cfg())
        except pytesseract.TesseractError as e:
            raise ClassificationError(f"Tesseract 실행 실패: {e}") from e

        candidates = rank(self._to_candidates(data))
        if not candidates:
            raise ClassificationError("분류 결과 없음")
        return candidates

    def _to_candidates(self, data: dict[str, list]) -> list[Classification]:
        candidates: list[Classification] = []
        for text, conf in zip(data.get("text", []), data.get("conf", [])):
            label = str(text or "").strip()
            try:
                score = float(conf)
            except (TypeError, ValueError):
                continue
            if not label or score < 0:
                continue
            # psm 10 에서도 두 글자 이상이 붙어 나올 수 있음, 첫 글자만 사용
            candidates.append(Classification(label=label[0], confidence=score / 100.0))
        return candidates
