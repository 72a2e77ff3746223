"""Classification 모듈

사용법:
    from src.services.classification import get_classification

    classifier = get_classification()
    candidates = classifier.classify(char_image)

백엔드 선택 (.env CLASSIFIER_PROVIDER):
    - "hf_space": HuggingFace Space API (기본값)
    - "tesseract": 로컬 Tesseract
"""

from src.config import get_settings
from src.services.classification.base import CharacterClassifier, ClassificationError

__all__ = [
    "CharacterClassifier",
    "ClassificationError",
    "get_classification",
    "set_classification",
]

_classifier: CharacterClassifier | None = None


def get_classification() -> CharacterClassifier:
    """설정에 따라 classification 백엔드 반환

    Raises:
        ModelLoadError: 백엔드 초기화 실패 시 (Tesseract 미설치 등)
    """
    global _classifier
    if _classifier is None:
        settings = get_settings()
        if settings.classifier_provider == "hf_space":
            from src.services.classification.hf_space import HFSpaceClassifier

            _classifier = HFSpaceClassifier(
                space_url=settings.hf_classifier_space_url,
                api_timeout=settings.hf_api_timeout,
                input_size=settings.classifier_input_size,
            )
        elif settings.classifier_provider == "tesseract":
            from src.services.classification.tesseract import TesseractClassifier

            _classifier = TesseractClassifier(
                tesseract_cmd=settings.tesseract_cmd,
                input_size=settings.classifier_input_size,
            )
        else:
            raise ValueError(f"Unknown classifier provider: {settings.classifier_provider!r}")
    return _classifier


def set_classification(classifier: CharacterClassifier | None) -> None:
    """classification 백엔드 설정 (테스트용)"""
    global _classifier
    _classifier = classifier
