from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Detection
    detection_provider: str = "hf_space"  # "hf_space"
    hf_detector_space_url: str = "symbols/text-detector"
    hf_api_timeout: int = 120

    # Classification
    classifier_provider: str = "hf_space"  # "hf_space" | "tesseract"
    hf_classifier_space_url: str = "symbols/char-classifier"
    classifier_input_size: int = 28  # 모델 입력 한 변 (px), scale-fill
    tesseract_cmd: str = ""  # 비어 있으면 PATH의 tesseract 사용

    # Worker
    max_workers: int = 4


@lru_cache
def get_settings() -> Settings:
    return Settings()
