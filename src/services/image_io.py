"""이미지 입출력 유틸리티"""

import io
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from src.services.errors import ImageLoadError

ImageSource = str | Path | bytes | Image.Image | np.ndarray


def load_image(source: ImageSource) -> np.ndarray:
    """입력을 RGB uint8 배열 (H, W, 3)로 디코딩

    Args:
        source: 파일 경로, 인코딩된 바이트, PIL 이미지 또는 numpy 배열

    Raises:
        ImageLoadError: 디코딩 불가 또는 빈 이미지
    """
    if isinstance(source, np.ndarray):
        image = _normalize_array(source)
    elif isinstance(source, Image.Image):
        image = np.array(source.convert("RGB"))
    else:
        image = _decode(source)

    if image.size == 0:
        raise ImageLoadError("빈 이미지입니다")
    return image


def encode_png(image: np.ndarray) -> bytes:
    """numpy 배열을 PNG 바이트로 변환"""
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


@contextmanager
def temporary_png(image: np.ndarray) -> Iterator[str]:
    """이미지를 임시 PNG 파일로 저장하고 경로 반환 (블록 종료 시 삭제)

    gradio_client.handle_file 처럼 파일 경로만 받는 API용.
    """
    fd, path = tempfile.mkstemp(suffix=".png")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(encode_png(image))
        yield path
    finally:
        Path(path).unlink(missing_ok=True)


def _decode(source: str | Path | bytes) -> np.ndarray:
    try:
        if isinstance(source, bytes):
            with Image.open(io.BytesIO(source)) as img:
                return np.array(img.convert("RGB"))
        with Image.open(source) as img:
            return np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"이미지를 읽을 수 없음: {e}") from e


def _normalize_array(arr: np.ndarray) -> np.ndarray:
    """Grayscale/RGBA 배열을 RGB uint8로 통일"""
    if arr.ndim == 2:
        arr = np.stack([arr] * 3, axis=-1)
    elif arr.ndim == 3 and arr.shape[2] == 4:
        arr = arr[:, :, :3]
    elif arr.ndim != 3 or arr.shape[2] != 3:
        raise ImageLoadError(f"지원하지 않는 배열 형태: {arr.shape}")
    if arr.dtype != np.uint8:
        raise ImageLoadError(f"uint8 배열만 지원: {arr.dtype}")
    return np.ascontiguousarray(arr)
