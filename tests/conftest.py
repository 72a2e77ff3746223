from io import BytesIO

import numpy as np
from PIL import Image

# 패치별 밝기 → 라벨 (FakeClassifier가 문자 이미지 중앙 픽셀로 판별)
PATCH_LABELS = {10: "A", 20: "B", 30: "C", 40: "D", 50: "E", 60: "F"}


def make_test_image(width: int = 800, height: int = 1200, fmt: str = "PNG") -> BytesIO:
    """테스트용 실제 이미지 바이트 생성"""
    img = Image.new("RGB", (width, height), color="red")
    buf = BytesIO()
    img.save(buf, format=fmt)
    buf.seek(0)
    return buf


def make_patch_image(
    patches: list[tuple[float, float, float, float, int]],
    width: int = 200,
    height: int = 100,
) -> np.ndarray:
    """흰 배경에 단색 패치를 그린 RGB 이미지

    Args:
        patches: (x1, y1, x2, y2, value) 정규화 좌표 + 밝기
    """
    image = np.full((height, width, 3), 255, dtype=np.uint8)
    for x1, y1, x2, y2, value in patches:
        image[round(y1 * height) : round(y2 * height), round(x1 * width) : round(x2 * width)] = value
    return image


def rect_polygon(x1: float, y1: float, x2: float, y2: float) -> list[list[float]]:
    """축 정렬 사각형 → [[x, y] x 4] (TL, TR, BR, BL)"""
    return [[x1, y1], [x2, y1], [x2, y2], [x1, y2]]
