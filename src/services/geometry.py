"""문자 박스 좌표 변환 및 원근 보정"""

import math

import cv2
import numpy as np

from src.constants import Limits
from src.schemas.ocr import NormalizedBox, PixelBox, Point


class RectificationError(ValueError):
    pass


def to_pixel_box(box: NormalizedBox, width: int, height: int) -> PixelBox:
    """정규화 좌표 네 꼭짓점을 (width, height) 스케일로 픽셀 좌표 변환"""
    return PixelBox(
        top_left=box.top_left.scaled(width, height),
        top_right=box.top_right.scaled(width, height),
        bottom_left=box.bottom_left.scaled(width, height),
        bottom_right=box.bottom_right.scaled(width, height),
    )


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def rectified_size(box: PixelBox) -> tuple[int, int]:
    """보정 후 (width, height): 마주보는 두 변 중 긴 쪽 기준"""
    width = max(_distance(box.top_left, box.top_right), _distance(box.bottom_left, box.bottom_right))
    height = max(_distance(box.top_left, box.bottom_left), _distance(box.top_right, box.bottom_right))
    return (
        max(Limits.MIN_CHAR_SIDE, round(width)),
        max(Limits.MIN_CHAR_SIDE, round(height)),
    )


def rectify(image: np.ndarray, box: PixelBox) -> np.ndarray:
    """박스 외접 사각형으로 crop 후 네 꼭짓점을 축 정렬 사각형으로 원근 보정

    Args:
        image: RGB 이미지 (H, W, 3)
        box: 이미지 경계 안에 있는 픽셀 좌표 박스

    Returns:
        보정된 문자 이미지 (h, w, 3)

    Raises:
        RectificationError: 면적 0인 박스, 퇴화된 사각형, cv2 변환 실패
    """
    bbox = box.bbox
    x1, y1, x2, y2 = bbox.to_tuple()
    if x2 <= x1 or y2 <= y1:
        raise RectificationError(f"면적이 0인 박스: {bbox.to_tuple()}")

    crop = image[y1:y2, x1:x2]

    # crop 좌표계로 이동
    src = np.array(
        [[p.x - x1, p.y - y1] for p in box.corners()],
        dtype=np.float32,
    )
    out_w, out_h = rectified_size(box)
    dst = np.array([[0, 0], [out_w, 0], [out_w, out_h], [0, out_h]], dtype=np.float32)

    try:
        matrix = cv2.getPerspectiveTransform(src, dst)
    except cv2.error as e:
        raise RectificationError(f"원근 보정 실패: {e}") from e

    if not np.isfinite(matrix).all() or abs(np.linalg.det(matrix)) < 1e-9:
        raise RectificationError("퇴화된 사각형 (세 점 이상이 한 직선 위)")

    try:
        return cv2.warpPerspective(crop, matrix, (out_w, out_h), flags=cv2.INTER_LINEAR)
    except cv2.error as e:
        raise RectificationError(f"원근 보정 실패: {e}") from e
