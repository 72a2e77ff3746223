"""문자 인식 데이터 모델

Detection → Rectification → Classification 전체에서 사용하는 공통 스키마.

좌표계: 원점은 이미지 좌상단, x는 오른쪽, y는 아래쪽으로 증가.
- NormalizedBox: 이미지 크기로 나눈 단위 좌표 (0..1, 범위 밖 값 허용)
- PixelBox / BBox: 원본 이미지 기준 절대 좌표(px)
"""

import math
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Point(BaseModel):
    x: float
    y: float

    @field_validator("x", "y")
    @classmethod
    def reject_non_finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("Coordinate is NaN or Inf")
        return v

    def scaled(self, sx: float, sy: float) -> "Point":
        return Point(x=self.x * sx, y=self.y * sy)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class BBox(BaseModel):
    """바운딩 박스 [x1, y1, x2, y2]

    x1 <= x2, y1 <= y2 보장 (역전된 경우 자동 정렬).
    경계 검사에 쓰이므로 음수/범위 밖 좌표는 그대로 유지.
    """

    x1: float
    y1: float
    x2: float
    y2: float

    @model_validator(mode="after")
    def validate_and_normalize(self) -> Self:
        if self.x1 > self.x2:
            self.x1, self.x2 = self.x2, self.x1
        if self.y1 > self.y2:
            self.y1, self.y2 = self.y2, self.y1
        return self

    @classmethod
    def from_points(cls, points: list[Point]) -> "BBox":
        """점들을 감싸는 축 정렬 사각형"""
        if not points:
            raise ValueError("BBox requires at least one point")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(x1=min(xs), y1=min(ys), x2=max(xs), y2=max(ys))

    def to_tuple(self) -> tuple[int, int, int, int]:
        """정수 튜플로 변환 (numpy 슬라이싱 등에 사용)

        round()를 사용하여 반올림 (truncation 방지)
        """
        return (round(self.x1), round(self.y1), round(self.x2), round(self.y2))

    def is_within(self, width: int, height: int) -> bool:
        """이미지 영역 [0, width] x [0, height] 안에 완전히 포함되는지"""
        return self.x1 >= 0 and self.y1 >= 0 and self.x2 <= width and self.y2 <= height


class NormalizedBox(BaseModel):
    """문자 하나를 감싸는 사각형 (단위 좌표)

    Detector가 보고한 값을 그대로 보존하며 0..1로 클램핑하지 않음.
    """

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    @classmethod
    def from_list(cls, coords: list[list[float]]) -> "NormalizedBox":
        """폴리곤 리스트에서 NormalizedBox 생성

        Args:
            coords: [[x, y], ...] 4개, 시계 방향 (TL, TR, BR, BL)

        Raises:
            ValueError: 점 개수가 4개가 아니거나 좌표가 2개가 아닌 경우
        """
        if len(coords) != 4:
            raise ValueError(f"Box requires 4 points, got {len(coords)}")
        for i, pt in enumerate(coords):
            if len(pt) != 2:
                raise ValueError(f"Point {i} requires 2 coordinates, got {len(pt)}")

        tl, tr, br, bl = (Point(x=pt[0], y=pt[1]) for pt in coords)
        return cls(top_left=tl, top_right=tr, bottom_left=bl, bottom_right=br)

    def corners(self) -> list[Point]:
        """(TL, TR, BR, BL) 순서"""
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]


class PixelBox(BaseModel):
    """NormalizedBox를 이미지 크기로 스케일한 결과 (px)"""

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    def corners(self) -> list[Point]:
        """(TL, TR, BR, BL) 순서"""
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]

    @property
    def bbox(self) -> BBox:
        return BBox.from_points(self.corners())


class Region(BaseModel):
    """탐지된 텍스트 영역 (단어 하나)

    index는 detection 결과의 순서를 유지하며,
    character_boxes 순서가 곧 문자 순서.
    """

    index: int
    character_boxes: list[NormalizedBox] = []


class Classification(BaseModel):
    """문자 분류 결과 (단일 후보)"""

    label: str
    confidence: float

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("Confidence is NaN")
        return min(1.0, max(0.0, v))


class FailureReason(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    RECTIFICATION_FAILED = "rectification_failed"
    CLASSIFICATION_FAILED = "classification_failed"


class CharacterFailure(BaseModel):
    """건너뛴 문자 박스 기록"""

    model_config = ConfigDict(frozen=True)

    region_index: int
    box_index: int
    reason: FailureReason
    detail: str = ""


class Prediction(BaseModel):
    """전체 인식 결과

    전달 후 변경되지 않도록 tuple로 보관.
    words는 detection 순서대로 영역당 하나 (문자가 모두 빠진 영역은 빈 문자열).
    """

    model_config = ConfigDict(frozen=True)

    words: tuple[str, ...]
    failures: tuple[CharacterFailure, ...] = ()

    @property
    def is_partial(self) -> bool:
        """일부 문자가 누락되었는지"""
        return bool(self.failures)
