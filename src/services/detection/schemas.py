"""Detection 스키마"""

from pydantic import BaseModel, field_validator


class ImageSize(BaseModel):
    width: int
    height: int


class DetectedRegion(BaseModel):
    """탐지된 텍스트 영역 1개

    boxes 각 항목은 문자 하나의 폴리곤 [[x, y] x 4] (TL, TR, BR, BL).
    좌표는 이미지 크기로 정규화된 값 (0..1).
    """

    boxes: list[list[list[float]]]

    @field_validator("boxes")
    @classmethod
    def validate_polygons(cls, boxes: list[list[list[float]]]) -> list[list[list[float]]]:
        for i, box in enumerate(boxes):
            if len(box) != 4 or any(len(pt) != 2 for pt in box):
                raise ValueError(f"Box {i} must have 4 [x, y] points")
        return boxes


class DetectionResult(BaseModel):
    """탐지 결과

    regions는 detector가 보고한 순서 그대로 유지.
    """

    image_size: ImageSize | None = None
    regions: list[DetectedRegion]
