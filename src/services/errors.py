"""인식 파이프라인 예외

모든 외부 기능(모델) 실패는 RecognitionError 하위 타입으로 호출자에게 전달.
"""


class RecognitionError(Exception):
    pass


class ImageLoadError(RecognitionError):
    pass


class ModelLoadError(RecognitionError):
    pass


class DetectionError(RecognitionError):
    pass


class ClassificationError(RecognitionError):
    pass
