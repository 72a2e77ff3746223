"""문자 단위 텍스트 인식 코디네이터

Detection → (영역별) 문자 박스 스케일 → Crop/원근 보정 → Classification → 단어 조합.
Detector/Classifier는 Protocol 기반 모듈을 팩토리 또는 생성자 주입으로 받음.

호출 단위 상태(단어 목록, 영역 누적 문자열, 실패 기록)는 모두 지역 변수이므로
같은 인스턴스에서 동시에 여러 submit을 호출해도 결과가 섞이지 않음.
"""

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType

import numpy as np

from src.config import get_settings
from src.schemas.ocr import CharacterFailure, FailureReason, NormalizedBox, Prediction, Region
from src.services.classification import CharacterClassifier, get_classification
from src.services.detection import Detector, get_detection
from src.services.detection.schemas import DetectionResult
from src.services.errors import ClassificationError, DetectionError, RecognitionError
from src.services.geometry import RectificationError, rectify, to_pixel_box
from src.services.image_io import ImageSource, load_image

logger = logging.getLogger(__name__)

PredictionHandler = Callable[[Prediction | RecognitionError], None]


def build_regions(detection: DetectionResult) -> list[Region]:
    """DetectionResult → Region 리스트 변환 (detection 순서 유지)"""
    return [
        Region(
            index=i,
            character_boxes=[NormalizedBox.from_list(box) for box in detected.boxes],
        )
        for i, detected in enumerate(detection.regions)
    ]


def build_prediction(
    image: np.ndarray, regions: list[Region], classifier: CharacterClassifier
) -> Prediction:
    """영역별 문자 박스를 분류하여 Prediction 생성

    문자 박스 하나가 실패해도 영역 처리는 계속되며, 실패는 failures에 기록.
    모든 문자가 빠진 영역도 빈 문자열로 words에 포함.
    """
    words: list[str] = []
    failures: list[CharacterFailure] = []

    for region in regions:
        chars: list[str] = []

        for box_index, box in enumerate(region.character_boxes):
            label, skipped = _recognize_character(image, box, classifier)
            if skipped is not None:
                reason, detail = skipped
                failure = CharacterFailure(
                    region_index=region.index,
                    box_index=box_index,
                    reason=reason,
                    detail=detail,
                )
                logger.warning(
                    f"문자 박스 건너뜀 (region={region.index}, box={box_index}): "
                    f"{failure.reason.value} {failure.detail}"
                )
                failures.append(failure)
                continue
            chars.append(label)

        words.append("".join(chars))

    return Prediction(words=tuple(words), failures=tuple(failures))


def _recognize_character(
    image: np.ndarray, box: NormalizedBox, classifier: CharacterClassifier
) -> tuple[str, tuple[FailureReason, str] | None]:
    """문자 박스 1개 인식, 실패 시 (사유, 상세) 반환"""
    height, width = image.shape[:2]
    pixel_box = to_pixel_box(box, width, height)

    if not pixel_box.bbox.is_within(width, height):
        return "", (FailureReason.OUT_OF_BOUNDS, f"bbox={pixel_box.bbox.to_tuple()}")

    try:
        char_image = rectify(image, pixel_box)
    except RectificationError as e:
        return "", (FailureReason.RECTIFICATION_FAILED, str(e))

    try:
        candidates = classifier.classify(char_image)
    except ClassificationError as e:
        return "", (FailureReason.CLASSIFICATION_FAILED, str(e))
    except Exception as e:
        logger.exception(f"Classifier 예기치 않은 오류: {e}")
        return "", (FailureReason.CLASSIFICATION_FAILED, f"{type(e).__name__}: {e}")

    if not candidates:
        return "", (FailureReason.CLASSIFICATION_FAILED, "분류 결과 없음")

    best = max(candidates, key=lambda c: c.confidence)
    return best.label, None


def _check_image_size(detection: DetectionResult, image: np.ndarray) -> None:
    """detector가 본 이미지 크기와 입력 크기 비교 (좌표는 정규화되어 있으므로 경고만)"""
    if detection.image_size is None:
        return
    height, width = image.shape[:2]
    reported = (detection.image_size.width, detection.image_size.height)
    if reported != (width, height):
        logger.warning(f"Detection 이미지 크기 불일치: 보고={reported}, 입력={(width, height)}")


class TextRecognizer:
    """이미지 → 단어 목록 인식기

    사용법:
        with TextRecognizer() as recognizer:
            prediction = recognizer.predict(image)          # 동기
            future = recognizer.submit(image)               # 백그라운드 스레드
            prediction = await recognizer.predict_async(image)
    """

    def __init__(
        self,
        detector: Detector | None = None,
        classifier: CharacterClassifier | None = None,
        max_workers: int | None = None,
    ) -> None:
        """
        Raises:
            ModelLoadError: 기본 백엔드 초기화 실패 시
        """
        self._detector = detector or get_detection()
        self._classifier = classifier or get_classification()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or get_settings().max_workers,
            thread_name_prefix="text-recognizer",
        )

    def predict(self, image: ImageSource) -> Prediction:
        """이미지 1장 인식 (호출 스레드에서 실행)

        Raises:
            ImageLoadError: 이미지 디코딩 실패 시
            DetectionError: 탐지 실패 또는 응답 형식 불일치 시
        """
        pixels = load_image(image)

        try:
            detection = self._detector.detect(pixels)
        except DetectionError:
            raise
        except Exception as e:
            raise DetectionError(f"Detection 실패: {e}") from e

        try:
            regions = build_regions(detection)
        except ValueError as e:
            raise DetectionError(f"Detection 결과 좌표 오류: {e}") from e
        _check_image_size(detection, pixels)
        logger.info(f"Detection 완료: {len(regions)}개 영역")

        prediction = build_prediction(pixels, regions, self._classifier)
        logger.info(
            f"인식 완료: {len(prediction.words)}개 단어, {len(prediction.failures)}개 문자 누락"
        )
        return prediction

    def submit(self, image: ImageSource) -> "Future[Prediction]":
        """백그라운드 스레드에서 predict 실행, 완료는 Future로 정확히 한 번 전달"""
        return self._executor.submit(self.predict, image)

    def make_predictions(
        self,
        image: ImageSource,
        completion_handler: PredictionHandler,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "Future[Prediction]":
        """콜백 방식 인식

        completion_handler는 Prediction 또는 RecognitionError 중 하나를 정확히 한 번 받음.
        loop가 주어지면 해당 이벤트 루프 스레드에서 호출, 없으면 워커 스레드에서 호출.
        """

        def _deliver(future: "Future[Prediction]") -> None:
            if future.cancelled():
                _handle(RecognitionError("인식이 취소됨"))
                return

            error = future.exception()
            if error is None:
                outcome: Prediction | RecognitionError = future.result()
            elif isinstance(error, RecognitionError):
                outcome = error
            else:
                outcome = RecognitionError(f"인식 실패: {error}")
                outcome.__cause__ = error

            _handle(outcome)

        def _handle(outcome: Prediction | RecognitionError) -> None:
            if loop is not None:
                loop.call_soon_threadsafe(completion_handler, outcome)
            else:
                completion_handler(outcome)

        try:
            future = self.submit(image)
        except RuntimeError as e:
            # close() 이후 호출: 실패도 핸들러로 전달
            future = Future()
            future.set_exception(RecognitionError(f"인식기가 종료됨: {e}"))
        future.add_done_callback(_deliver)
        return future

    async def predict_async(self, image: ImageSource) -> Prediction:
        """현재 이벤트 루프에서 결과를 기다림 (계산은 워커 스레드)"""
        return await asyncio.wrap_future(self.submit(image))

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "TextRecognizer":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
