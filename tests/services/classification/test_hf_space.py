"""HFSpaceClassifier 구현체 테스트"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from src.schemas.ocr import Classification
from src.services.classification.hf_space import HFSpaceClassifier
from src.services.errors import ClassificationError, ModelLoadError

HF_SPACE_MODULE = "src.services.classification.hf_space"

CHAR_IMAGE = np.full((40, 20, 3), 128, dtype=np.uint8)

MOCK_LABEL_RESPONSE = {
    "label": "B",
    "confidences": [
        {"label": "8", "confidence": 0.2},
        {"label": "B", "confidence": 0.75},
        {"label": "E", "confidence": 0.05},
    ],
}


@patch(f"{HF_SPACE_MODULE}.handle_file", return_value="mock_file_handle")
class TestHFSpaceClassifier:
    def _classifier(self, mock_client_cls: MagicMock, response: object) -> HFSpaceClassifier:
        mock_client_cls.return_value.predict.return_value = response
        return HFSpaceClassifier(space_url="test/space", api_timeout=10, input_size=28)

    def test_classify_returns_ranked_candidates(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            classifier = self._classifier(mock_client_cls, MOCK_LABEL_RESPONSE)
            results = classifier.classify(CHAR_IMAGE)

        assert [r.label for r in results] == ["B", "8", "E"]
        assert results[0] == Classification(label="B", confidence=0.75)

    def test_label_only_response(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            classifier = self._classifier(mock_client_cls, {"label": "Z"})
            results = classifier.classify(CHAR_IMAGE)

        assert results == [Classification(label="Z", confidence=1.0)]

    def test_labels_outside_alphabet_dropped(self, _mock_handle: MagicMock) -> None:
        response = {
            "label": "a",
            "confidences": [
                {"label": "a", "confidence": 0.9},
                {"label": "7", "confidence": 0.1},
            ],
        }
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            classifier = self._classifier(mock_client_cls, response)
            results = classifier.classify(CHAR_IMAGE)

        assert [r.label for r in results] == ["7"]

    def test_empty_response_raises(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            classifier = self._classifier(mock_client_cls, {"confidences": []})

            with pytest.raises(ClassificationError, match="분류 결과 없음"):
                classifier.classify(CHAR_IMAGE)

    def test_non_dict_response_raises(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            classifier = self._classifier(mock_client_cls, ["A"])

            with pytest.raises(ClassificationError, match="dict가 아님"):
                classifier.classify(CHAR_IMAGE)

    def test_api_failure_raises(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls:
            mock_client_cls.return_value.predict.side_effect = Exception("API 장애")
            classifier = HFSpaceClassifier(space_url="test/space")

            with pytest.raises(ClassificationError, match="호출 실패"):
                classifier.classify(CHAR_IMAGE)

    def test_connection_failure_raises_model_load_error(self, _mock_handle: MagicMock) -> None:
        with patch(f"{HF_SPACE_MODULE}.Client", side_effect=Exception("Space not found")):
            with pytest.raises(ModelLoadError, match="연결 실패"):
                HFSpaceClassifier(space_url="missing/space")

    def test_input_scale_filled_before_upload(self, _mock_handle: MagicMock) -> None:
        with (
            patch(f"{HF_SPACE_MODULE}.Client") as mock_client_cls,
            patch(f"{HF_SPACE_MODULE}.temporary_png") as mock_png,
        ):
            mock_png.return_value.__enter__.return_value = "char.png"
            classifier = self._classifier(mock_client_cls, MOCK_LABEL_RESPONSE)
            classifier.classify(CHAR_IMAGE)

        sent = mock_png.call_args.args[0]
        assert sent.shape == (28, 28, 3)
