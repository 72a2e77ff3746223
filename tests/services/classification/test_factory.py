"""Classification 팩토리 테스트"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from src.services.classification import get_classification, set_classification
from src.services.classification.hf_space import HFSpaceClassifier
from src.services.classification.tesseract import TesseractClassifier


class TestGetClassification:
    def setup_method(self) -> None:
        set_classification(None)

    def teardown_method(self) -> None:
        set_classification(None)

    @patch("src.services.classification.hf_space.Client")
    def test_default_returns_hf_space(self, _mock_client: MagicMock) -> None:
        backend = get_classification()
        assert isinstance(backend, HFSpaceClassifier)

    @patch("src.services.classification.hf_space.Client")
    def test_returns_cached_instance(self, mock_client: MagicMock) -> None:
        assert get_classification() is get_classification()
        assert mock_client.call_count == 1

    @patch("src.services.classification.tesseract.pytesseract")
    def test_tesseract_provider(self, _mock_pt: MagicMock) -> None:
        with patch("src.services.classification.get_settings") as mock_settings:
            mock_settings.return_value.classifier_provider = "tesseract"
            mock_settings.return_value.tesseract_cmd = ""
            mock_settings.return_value.classifier_input_size = 28
            backend = get_classification()

        assert isinstance(backend, TesseractClassifier)

    def test_set_classification_overrides_factory(self) -> None:
        mock = MockClassifier()
        set_classification(mock)
        assert get_classification() is mock

    def test_unknown_provider_raises(self) -> None:
        with patch("src.services.classification.get_settings") as mock_settings:
            mock_settings.return_value.classifier_provider = "unknown"
            with pytest.raises(ValueError, match="Unknown classifier provider"):
                get_classification()


class MockClassifier:
    def classify(self, image: np.ndarray) -> list[object]:
        return []
