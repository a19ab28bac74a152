import pytest

from featuregen.exceptions import AnalysisInProgressError
from featuregen.inflight import InFlightRegistry


class TestInFlightRegistry:
    def test_claim_and_release(self):
        registry = InFlightRegistry()

        with registry.claim(1):
            assert registry.is_active(1)
        assert not registry.is_active(1)

    def test_second_claim_for_same_feature_fails(self):
        registry = InFlightRegistry()

        with registry.claim(1):
            with pytest.raises(AnalysisInProgressError, match="feature 1"):
                with registry.claim(1):
                    pass
        assert not registry.is_active(1)

    def test_different_features_are_independent(self):
        registry = InFlightRegistry()

        with registry.claim(1):
            with registry.claim(2):
                assert registry.is_active(1) and registry.is_active(2)

    def test_released_on_error(self):
        registry = InFlightRegistry()

        with pytest.raises(RuntimeError):
            with registry.claim(3):
                raise RuntimeError("scoring failed")
        assert registry.try_acquire(3)
