"""
In-flight Analysis Registry
Tracks which features currently have a complexity analysis running
"""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Set

from .exceptions import AnalysisInProgressError

logger = logging.getLogger(__name__)


class InFlightRegistry:
    """
    Per-feature in-flight markers.

    At most one analysis may run for a given feature id; claims for
    different ids are independent.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Set[int] = set()

    def is_active(self, feature_id: int) -> bool:
        with self._lock:
            return feature_id in self._active

    def try_acquire(self, feature_id: int) -> bool:
        """Mark a feature as in-flight; False if it already is"""
        with self._lock:
            if feature_id in self._active:
                return False
            self._active.add(feature_id)
            return True

    def release(self, feature_id: int) -> None:
        with self._lock:
            self._active.discard(feature_id)

    @contextmanager
    def claim(self, feature_id: int) -> Iterator[None]:
        """
        Hold the in-flight marker for the duration of the block.

        Raises:
            AnalysisInProgressError: another analysis holds the marker
        """
        if not self.try_acquire(feature_id):
            raise AnalysisInProgressError(feature_id)
        logger.debug(f"Claimed analysis slot for feature {feature_id}")
        try:
            yield
        finally:
            self.release(feature_id)
            logger.debug(f"Released analysis slot for feature {feature_id}")
