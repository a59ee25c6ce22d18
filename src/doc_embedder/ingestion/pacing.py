"""Fixed-interval request pacing.

The ingestion loop suspends for a fixed time after every passage and
between documents so embedding and vector-store providers are never hit in
bursts, including when calls fail.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class FixedIntervalPacer:
    """Sleep a fixed amount after each passage and between documents.

    Parameters
    ----------
    passage_delay:
        Seconds to wait after each passage has been embedded / stored.
    document_delay:
        Seconds to wait before starting the next document.
    sleep:
        Blocking sleep function; injectable for tests.
    """

    def __init__(
        self,
        passage_delay: float = 2.0,
        document_delay: float = 3.0,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if passage_delay < 0 or document_delay < 0:
            raise ValueError("Pacing delays must be >= 0")
        self.passage_delay = passage_delay
        self.document_delay = document_delay
        self._sleep = sleep

    @classmethod
    def disabled(cls) -> FixedIntervalPacer:
        """A pacer that never sleeps (local backends, tests)."""
        return cls(0.0, 0.0)

    def after_passage(self) -> None:
        if self.passage_delay:
            self._sleep(self.passage_delay)

    def between_documents(self) -> None:
        if self.document_delay:
            logger.debug("Waiting %.1fs before next document", self.document_delay)
            self._sleep(self.document_delay)
