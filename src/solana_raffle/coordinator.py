from __future__ import annotations

import logging
from typing import Optional, Protocol

from .errors import RequestAlreadyOutstanding
from .project_constants import NUM_WORDS

log = logging.getLogger(__name__)


class RandomnessOracleClient(Protocol):
    """
    External randomness source.

    Accepts a request now and, at some later time, calls the consumer's
    ``fulfill_settlement(request_id, random_value, caller=self)``.
    """

    def request_randomness(self, num_words: int) -> int:
        ...


class RandomnessRequestCoordinator:
    """Tracks the single outstanding randomness request of a raffle."""

    def __init__(self, oracle: RandomnessOracleClient, num_words: int = NUM_WORDS) -> None:
        self.oracle = oracle
        self.num_words = num_words
        self._outstanding: Optional[int] = None

    @property
    def outstanding(self) -> Optional[int]:
        return self._outstanding

    def issue_request(self) -> int:
        if self._outstanding is not None:
            raise RequestAlreadyOutstanding(self._outstanding)
        request_id = self.oracle.request_randomness(self.num_words)
        self._outstanding = request_id
        log.debug("Randomness request %s outstanding", request_id)
        return request_id

    def consume(self, request_id: int) -> bool:
        if self._outstanding is None or request_id != self._outstanding:
            return False
        self._outstanding = None
        return True
