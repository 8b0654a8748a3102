from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from .errors import UpkeepNotNeeded

log = logging.getLogger(__name__)


class Settleable(Protocol):
    def check_eligibility(self) -> bool:
        ...

    def initiate_settlement(self) -> int:
        ...


class AutomationTrigger:
    """Polls a raffle and starts settlement whenever it is eligible."""

    def __init__(
        self,
        raffle: Settleable,
        poll_interval_s: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.raffle = raffle
        self.poll_interval_s = poll_interval_s
        self._sleep = sleep

    def poll_once(self) -> Optional[int]:
        if not self.raffle.check_eligibility():
            return None
        try:
            return self.raffle.initiate_settlement()
        except UpkeepNotNeeded as e:
            # Eligibility changed between check and perform; re-check next poll.
            log.warning("Skipped settlement: %s", e)
            return None

    def run(self, max_polls: Optional[int] = None) -> None:
        polls = 0
        while max_polls is None or polls < max_polls:
            request_id = self.poll_once()
            if request_id is not None:
                log.info("Settlement started, request %s", request_id)
            polls += 1
            if max_polls is None or polls < max_polls:
                self._sleep(self.poll_interval_s)
