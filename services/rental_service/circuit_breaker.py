import time
import logging
from typing import Callable, Any, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class CircuitOpenError(Exception):
    pass


@dataclass
class CircuitBreakerStats:
    failures: int = 0
    success: int = 0
    last_failure_time: Optional[float] = None
    state: str = "CLOSED"  # CLOSED, OPEN, HALF_OPEN


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 5,
        timeout: float = 60.0,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic
    ):
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.name = name
        self.clock = clock
        self.stats = CircuitBreakerStats()

    def call(self, func: Callable, *args, fallback: Optional[Callable] = None, **kwargs) -> Any:
        if self.stats.state == "OPEN":
            if self._should_attempt_reset():
                self.stats.state = "HALF_OPEN"
            else:
                if fallback:
                    return fallback()
                raise CircuitOpenError(f"Circuit breaker {self.name} is OPEN")

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._on_failure(e)
            if fallback:
                return fallback()
            raise

        self._on_success()
        return result

    def _on_success(self):
        self.stats.failures = 0
        self.stats.success += 1
        if self.stats.state == "HALF_OPEN":
            logger.info(f"Circuit breaker {self.name} closed again")
            self.stats.state = "CLOSED"

    def _on_failure(self, error: Exception):
        self.stats.failures += 1
        self.stats.last_failure_time = self.clock()
        logger.warning(f"Circuit breaker {self.name} recorded failure {self.stats.failures}: {error}")

        if self.stats.state == "HALF_OPEN" or self.stats.failures >= self.failure_threshold:
            if self.stats.state != "OPEN":
                logger.warning(f"Circuit breaker {self.name} is now OPEN")
            self.stats.state = "OPEN"

    def _should_attempt_reset(self) -> bool:
        if self.stats.last_failure_time is None:
            return False

        return (self.clock() - self.stats.last_failure_time) >= self.timeout

    def get_state(self) -> dict:
        return {
            "name": self.name,
            "state": self.stats.state,
            "failures": self.stats.failures,
            "last_failure_time": self.stats.last_failure_time
        }
