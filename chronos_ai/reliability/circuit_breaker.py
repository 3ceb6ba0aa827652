import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict

from ..exceptions import CircuitOpenError
from ..monitoring.metrics import circuit_opened

logger = logging.getLogger(__name__)


class CircuitStatus(Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass
class CircuitState:
    consecutive_failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def status(self) -> CircuitStatus:
        return CircuitStatus.OPEN if self.is_open else CircuitStatus.CLOSED


class CircuitBreakerRegistry:
    """Per-provider circuit breakers.

    CLOSED -> OPEN once ``consecutive_failures`` reaches the threshold. An open
    circuit is checked lazily: the first ``allow`` after the cooldown resets
    it fully to CLOSED with zero failures (no half-open probe). Each provider's
    state has its own lock so providers never contend with each other.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._states: Dict[str, CircuitState] = {}
        self._registry_lock = threading.Lock()

    def _get_or_create(self, provider: str) -> CircuitState:
        with self._registry_lock:
            state = self._states.get(provider)
            if state is None:
                state = self._states[provider] = CircuitState()
            return state

    def _maybe_reset(self, provider: str, state: CircuitState) -> None:
        # caller holds state._lock
        if state.is_open and self._clock() - state.last_failure_time > self.recovery_timeout:
            state.is_open = False
            state.consecutive_failures = 0
            logger.info(f"{provider}: cooldown elapsed, circuit reset to CLOSED")

    def allow(self, provider: str) -> bool:
        state = self._get_or_create(provider)
        with state._lock:
            self._maybe_reset(provider, state)
            return not state.is_open

    def retry_in(self, provider: str) -> float:
        """Seconds until an open circuit will be reset, 0 when closed."""
        state = self._get_or_create(provider)
        with state._lock:
            if not state.is_open:
                return 0.0
            return max(0.0, self.recovery_timeout - (self._clock() - state.last_failure_time))

    def check(self, provider: str) -> None:
        """Raise ``CircuitOpenError`` if calls to ``provider`` must not be made."""
        if not self.allow(provider):
            raise CircuitOpenError(provider, self.retry_in(provider))

    def record_success(self, provider: str) -> None:
        state = self._get_or_create(provider)
        with state._lock:
            state.consecutive_failures = 0
            state.is_open = False

    def record_failure(self, provider: str) -> None:
        state = self._get_or_create(provider)
        with state._lock:
            state.consecutive_failures += 1
            state.last_failure_time = self._clock()
            if state.consecutive_failures >= self.failure_threshold:
                if not state.is_open:
                    circuit_opened.labels(provider=provider).inc()
                    logger.warning(f"{provider}: Circuit OPEN after {state.consecutive_failures} failures")
                state.is_open = True

    def get_state(self, provider: str) -> CircuitState:
        """Snapshot of a provider's state (a copy; mutate only through this API)."""
        state = self._get_or_create(provider)
        with state._lock:
            return CircuitState(
                consecutive_failures=state.consecutive_failures,
                last_failure_time=state.last_failure_time,
                is_open=state.is_open,
            )

    def get_stats(self, provider: str) -> dict:
        state = self.get_state(provider)
        return {
            "name": provider,
            "state": state.status.value,
            "failure_count": state.consecutive_failures,
            "retry_in": round(self.retry_in(provider), 1),
        }

    def get_all_stats(self) -> Dict[str, dict]:
        with self._registry_lock:
            providers = list(self._states)
        return {provider: self.get_stats(provider) for provider in providers}
