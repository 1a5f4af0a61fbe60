"""Retry policy: per-call options, retry decision and jittered backoff."""
import random
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional

if TYPE_CHECKING:
    from .response import RawResponse

# 2**62 seconds is far past any sensible max delay
_MAX_EXPONENT = 62


@dataclass(frozen=True)
class CallOptions:
    """Retry settings for one call (or a shared default).

    Transport failures are always retried while retries remain. Responses are
    retried only when ``should_retry_on_status_codes`` is set and the status
    is in ``retryable_status_codes``.
    """
    should_retry_on_status_codes: bool = False
    max_retries: int = 3
    min_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    retryable_status_codes: FrozenSet[int] = frozenset()

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.min_delay_seconds < 0:
            raise ValueError("min_delay_seconds must be >= 0")
        if self.max_delay_seconds < self.min_delay_seconds:
            raise ValueError("max_delay_seconds must be >= min_delay_seconds")
        codes: Iterable[int] = self.retryable_status_codes or ()
        object.__setattr__(self, "retryable_status_codes", frozenset(int(c) for c in codes))


DEFAULT_CALL_OPTIONS = CallOptions()


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one attempt: either a response or a transport failure."""
    response: Optional["RawResponse"] = None
    failure: Optional[BaseException] = None

    @property
    def transport_failed(self) -> bool:
        return self.failure is not None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


def should_retry(options: CallOptions, retries_made: int, outcome: AttemptOutcome) -> bool:
    if retries_made >= options.max_retries:
        return False
    if outcome.transport_failed:
        return True
    if not options.should_retry_on_status_codes:
        return False
    return outcome.status_code in options.retryable_status_codes


class Jitter:
    """Random factor in [0.75, 1.0], safe to share between threads."""

    def __init__(self, seed: Optional[int] = None):
        self._rand = random.Random(seed)
        self._lock = threading.Lock()

    def factor(self) -> float:
        with self._lock:
            return 0.75 + 0.25 * self._rand.random()


_shared_jitter = Jitter()


def base_delay(retry: int, options: CallOptions) -> float:
    """Unjittered delay before retry number ``retry`` (1-based)."""
    exponent = min(max(retry - 1, 0), _MAX_EXPONENT)
    return min(options.max_delay_seconds, options.min_delay_seconds * (2 ** exponent))


def backoff_delay(retry: int, options: CallOptions, jitter: Optional[Jitter] = None) -> float:
    """Jittered delay before retry number ``retry``, never below the minimum."""
    factor = (jitter or _shared_jitter).factor()
    return max(options.min_delay_seconds, base_delay(retry, options) * factor)
