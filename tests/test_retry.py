import pytest

from coinbase_core.response import RawResponse
from coinbase_core.retry import (
    DEFAULT_CALL_OPTIONS,
    AttemptOutcome,
    CallOptions,
    Jitter,
    backoff_delay,
    base_delay,
    should_retry,
)

OPTIONS = CallOptions(max_retries=3, min_delay_seconds=1.0, max_delay_seconds=30.0)


def test_default_call_options():
    assert DEFAULT_CALL_OPTIONS.should_retry_on_status_codes is False
    assert DEFAULT_CALL_OPTIONS.max_retries == 3
    assert DEFAULT_CALL_OPTIONS.min_delay_seconds == 1.0
    assert DEFAULT_CALL_OPTIONS.max_delay_seconds == 30.0
    assert DEFAULT_CALL_OPTIONS.retryable_status_codes == frozenset()


def test_status_codes_are_normalised_to_frozenset():
    options = CallOptions(retryable_status_codes=[503, 429, 503])
    assert options.retryable_status_codes == frozenset({429, 503})


@pytest.mark.parametrize("kwargs", [
    {"max_retries": -1},
    {"min_delay_seconds": -0.5},
    {"min_delay_seconds": 5.0, "max_delay_seconds": 1.0},
])
def test_invalid_call_options_raise(kwargs):
    with pytest.raises(ValueError):
        CallOptions(**kwargs)


def test_transport_failure_retried_while_retries_remain():
    failure = AttemptOutcome(failure=ConnectionError("reset"))
    assert should_retry(OPTIONS, 0, failure)
    assert should_retry(OPTIONS, 2, failure)
    assert not should_retry(OPTIONS, 3, failure)


def test_status_retry_requires_opt_in_and_membership():
    outcome = AttemptOutcome(response=RawResponse(503))
    assert not should_retry(CallOptions(retryable_status_codes={503}), 0, outcome)

    enabled = CallOptions(should_retry_on_status_codes=True, retryable_status_codes={503})
    assert should_retry(enabled, 0, outcome)
    assert not should_retry(enabled, 0, AttemptOutcome(response=RawResponse(500)))
    assert not should_retry(enabled, 0, AttemptOutcome(response=RawResponse(200)))


def test_zero_max_retries_never_retries():
    options = CallOptions(max_retries=0)
    assert not should_retry(options, 0, AttemptOutcome(failure=TimeoutError()))


def test_base_delay_doubles_and_caps():
    delays = [base_delay(n, OPTIONS) for n in range(1, 8)]
    assert delays == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0, 30.0]
    assert base_delay(10_000, OPTIONS) == 30.0


def test_backoff_delay_bounds():
    jitter = Jitter(seed=42)
    previous_base = 0.0
    for retry in range(1, 10):
        base = base_delay(retry, OPTIONS)
        delay = backoff_delay(retry, OPTIONS, jitter)
        assert base >= previous_base
        assert OPTIONS.min_delay_seconds <= delay <= OPTIONS.max_delay_seconds
        assert max(OPTIONS.min_delay_seconds, 0.75 * base) <= delay <= base
        previous_base = base


def test_backoff_never_below_min_delay():
    class LowJitter(Jitter):
        def factor(self):
            return 0.75

    options = CallOptions(min_delay_seconds=2.0, max_delay_seconds=2.0)
    assert backoff_delay(1, options, LowJitter()) == 2.0


def test_jitter_factor_range_and_seed():
    a, b = Jitter(seed=7), Jitter(seed=7)
    values = [a.factor() for _ in range(200)]
    assert values == [b.factor() for _ in range(200)]
    assert all(0.75 <= v <= 1.0 for v in values)
