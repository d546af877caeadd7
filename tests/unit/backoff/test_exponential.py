r"""Unit tests for exponential backoff."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from apirequest.backoff import BaseBackoffStrategy, ExponentialBackoff, get_retry_timeout

#######################################
#     Tests for get_retry_timeout     #
#######################################


@pytest.mark.parametrize(
    ("num_retries", "expected"), [(1, 2000), (2, 4000), (3, 8000), (4, 16000)]
)
def test_get_retry_timeout_without_jitter(num_retries: int, expected: int) -> None:
    assert get_retry_timeout(num_retries, 2000, randomization_factor=0.0) == expected


@pytest.mark.parametrize("num_retries", [1, 2, 3, 5])
def test_get_retry_timeout_within_jitter_bounds(num_retries: int) -> None:
    base = 2 ** (num_retries - 1) * 1000
    for _ in range(50):
        timeout = get_retry_timeout(num_retries, 1000)
        assert base * 0.5 <= timeout <= base * 1.5


def test_get_retry_timeout_uses_randomization_range() -> None:
    with patch("apirequest.backoff.exponential.random.uniform", return_value=1.25) as mock_uniform:
        assert get_retry_timeout(2, 1000) == 2500
    mock_uniform.assert_called_once_with(0.5, 1.5)


def test_get_retry_timeout_rounds_up() -> None:
    with patch("apirequest.backoff.exponential.random.uniform", return_value=1.0001):
        assert get_retry_timeout(1, 10) == 11


def test_get_retry_timeout_returns_int() -> None:
    assert isinstance(get_retry_timeout(1, 333), int)


########################################
#     Tests for ExponentialBackoff     #
########################################


def test_exponential_backoff_is_strategy() -> None:
    assert isinstance(ExponentialBackoff(100), BaseBackoffStrategy)


def test_exponential_backoff_calculate() -> None:
    backoff = ExponentialBackoff(base_interval_ms=100, randomization_factor=0.0)
    assert [backoff.calculate(n) for n in (1, 2, 3)] == [100, 200, 400]


def test_exponential_backoff_zero_interval() -> None:
    assert ExponentialBackoff(base_interval_ms=0).calculate(4) == 0


def test_exponential_backoff_negative_interval() -> None:
    with pytest.raises(ValueError, match="base_interval_ms must be non-negative"):
        ExponentialBackoff(base_interval_ms=-1)


@pytest.mark.parametrize("factor", [-0.1, 1.5])
def test_exponential_backoff_invalid_randomization_factor(factor: float) -> None:
    with pytest.raises(ValueError, match="randomization_factor must be in"):
        ExponentialBackoff(base_interval_ms=100, randomization_factor=factor)
