from __future__ import annotations

from unittest.mock import patch

import pytest

from aexchange.backoff import JitterStrategy

####################################
#     Tests for JitterStrategy     #
####################################


def test_jitter_none_unchanged() -> None:
    """Test that no jitter returns the delay unchanged."""
    assert JitterStrategy.NONE.apply(5.0) == 5.0


def test_jitter_full_bounds() -> None:
    """Test that full jitter stays within [0, delay]."""
    samples = [JitterStrategy.FULL.apply(5.0) for _ in range(1000)]
    assert all(0.0 <= sample <= 5.0 for sample in samples)


def test_jitter_equal_bounds() -> None:
    """Test that equal jitter stays within [delay / 2, delay]."""
    samples = [JitterStrategy.EQUAL.apply(5.0) for _ in range(1000)]
    assert all(2.5 <= sample <= 5.0 for sample in samples)


def test_jitter_full_uses_uniform() -> None:
    """Test that full jitter draws from uniform(0, delay)."""
    with patch("random.uniform", return_value=1.25) as uniform:
        assert JitterStrategy.FULL.apply(4.0) == 1.25
    uniform.assert_called_once_with(0, 4.0)


def test_jitter_equal_uses_uniform() -> None:
    """Test that equal jitter adds uniform(0, delay / 2) to half the
    delay."""
    with patch("random.uniform", return_value=1.0) as uniform:
        assert JitterStrategy.EQUAL.apply(4.0) == 3.0
    uniform.assert_called_once_with(0, 2.0)


@pytest.mark.parametrize("strategy", list(JitterStrategy))
def test_jitter_zero_delay(strategy: JitterStrategy) -> None:
    """Test that a zero delay stays zero."""
    assert strategy.apply(0.0) == 0.0


def test_jitter_from_value() -> None:
    """Test that strategies can be created from their value."""
    assert JitterStrategy("full") is JitterStrategy.FULL
