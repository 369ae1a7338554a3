r"""Backoff strategies and jitter used to space out retried attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff", "JitterStrategy"]

from aexchange.backoff.base import BaseBackoffStrategy
from aexchange.backoff.exponential import ExponentialBackoff
from aexchange.backoff.jitter import JitterStrategy
