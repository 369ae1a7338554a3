r"""Retriers deciding whether a failed attempt is tried again."""

from __future__ import annotations

__all__ = [
    "BaseRetrier",
    "JitterStrategy",
    "Retrier",
    "RetryAction",
    "RetryDecision",
    "RetryHandler",
    "RetryStrategy",
    "ZipRetrier",
]

from aexchange.backoff.jitter import JitterStrategy
from aexchange.retriers.base import BaseRetrier, RetryAction, RetryDecision
from aexchange.retriers.handler import Retrier, RetryHandler
from aexchange.retriers.strategy import RetryStrategy
from aexchange.retriers.zip import ZipRetrier
