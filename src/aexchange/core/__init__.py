r"""Configuration objects, defaults and parameter validation shared by
the request pipeline."""

from __future__ import annotations

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_BACKOFF_BASE",
    "DEFAULT_JITTER",
    "DEFAULT_METHODS",
    "DEFAULT_RETRY_ERROR_CODES",
    "DEFAULT_RETRY_STATUS_CODES",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "RetryPolicyConfig",
    "validate_backoff_params",
    "validate_retry_policy_params",
    "validate_timeout",
]

from aexchange.core.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_JITTER,
    DEFAULT_METHODS,
    DEFAULT_RETRY_ERROR_CODES,
    DEFAULT_RETRY_STATUS_CODES,
    DEFAULT_TIMEOUT,
    ClientConfig,
    RetryPolicyConfig,
)
from aexchange.core.validation import (
    validate_backoff_params,
    validate_retry_policy_params,
    validate_timeout,
)
