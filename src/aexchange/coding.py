r"""Encoding of request bodies and decoding of response bodies."""

from __future__ import annotations

__all__ = ["BaseDecoder", "BaseEncoder", "JsonDecoder", "JsonEncoder", "encode_body"]

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, TypeVar

import pydantic
from pydantic_core import PydanticSerializationError, to_json

from aexchange.exceptions import DecodeError

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class BaseEncoder(ABC):
    """Turns a request body into bytes."""

    content_type: str | None = None

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Encode ``value`` into the bytes sent on the wire."""


class BaseDecoder(ABC):
    """Turns a response body into a value of the expected type."""

    @abstractmethod
    def decode(self, data: bytes, expected: type[T]) -> T:
        """Decode ``data`` into an instance of ``expected``.

        Raises:
            DecodeError: If ``data`` does not match ``expected``.
        """


class JsonEncoder(BaseEncoder):
    """JSON encoder supporting builtins, dataclasses and pydantic models.

    Example:
        ```pycon
        >>> from aexchange.coding import JsonEncoder
        >>> JsonEncoder().encode(["a", "b"])
        b'["a","b"]'

        ```
    """

    content_type = "application/json"

    def encode(self, value: Any) -> bytes:
        if isinstance(value, bytes):
            return value
        return to_json(value)


@lru_cache(maxsize=256)
def _type_adapter(expected: Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(expected)


class JsonDecoder(BaseDecoder):
    """JSON decoder validating the payload against the expected type.

    ``bytes`` and ``str`` are special cased and return the raw body.
    Any other type is validated with ``pydantic.TypeAdapter``, so plain
    containers (``list[str]``), dataclasses and pydantic models are all
    supported.

    Args:
        strict: Forwarded to pydantic. When ``True`` no type coercion
            happens while validating.

    Example:
        ```pycon
        >>> from aexchange.coding import JsonDecoder
        >>> JsonDecoder().decode(b'["a", "b"]', list[str])
        ['a', 'b']

        ```
    """

    def __init__(self, strict: bool | None = None) -> None:
        self.strict = strict

    def decode(self, data: bytes, expected: type[T]) -> T:
        if expected is bytes:
            return data  # type: ignore[return-value]
        if expected is str:
            try:
                return data.decode("utf-8")  # type: ignore[return-value]
            except UnicodeDecodeError as exc:
                raise DecodeError(expected, str(exc), data) from exc
        try:
            adapter = _type_adapter(expected)
        except TypeError:
            # Unhashable annotations cannot be cached.
            adapter = pydantic.TypeAdapter(expected)
        try:
            return adapter.validate_json(data, strict=self.strict)
        except pydantic.ValidationError as exc:
            logger.debug(f"Failed to decode {len(data)} bytes as {expected!r}")
            raise DecodeError(expected, str(exc), data) from exc


def encode_body(encoder: BaseEncoder, value: Any) -> bytes:
    """Encode ``value`` with ``encoder`` and wrap serialization failures."""
    try:
        return encoder.encode(value)
    except PydanticSerializationError as exc:
        msg = f"cannot encode request body of type {type(value).__name__}: {exc}"
        raise TypeError(msg) from exc
