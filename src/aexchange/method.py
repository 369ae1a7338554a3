r"""HTTP method token."""

from __future__ import annotations

__all__ = ["HttpMethod"]

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class HttpMethod:
    """An HTTP method, normalized to upper case on construction.

    The set of methods is open: any token is accepted, the well known
    ones from RFC 9110 are exposed as class attributes.

    Args:
        value: The method name. Case is ignored.

    Example:
        ```pycon
        >>> from aexchange import HttpMethod
        >>> HttpMethod("get")
        HttpMethod('GET')
        >>> HttpMethod("get") == HttpMethod.GET
        True

        ```
    """

    value: str

    GET: ClassVar[HttpMethod]
    HEAD: ClassVar[HttpMethod]
    POST: ClassVar[HttpMethod]
    PUT: ClassVar[HttpMethod]
    DELETE: ClassVar[HttpMethod]
    CONNECT: ClassVar[HttpMethod]
    OPTIONS: ClassVar[HttpMethod]
    TRACE: ClassVar[HttpMethod]
    PATCH: ClassVar[HttpMethod]

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", str(self.value).upper())

    def __repr__(self) -> str:
        return f"HttpMethod({self.value!r})"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, method: HttpMethod | str) -> HttpMethod:
        """Return ``method`` as an ``HttpMethod``."""
        if isinstance(method, HttpMethod):
            return method
        return cls(method)


HttpMethod.GET = HttpMethod("GET")
HttpMethod.HEAD = HttpMethod("HEAD")
HttpMethod.POST = HttpMethod("POST")
HttpMethod.PUT = HttpMethod("PUT")
HttpMethod.DELETE = HttpMethod("DELETE")
HttpMethod.CONNECT = HttpMethod("CONNECT")
HttpMethod.OPTIONS = HttpMethod("OPTIONS")
HttpMethod.TRACE = HttpMethod("TRACE")
HttpMethod.PATCH = HttpMethod("PATCH")
