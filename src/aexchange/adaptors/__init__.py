r"""Adaptors transforming requests before they are dispatched."""

from __future__ import annotations

__all__ = [
    "AdaptationHandler",
    "Adaptor",
    "BaseAdaptor",
    "CollisionResolver",
    "CollisionStrategy",
    "HeadersAdaptor",
    "ParametersAdaptor",
    "QueryItem",
    "ZipAdaptor",
]

from aexchange.adaptors.base import BaseAdaptor
from aexchange.adaptors.handler import AdaptationHandler, Adaptor
from aexchange.adaptors.headers import CollisionResolver, CollisionStrategy, HeadersAdaptor
from aexchange.adaptors.parameters import ParametersAdaptor, QueryItem
from aexchange.adaptors.zip import ZipAdaptor
