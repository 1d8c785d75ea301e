#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ******************************************************************************
# Project: Photo Metadata ToolKit (PMTK)
# Author: Eric Robeck <robeckgeo@gmail.com>
#
# Copyright (c) 2025, Eric Robeck
# Licensed under the MIT License
# ******************************************************************************

"""
Tag Bag.

The `TagBag` is the read-only, classified form of the nested key/value
structure returned by a tag decoder. Every value is converted once into the
`TagValue` tagged union so that downstream resolvers dispatch on explicit
types instead of probing for properties.
"""
import logging
import math
from numbers import Rational
from typing import Any, Iterable, Mapping, Optional, Union

from pmtk.utils.data_models import (
    ABSENT, Absent, ArrayValue, Described, Nested, Scalar, TagValue
)

logger = logging.getLogger(__name__)

# Keys that may accompany `value`/`description` in a decoder tag entry.
DESCRIBED_KEYS = frozenset({'value', 'description', 'id', 'attributes', 'type'})

MAX_DEPTH = 32


def _decode_bytes(raw: bytes) -> str:
    return raw.decode('utf-8', errors='ignore').replace('\x00', '').strip()


def classify(obj: Any, depth: int = 0) -> TagValue:
    """
    Converts an arbitrary decoded object into a `TagValue`.

    Args:
        obj: A value from the decoder output.
        depth: Current nesting depth; deeper structures are cut off.

    Returns:
        The classified TagValue.
    """
    if depth > MAX_DEPTH or obj is None:
        return ABSENT
    if isinstance(obj, (Absent, Scalar, Described, ArrayValue, Nested)):
        return obj
    if isinstance(obj, bool):
        return Scalar(obj)
    if isinstance(obj, int):
        return Scalar(obj)
    if isinstance(obj, float):
        return Scalar(obj)
    if isinstance(obj, str):
        return Scalar(obj)
    if isinstance(obj, (bytes, bytearray)):
        return Scalar(_decode_bytes(bytes(obj)))
    if isinstance(obj, Rational):
        # PIL's IFDRational registers as a numbers.Rational
        try:
            return Scalar(float(obj))
        except (ZeroDivisionError, ValueError, TypeError):
            return Scalar(math.nan)
    if isinstance(obj, Mapping):
        keys = {str(k) for k in obj.keys()}
        if keys and keys <= DESCRIBED_KEYS and ('value' in keys or 'description' in keys):
            description = obj.get('description')
            if isinstance(description, bytes):
                description = _decode_bytes(description)
            elif description is not None and not isinstance(description, str):
                description = str(description)
            return Described(description=description, raw=classify(obj.get('value'), depth + 1))
        return Nested({str(k): classify(v, depth + 1) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return ArrayValue(tuple(classify(item, depth + 1) for item in obj))
    # Numeric-like objects from third-party decoders (numpy scalars, enums)
    try:
        return Scalar(float(obj))
    except (TypeError, ValueError):
        return Scalar(str(obj))


class TagBag:
    """An immutable, classified tag structure for one image."""

    __slots__ = ('_root',)

    def __init__(self, root: Optional[Nested] = None):
        self._root = root if root is not None else Nested({})

    @classmethod
    def from_mapping(cls, raw: Any) -> 'TagBag':
        """
        Builds a TagBag from a decoder's nested mapping.

        Anything other than a mapping yields an empty bag.
        """
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.debug(f"Ignoring non-mapping decoder output of type {type(raw).__name__}")
            return cls.empty()
        root = classify(raw)
        if not isinstance(root, Nested):
            # A top-level {value, description} entry carries no namespaces
            return cls.empty()
        return cls(root)

    @classmethod
    def empty(cls) -> 'TagBag':
        return cls(Nested({}))

    @property
    def root(self) -> Nested:
        return self._root

    @property
    def is_empty(self) -> bool:
        return len(self._root) == 0

    def get(self, key: str) -> TagValue:
        """Returns the root-level value for `key`, or `ABSENT`."""
        return self._root.get(key)

    def walk(self, path: Union[str, Iterable[str]]) -> TagValue:
        """
        Walks a dotted path (or sequence of segments) from the root.

        Every intermediate segment must be a `Nested` mapping; otherwise the
        walk fails and `ABSENT` is returned.
        """
        segments = path.split('.') if isinstance(path, str) else list(path)
        current: TagValue = self._root
        for segment in segments:
            if not isinstance(current, Nested):
                return ABSENT
            current = current.get(segment)
            if isinstance(current, Absent):
                return ABSENT
        return current

    def __len__(self) -> int:
        return len(self._root)

    def __repr__(self) -> str:
        return f"TagBag(keys={sorted(self._root.entries.keys())})"
