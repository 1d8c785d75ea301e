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
Field Resolver.

Locates the raw value of one logical field in a `TagBag`. A field is described
by a `FieldQuery`, an ordered tuple of synonymous key names used by different
vendors and standards. The resolver scans a fixed, ordered table of locations:

1. The root of the tag bag.
2. Known sub-namespaces (`xmp`, `exif`, `gps`, `ifd0`, per-manufacturer).
3. Deep vendor paths (`MakerNote.Apple`, `samsung.tags`, `iOS`, ...).

The first match anywhere wins, even if a "better" value exists deeper. The
table is loaded from `pmtk/resources/search_locations.json` so the vendor list
stays declarative.
"""
import json
import logging
import math
from dataclasses import dataclass
from importlib import resources
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from pmtk.utils.data_models import (
    Absent, ArrayValue, Described, Nested, Scalar, TagValue
)
from pmtk.utils.tag_bag import TagBag

logger = logging.getLogger(__name__)

FieldQuery = Tuple[str, ...]
RawLocatedValue = Union[None, str, int, float, List[Any]]

LOCATION_KINDS = ('root', 'namespace', 'path')


@dataclass(frozen=True)
class SearchLocation:
    """
    One entry of the resolver's search table.

    Attributes:
        kind: 'root', 'namespace' (a single root key) or 'path' (dotted path).
        path: The namespace name or dotted path; empty for the root.
        priority: Search order; lower values are searched first.
    """
    kind: str
    path: str
    priority: int

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(self.path.split('.')) if self.path else ()


def _load_search_locations() -> Tuple[SearchLocation, ...]:
    """
    Load the search table from the JSON lookup file.

    Returns:
        Tuple of SearchLocation entries sorted by priority.
    """
    lookup_file = resources.files('pmtk.resources').joinpath('search_locations.json')

    try:
        with lookup_file.open('r', encoding='utf-8') as f:
            data = json.load(f)

        locations = []
        for entry in data.get('locations', []):
            kind = entry.get('kind')
            if kind not in LOCATION_KINDS:
                logger.warning(f"Skipping search location with unknown kind: {entry}")
                continue
            locations.append(SearchLocation(kind, entry.get('path', ''), int(entry.get('priority', 0))))

        return tuple(sorted(locations, key=lambda loc: loc.priority))

    except FileNotFoundError:
        logger.warning(f"Search location table not found: {lookup_file}")
        logger.warning("Falling back to minimal search locations")
        return (
            SearchLocation('root', '', 0),
            SearchLocation('namespace', 'xmp', 10),
            SearchLocation('namespace', 'exif', 11),
            SearchLocation('namespace', 'gps', 12),
        )
    except Exception as e:
        logger.error(f"Error loading search location table: {e}")
        return (SearchLocation('root', '', 0),)

SEARCH_LOCATIONS = _load_search_locations()


# ============================================================================
# Value extraction
# ============================================================================

def format_number(value: Union[int, float, bool]) -> str:
    """Stringify a number the way it is displayed (no trailing '.0')."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def stringify(value: TagValue) -> Optional[str]:
    """
    Convert a raw TagValue to text.

    Scalars are converted directly, arrays are joined with commas and
    nested mappings have no text form.
    """
    if isinstance(value, Scalar):
        if isinstance(value.value, str):
            return value.value
        return format_number(value.value)
    if isinstance(value, Described):
        if value.description:
            return value.description
        return stringify(value.raw)
    if isinstance(value, ArrayValue):
        parts = [stringify(item) for item in value.items]
        return ','.join(part for part in parts if part is not None)
    return None


def extract_text(value: TagValue) -> Optional[str]:
    """
    Extract the display text of a located tag value.

    Prefers the description, then the stringified raw value, then a bare
    scalar. Empty strings, arrays and nested mappings are not hits.

    Args:
        value: The TagValue found under a candidate key.

    Returns:
        The text, or None when this value does not count as a match.
    """
    if isinstance(value, Described):
        if value.description:
            return value.description
        if isinstance(value.raw, (Absent, Nested)):
            return None
        text = stringify(value.raw)
        return text if text else None
    if isinstance(value, Scalar):
        text = stringify(value)
        return text if text else None
    return None


def to_python(value: TagValue) -> Any:
    """Convert a TagValue to plain Python data (str, number, list, dict or None)."""
    if isinstance(value, Scalar):
        return value.value
    if isinstance(value, Described):
        return to_python(value.raw) if not isinstance(value.raw, Absent) else value.description
    if isinstance(value, ArrayValue):
        return [to_python(item) for item in value.items]
    if isinstance(value, Nested):
        return {key: to_python(item) for key, item in value.entries.items()}
    return None


def locate_raw(node: TagValue, candidate_keys: Sequence[str]) -> RawLocatedValue:
    """
    Locate a raw value in one container, keeping its type.

    Used for coordinates, which may be strings, numbers or arrays. For each
    candidate key: a description wins, then the raw value, then a bare
    string, number or array.

    Args:
        node: The container to search.
        candidate_keys: Ordered synonyms.

    Returns:
        The located value, or None.
    """
    if not isinstance(node, Nested):
        return None
    for key in candidate_keys:
        value = node.get(key)
        if isinstance(value, Described):
            if value.description:
                return value.description
            if not isinstance(value.raw, Absent):
                return to_python(value.raw)
        elif isinstance(value, Scalar):
            if isinstance(value.value, bool) or value.value == '':
                continue
            return value.value
        elif isinstance(value, ArrayValue) and len(value) > 0:
            return to_python(value)
    return None


def lookup_at(node: TagValue, candidate_keys: Sequence[str]) -> Optional[str]:
    """
    Scan one container for the first candidate key with a usable value.

    Args:
        node: The container (must be Nested to match anything).
        candidate_keys: Ordered synonyms.

    Returns:
        The extracted text, or None.
    """
    if not isinstance(node, Nested):
        return None
    for key in candidate_keys:
        text = extract_text(node.get(key))
        if text is not None:
            return text
    return None


# ============================================================================
# Location walking
# ============================================================================

def iter_locations(
    tag_bag: TagBag,
    locations: Optional[Sequence[SearchLocation]] = None
) -> Iterator[Tuple[SearchLocation, Nested]]:
    """
    Yield every table location that exists in the tag bag, in priority order.

    Args:
        tag_bag: The tag bag to walk.
        locations: Override of the search table (defaults to SEARCH_LOCATIONS).

    Yields:
        (location, container) pairs for containers that exist and are mappings.
    """
    for location in (SEARCH_LOCATIONS if locations is None else locations):
        if location.kind == 'root':
            yield location, tag_bag.root
            continue
        node = tag_bag.walk(location.segments)
        if isinstance(node, Nested):
            yield location, node


def resolve(
    tag_bag: TagBag,
    candidate_keys: Sequence[str],
    locations: Optional[Sequence[SearchLocation]] = None
) -> Optional[str]:
    """
    Resolve one logical field from the tag bag.

    Args:
        tag_bag: The classified tags of one image.
        candidate_keys: The field's FieldQuery (ordered synonyms).
        locations: Override of the search table.

    Returns:
        The first matching value as text, or None when the field is absent.
    """
    if tag_bag.is_empty:
        return None
    for location, node in iter_locations(tag_bag, locations):
        text = lookup_at(node, candidate_keys)
        if text is not None:
            logger.debug(f"Resolved {candidate_keys[0]} at {location.kind}:{location.path or '<root>'}")
            return text
    return None
