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
GPS Resolver.

Resolves a signed decimal-degree coordinate from a `TagBag` by trying a strictly
ordered chain of strategies. The first strategy that yields a valid coordinate
wins and the remaining strategies are skipped:

1. Vendor location blocks (`apple.Location`, then each Android OEM).
2. XMP location block (`xmp.Location`).
3. Standard EXIF `GPSLatitude`/`GPSLongitude` tags at the root, signed by
   `GPSLatitudeRef`/`GPSLongitudeRef`.
4. Generic GPS containers (`GPS`, `gps`, `GPSInfo`, `GPS Info`, `exif.GPS`,
   `xmp.GPS`, and the root itself when it holds latitude keys).
5. GeoJSON-style `coordinates` arrays, ordered [longitude, latitude].

Every candidate passes through `is_valid_coordinate()`. The (0, 0) pair is a
common placeholder and is rejected unless it came from explicit standard EXIF
tags (strategy 3).

Coordinates are converted by `convert_coordinates()` (strings) and
`process_coordinate_array()` (degree/minute/second arrays).
"""
import logging
import math
import re
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from pmtk.utils.data_models import (
    Absent, ArrayValue, Described, GeoCoordinate, GpsSource, Nested, Scalar, TagValue
)
from pmtk.utils.field_resolver import format_number, locate_raw, stringify, to_python
from pmtk.utils.tag_bag import TagBag
from pmtk.utils.value_normalizers import parse_leading_float

logger = logging.getLogger(__name__)

APPLE_VENDOR = 'apple'
ANDROID_VENDORS = ('samsung', 'google', 'huawei', 'xiaomi', 'oppo', 'vivo', 'oneplus', 'asus')
VENDOR_LOCATION_ORDER = (APPLE_VENDOR,) + ANDROID_VENDORS

GPS_CONTAINER_PATHS = ('GPS', 'gps', 'GPSInfo', 'GPS Info', 'exif.GPS', 'xmp.GPS')
ROOT_LATITUDE_MARKERS = ('GPSLatitude', 'GpsLatitude', 'Latitude')

LATITUDE_KEYS = ('GPSLatitude', 'Latitude', 'GpsLatitude', 'Lat', 'LatitudeValue', 'lat')
LONGITUDE_KEYS = ('GPSLongitude', 'Longitude', 'GpsLongitude', 'Lon', 'LongitudeValue', 'lng', 'lon')
LATITUDE_REF_KEYS = ('GPSLatitudeRef', 'LatitudeRef', 'GpsLatitudeRef', 'LatRef', 'latRef')
LONGITUDE_REF_KEYS = ('GPSLongitudeRef', 'LongitudeRef', 'GpsLongitudeRef', 'LonRef', 'lngRef', 'lonRef')

COORDINATE_ARRAY_CONTAINERS = ('Location', 'location', 'LocationIQ')

DMS_SYMBOL_PATTERN = re.compile(r"([+-]?)(\d+(?:\.\d+)?)°\s*(\d+(?:\.\d+)?)['′]\s*(\d+(?:\.\d+)?)[\"″]")
DMS_DEG_PATTERN = re.compile(r"([+-]?)(\d+(?:\.\d+)?)\s*deg\s*(\d+(?:\.\d+)?)['′]\s*(\d+(?:\.\d+)?)[\"″]")
COMMA_DECIMAL_PATTERN = re.compile(r'^\s*([+-]?\d+),(\d+)\s*$')
NON_NUMERIC_PATTERN = re.compile(r'[^\d.\-]+')

DMS_STYLES = ('symbol', 'deg')


# ============================================================================
# Coordinate conversion
# ============================================================================

def dms_to_decimal(degrees: float, minutes: float = 0.0, seconds: float = 0.0) -> float:
    """Weight degree, minute and second components into decimal degrees."""
    return degrees + (minutes / 60) + (seconds / 3600)


def _array_element_to_float(item: Any) -> float:
    """Convert one array element; unreadable elements count as zero."""
    if isinstance(item, bool):
        return 0.0
    if isinstance(item, (int, float)):
        return float(item)
    if isinstance(item, str):
        value = parse_leading_float(item)
        return value if not math.isnan(value) else 0.0
    if isinstance(item, (list, tuple)) and len(item) == 2:
        # Unreduced rational stored as [numerator, denominator]
        numerator, denominator = item
        if isinstance(numerator, (int, float)) and isinstance(denominator, (int, float)) and denominator:
            return float(numerator) / float(denominator)
    if isinstance(item, dict) and 'value' in item:
        return _array_element_to_float(item['value'])
    return 0.0


def process_coordinate_array(values: Sequence[Any]) -> float:
    """
    Convert a [degrees, minutes, seconds] array to decimal degrees.

    Arrays of length 2 are read as [degrees, minutes] and length 1 as
    [degrees]; extra elements are ignored.

    Args:
        values: The array elements (numbers, numeric strings, or rationals).

    Returns:
        Decimal degrees, or NaN for an empty array.
    """
    if not values:
        return math.nan
    numeric = [_array_element_to_float(item) for item in values]
    if len(numeric) >= 3:
        return dms_to_decimal(numeric[0], numeric[1], numeric[2])
    if len(numeric) == 2:
        return dms_to_decimal(numeric[0], numeric[1])
    return numeric[0]


def convert_coordinates(text: Optional[str]) -> float:
    """
    Convert a coordinate string to decimal degrees.

    Tried in order: a plain decimal number; `D° M' S"`; `D deg M' S"`;
    a comma-decimal `D,frac`; finally any run of numeric groups weighted as
    degrees, minutes and seconds ('34,3,30.5' or '34 3 30.5').

    Args:
        text: The coordinate string.

    Returns:
        Decimal degrees, or NaN when nothing numeric is found.
    """
    if text is None:
        return math.nan
    text = str(text).strip()
    if not text:
        return math.nan

    try:
        return float(text)
    except ValueError:
        pass

    for pattern in (DMS_SYMBOL_PATTERN, DMS_DEG_PATTERN):
        match = pattern.search(text)
        if match:
            sign, degrees, minutes, seconds = match.groups()
            decimal = dms_to_decimal(float(degrees), float(minutes), float(seconds))
            return -decimal if sign == '-' else decimal

    match = COMMA_DECIMAL_PATTERN.match(text)
    if match:
        return float(f"{match.group(1)}.{match.group(2)}")

    parts = [part for part in NON_NUMERIC_PATTERN.split(text) if part]
    if not parts:
        return math.nan
    groups = [parse_leading_float(part) for part in parts[:3]]
    # A leading minus signs the whole coordinate, not just the degrees
    if groups[0] < 0:
        return -dms_to_decimal(-groups[0], *groups[1:])
    return dms_to_decimal(*groups)


def process_gps_value(value: TagValue) -> float:
    """
    Convert a standard EXIF GPSLatitude/GPSLongitude tag to decimal degrees.

    The raw value is preferred over the description; arrays are read as
    degree/minute/second triples and strings go through `convert_coordinates`.
    """
    if isinstance(value, Described):
        if not isinstance(value.raw, Absent):
            raw_degrees = process_gps_value(value.raw)
            if not math.isnan(raw_degrees):
                return raw_degrees
        return convert_coordinates(value.description)
    if isinstance(value, ArrayValue):
        return process_coordinate_array(to_python(value))
    if isinstance(value, Scalar):
        if isinstance(value.value, bool):
            return math.nan
        if isinstance(value.value, (int, float)):
            return float(value.value)
        return convert_coordinates(value.value)
    return math.nan


def _to_float(value: TagValue) -> float:
    """Float-parse a location component, preferring the raw value."""
    if isinstance(value, Described):
        if not isinstance(value.raw, Absent):
            return _to_float(value.raw)
        return parse_leading_float(value.description)
    if isinstance(value, Scalar):
        if isinstance(value.value, bool):
            return math.nan
        if isinstance(value.value, (int, float)):
            return float(value.value)
        return parse_leading_float(value.value)
    return math.nan


# ============================================================================
# Hemisphere references
# ============================================================================

def normalize_ref(ref: Any) -> Optional[str]:
    """
    Reduce a hemisphere reference to a single upper-case letter.

    'S', 's', 'South latitude' -> 'S'. Returns None for empty input.
    """
    if ref is None:
        return None
    text = str(ref).strip()
    if not text:
        return None
    return text[0].upper()


def apply_hemisphere(value: float, ref: Optional[str], negative_ref: str) -> float:
    """
    Sign a coordinate from its hemisphere reference.

    A southern/western reference always yields a negative value (the absolute
    value is negated, so already-negative raw values are not flipped back).
    Any other reference leaves the value as it is.
    """
    if normalize_ref(ref) == negative_ref:
        return -abs(value)
    return value


def _standard_ref(value: TagValue) -> Optional[str]:
    """Read a GPS*Ref tag, preferring its raw value."""
    if isinstance(value, Described):
        if not isinstance(value.raw, Absent):
            return stringify(value.raw)
        return value.description
    if isinstance(value, Scalar):
        return stringify(value)
    return None


def locate_ref(node: TagValue, candidate_keys: Sequence[str]) -> Optional[str]:
    """Find a hemisphere reference in a container: description, then text, then value."""
    if not isinstance(node, Nested):
        return None
    for key in candidate_keys:
        value = node.get(key)
        if isinstance(value, Described):
            if value.description:
                return value.description
            if not isinstance(value.raw, Absent):
                text = stringify(value.raw)
                if text:
                    return text
        elif isinstance(value, Scalar) and isinstance(value.value, str) and value.value:
            return value.value
    return None


# ============================================================================
# Validity
# ============================================================================

def is_valid_coordinate(latitude: float, longitude: float, allow_null_island: bool = False) -> bool:
    """
    Check that a latitude/longitude pair is usable.

    Args:
        latitude: Decimal latitude.
        longitude: Decimal longitude.
        allow_null_island: Accept the (0, 0) pair, which is otherwise treated
            as a placeholder.

    Returns:
        True when both values are finite and within range.
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return False
    if latitude < -90 or latitude > 90:
        return False
    if longitude < -180 or longitude > 180:
        return False
    if latitude == 0 and longitude == 0 and not allow_null_island:
        return False
    return True


# ============================================================================
# Strategies
# ============================================================================

def _location_block_candidate(block: TagValue, source: GpsSource) -> Optional[GeoCoordinate]:
    if not isinstance(block, Nested):
        return None
    latitude = _to_float(block.get('Latitude'))
    longitude = _to_float(block.get('Longitude'))
    if math.isnan(latitude) or math.isnan(longitude):
        return None
    return GeoCoordinate(latitude, longitude, source)


def vendor_location_candidates(tags: TagBag) -> Iterator[GeoCoordinate]:
    """Strategy 1: `<vendor>.Location.{Latitude,Longitude}` for Apple, then Android OEMs."""
    for vendor in VENDOR_LOCATION_ORDER:
        candidate = _location_block_candidate(tags.walk((vendor, 'Location')), GpsSource.VENDOR_LOCATION)
        if candidate is not None:
            yield candidate


def xmp_location_candidates(tags: TagBag) -> Iterator[GeoCoordinate]:
    """Strategy 2: `xmp.Location.{Latitude,Longitude}`."""
    candidate = _location_block_candidate(tags.walk(('xmp', 'Location')), GpsSource.XMP_LOCATION)
    if candidate is not None:
        yield candidate


def standard_exif_candidates(tags: TagBag) -> Iterator[GeoCoordinate]:
    """Strategy 3: root-level GPSLatitude/GPSLongitude with their Ref tags."""
    latitude_tag = tags.get('GPSLatitude')
    longitude_tag = tags.get('GPSLongitude')
    if isinstance(latitude_tag, Absent) or isinstance(longitude_tag, Absent):
        return
    latitude = process_gps_value(latitude_tag)
    longitude = process_gps_value(longitude_tag)
    latitude = apply_hemisphere(latitude, _standard_ref(tags.get('GPSLatitudeRef')), 'S')
    longitude = apply_hemisphere(longitude, _standard_ref(tags.get('GPSLongitudeRef')), 'W')
    if math.isnan(latitude) or math.isnan(longitude):
        return
    yield GeoCoordinate(latitude, longitude, GpsSource.STANDARD_EXIF)


def _gps_containers(tags: TagBag) -> Iterator[Nested]:
    for path in GPS_CONTAINER_PATHS:
        node = tags.get(path) if path == 'GPS Info' else tags.walk(path)
        if isinstance(node, Nested):
            yield node
    if any(not isinstance(tags.get(key), Absent) for key in ROOT_LATITUDE_MARKERS):
        yield tags.root


def _convert_pair(latitude: Any, longitude: Any) -> Optional[Tuple[float, float]]:
    """Convert a located lat/lon pair of matching kind; mixed kinds are skipped."""
    numeric = (int, float)
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return None
    if isinstance(latitude, numeric) and isinstance(longitude, numeric):
        return float(latitude), float(longitude)
    if isinstance(latitude, str) and isinstance(longitude, str):
        return convert_coordinates(latitude), convert_coordinates(longitude)
    if isinstance(latitude, list) and isinstance(longitude, list):
        return process_coordinate_array(latitude), process_coordinate_array(longitude)
    return None


def gps_container_candidates(tags: TagBag) -> Iterator[GeoCoordinate]:
    """Strategy 4: generic GPS containers searched by key synonyms."""
    for container in _gps_containers(tags):
        latitude_raw = locate_raw(container, LATITUDE_KEYS)
        longitude_raw = locate_raw(container, LONGITUDE_KEYS)
        if latitude_raw is None or longitude_raw is None:
            continue
        pair = _convert_pair(latitude_raw, longitude_raw)
        if pair is None:
            logger.debug("Skipping GPS container with mismatched latitude/longitude types")
            continue
        latitude_ref = locate_ref(container, LATITUDE_REF_KEYS) or 'N'
        longitude_ref = locate_ref(container, LONGITUDE_REF_KEYS) or 'E'
        latitude = apply_hemisphere(pair[0], latitude_ref, 'S')
        longitude = apply_hemisphere(pair[1], longitude_ref, 'W')
        yield GeoCoordinate(latitude, longitude, GpsSource.GPS_CONTAINER)


def _coordinate_array(value: TagValue) -> Optional[List[Any]]:
    if isinstance(value, Described) and isinstance(value.raw, ArrayValue):
        value = value.raw
    if isinstance(value, ArrayValue) and len(value) >= 2:
        return to_python(value)
    return None


def _array_component(item: Any) -> float:
    if isinstance(item, bool):
        return math.nan
    if isinstance(item, (int, float)):
        return float(item)
    if isinstance(item, str):
        return parse_leading_float(item)
    return math.nan


def coordinate_array_candidates(tags: TagBag) -> Iterator[GeoCoordinate]:
    """Strategy 5: GeoJSON-style `coordinates` arrays, ordered [longitude, latitude]."""
    arrays = []
    for container_key in COORDINATE_ARRAY_CONTAINERS:
        container = tags.get(container_key)
        if isinstance(container, Nested):
            arrays.append(_coordinate_array(container.get('coordinates')))
    arrays.append(_coordinate_array(tags.get('coordinates')))
    for coordinates in arrays:
        if coordinates is None:
            continue
        yield GeoCoordinate(_array_component(coordinates[1]), _array_component(coordinates[0]),
                            GpsSource.COORDINATE_ARRAY)


STRATEGIES: Tuple[Callable[[TagBag], Iterator[GeoCoordinate]], ...] = (
    vendor_location_candidates,
    xmp_location_candidates,
    standard_exif_candidates,
    gps_container_candidates,
    coordinate_array_candidates,
)


def resolve_gps(tags: TagBag) -> Optional[GeoCoordinate]:
    """
    Resolve the geolocation of an image.

    Args:
        tags: The classified tags of one image.

    Returns:
        The first valid GeoCoordinate produced by the strategy chain, or None.
    """
    if tags.is_empty:
        return None
    for strategy in STRATEGIES:
        for candidate in strategy(tags):
            allow_null_island = candidate.source is GpsSource.STANDARD_EXIF
            if is_valid_coordinate(candidate.latitude, candidate.longitude, allow_null_island):
                logger.debug(f"GPS resolved by {strategy.__name__}: "
                             f"{candidate.latitude:.6f}, {candidate.longitude:.6f}")
                return candidate
            logger.debug(f"Rejected GPS candidate from {strategy.__name__}: "
                         f"({candidate.latitude}, {candidate.longitude})")
    return None


# ============================================================================
# Display helpers
# ============================================================================

def decimal_to_dms(value: float) -> Tuple[int, int, float]:
    """
    Split decimal degrees into unsigned (degrees, minutes, seconds).

    The sign is dropped; callers pair the result with a hemisphere letter.
    """
    value = abs(value)
    degrees = int(value)
    minutes_full = (value - degrees) * 60
    minutes = int(minutes_full)
    seconds = (minutes_full - minutes) * 60
    return degrees, minutes, seconds


def format_dms(degrees: float, minutes: float, seconds: float, style: str = 'symbol') -> str:
    """
    Render a degree/minute/second triple as text.

    Args:
        degrees: Whole or fractional degrees.
        minutes: Minutes of arc.
        seconds: Seconds of arc.
        style: 'symbol' for `D° M' S"` or 'deg' for `D deg M' S"`.

    Returns:
        The formatted string.
    """
    if style not in DMS_STYLES:
        raise ValueError(f"Unknown DMS style '{style}', expected one of {DMS_STYLES}")
    d, m, s = format_number(degrees), format_number(minutes), format_number(seconds)
    if style == 'deg':
        return f"{d} deg {m}' {s}\""
    return f"{d}° {m}' {s}\""
