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
Data Models for the Photo Metadata ToolKit.

This module defines strongly-typed data classes for representing decoded tag
data and the normalized metadata records built from it. These classes provide
type safety, self-documentation, and clear contracts between modules.

Tag value classes (tagged union, see `TagValue`):
    Absent: A missing value
    Scalar: A bare string, number or boolean
    Described: A `{value, description}` pair produced by the decoder
    ArrayValue: An ordered list of tag values
    Nested: A mapping of key names to further tag values

Domain model classes:
    GeoCoordinate: A validated latitude/longitude pair and the strategy that produced it
    ImageMetadata: The canonical, normalized metadata record for one image
    UploadedImage: An image entry pairing a caller-assigned id with its metadata

Report classes:
    ReportSection: A titled table of label/value rows in a metadata report

Decoder and diagnostics classes:
    DecodeOptions: Fixed options passed to the tag decoder
    ExtractionEvent: A structured record emitted at extraction milestones

Enumerations:
    GpsSource: Which GPS resolution strategy produced a coordinate
    ExtractionIssue: Local, silent degradations that can occur during extraction
    Milestone: Named points in the extraction pipeline
"""

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


# ============================================================================
# Tag value classes
# ============================================================================

@dataclass(frozen=True)
class Absent:
    """A value that is not present in the tag bag."""

    def __bool__(self) -> bool:
        return False


ABSENT = Absent()


@dataclass(frozen=True)
class Scalar:
    """
    A bare scalar found in the tag bag.

    Attributes:
        value: The string, integer, float or boolean value.
    """
    value: Union[str, int, float, bool]


@dataclass(frozen=True)
class Described:
    """
    A decoder tag carrying a human-readable description and a raw value.

    Attributes:
        description: Human-readable rendering (e.g. 'f/1.8'), if any.
        raw: The raw typed value as a `TagValue`; `ABSENT` when only a
            description was supplied.
    """
    description: Optional[str]
    raw: 'TagValue' = ABSENT


@dataclass(frozen=True)
class ArrayValue:
    """
    An ordered array of tag values (e.g. a degrees/minutes/seconds triple).

    Attributes:
        items: The elements of the array, each classified as a `TagValue`.
    """
    items: Tuple['TagValue', ...] = ()

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Nested:
    """
    A nested mapping of key names to tag values (a namespace or container).

    Attributes:
        entries: Mapping of key name to `TagValue`.
    """
    entries: Mapping[str, 'TagValue'] = field(default_factory=dict)

    def get(self, key: str) -> 'TagValue':
        """Returns the value stored under `key`, or `ABSENT`."""
        return self.entries.get(key, ABSENT)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


TagValue = Union[Absent, Scalar, Described, ArrayValue, Nested]


# ============================================================================
# Enumerations
# ============================================================================

class GpsSource(str, Enum):
    """The GPS resolution strategy that produced a coordinate."""
    VENDOR_LOCATION = 'vendor_location'
    XMP_LOCATION = 'xmp_location'
    STANDARD_EXIF = 'standard_exif'
    GPS_CONTAINER = 'gps_container'
    COORDINATE_ARRAY = 'coordinate_array'
    IMPORTED = 'imported'


class ExtractionIssue(str, Enum):
    """Local degradations; each resolves to an absent field or an empty record."""
    DECODE_TIMEOUT = 'decode_timeout'
    DECODE_FAILURE = 'decode_failure'
    EMPTY_TAG_BAG = 'empty_tag_bag'
    FIELD_PARSE_FAILURE = 'field_parse_failure'
    INVALID_COORDINATE = 'invalid_coordinate'
    FILE_READ_FAILURE = 'file_read_failure'


class Milestone(str, Enum):
    """Points in the extraction pipeline at which diagnostic events are emitted."""
    DECODE_STARTED = 'decode_started'
    DECODE_FINISHED = 'decode_finished'
    DECODE_TIMEOUT = 'decode_timeout'
    DECODE_FAILED = 'decode_failed'
    TAG_BAG_EMPTY = 'tag_bag_empty'
    FIELDS_RESOLVED = 'fields_resolved'
    GPS_RESOLVED = 'gps_resolved'
    GPS_ABSENT = 'gps_absent'
    FILE_READ_FAILED = 'file_read_failed'


# ============================================================================
# Decoder and diagnostics classes
# ============================================================================

@dataclass(frozen=True)
class DecodeOptions:
    """
    Options passed to the tag decoder.

    Attributes:
        expanded: Group tags by namespace (`exif`, `gps`, `xmp`, `file`)
            instead of merging them flat at the root.
        include_unknown: Keep tags whose id has no known name.
        revive_values: Convert rationals to floats and bytes to text.
        translate_keys: Replace numeric tag ids with tag names.
        translate_values: Attach a human-readable description to each tag.
    """
    expanded: bool = True
    include_unknown: bool = True
    revive_values: bool = True
    translate_keys: bool = True
    translate_values: bool = True


@dataclass(frozen=True)
class ExtractionEvent:
    """
    A structured diagnostic record emitted at an extraction milestone.

    Attributes:
        milestone: The pipeline milestone reached.
        file_name: Name of the file being processed.
        detail: Milestone-specific details (durations, counts, issue kind).
    """
    milestone: Milestone
    file_name: str
    detail: Dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Domain model classes
# ============================================================================

@dataclass(frozen=True)
class GeoCoordinate:
    """
    A decimal-degree coordinate resolved from the tag bag.

    Attributes:
        latitude: Decimal latitude in [-90, 90], negative south of the equator.
        longitude: Decimal longitude in [-180, 180], negative west of Greenwich.
        source: The GPS strategy that produced the coordinate.
    """
    latitude: float
    longitude: float
    source: GpsSource = GpsSource.IMPORTED

    def to_dict(self) -> Dict[str, float]:
        """Returns the export representation `{latitude, longitude}`."""
        return {'latitude': self.latitude, 'longitude': self.longitude}


# Export key for each ImageMetadata attribute, in export order.
EXPORT_KEYS: Tuple[Tuple[str, str], ...] = (
    ('file_name', 'fileName'),
    ('date_time', 'dateTime'),
    ('make', 'make'),
    ('model', 'model'),
    ('exposure', 'exposure'),
    ('f_number', 'fNumber'),
    ('iso', 'iso'),
    ('focal_length', 'focalLength'),
    ('software', 'software'),
    ('orientation', 'orientation'),
    ('resolution', 'resolution'),
    ('white_balance', 'whiteBalance'),
    ('flash', 'flash'),
    ('lens', 'lens'),
    ('gps', 'gps'),
)


@dataclass(frozen=True)
class ImageMetadata:
    """
    The canonical metadata record for one image.

    Only `file_name` is required; every other field is independently optional
    and absent (None) when it could not be resolved.

    Attributes:
        file_name: Name of the source file.
        date_time: Capture date/time as found in the tags.
        make: Device manufacturer.
        model: Device model, prefixed with the make when the model text does
            not already contain it.
        exposure: Exposure time as a fraction string (e.g. '1/250').
        f_number: Aperture f-number.
        iso: ISO sensitivity.
        focal_length: Focal length in millimetres.
        software: Processing or firmware software.
        orientation: EXIF orientation code (1-8).
        resolution: '<width> x <height>'.
        white_balance: White balance description.
        flash: Flash description.
        lens: Lens model or description.
        gps: Resolved geolocation.
    """
    file_name: str
    date_time: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    exposure: Optional[str] = None
    f_number: Optional[float] = None
    iso: Optional[int] = None
    focal_length: Optional[float] = None
    software: Optional[str] = None
    orientation: Optional[int] = None
    resolution: Optional[str] = None
    white_balance: Optional[str] = None
    flash: Optional[str] = None
    lens: Optional[str] = None
    gps: Optional[GeoCoordinate] = None

    @property
    def has_location(self) -> bool:
        return self.gps is not None

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the record to its export dictionary.

        Absent fields are omitted and keys use the export names
        (`fileName`, `fNumber`, ...).

        Returns:
            An ordered dictionary suitable for JSON serialization.
        """
        result: Dict[str, Any] = {}
        for attr, key in EXPORT_KEYS:
            value = getattr(self, attr)
            if value is None:
                continue
            result[key] = value.to_dict() if isinstance(value, GeoCoordinate) else value
        return result

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serializes the record to JSON text."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ImageMetadata':
        """
        Rebuilds a record from its export dictionary.

        Args:
            data: A dictionary produced by `to_dict()` (or parsed export JSON).

        Returns:
            The equivalent ImageMetadata.
        """
        kwargs: Dict[str, Any] = {}
        for attr, key in EXPORT_KEYS:
            if key not in data or data[key] is None:
                continue
            if attr == 'gps':
                gps = data[key]
                kwargs[attr] = GeoCoordinate(float(gps['latitude']), float(gps['longitude']))
            else:
                kwargs[attr] = data[key]
        if 'file_name' not in kwargs:
            raise ValueError("Metadata record is missing 'fileName'")
        return cls(**kwargs)


def generate_image_id() -> str:
    """Generates a short random identifier for an image entry."""
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class UploadedImage:
    """
    An image entry produced by a batch extraction.

    Attributes:
        id: Caller-assigned (or generated) identifier keying the result.
        file_name: Name of the source file.
        metadata: The extracted metadata record.
    """
    id: str
    file_name: str
    metadata: ImageMetadata


# ============================================================================
# Report classes
# ============================================================================

@dataclass
class ReportSection:
    """
    One titled section of a metadata report.

    Attributes:
        id: Section identifier used for anchors (e.g. 'capture-settings').
        title: Human-readable section title.
        rows: (label, value) pairs shown in the section table.
    """
    id: str
    title: str
    rows: List[Tuple[str, str]] = field(default_factory=list)

    def has_data(self) -> bool:
        return bool(self.rows)
