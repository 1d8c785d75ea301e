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
Scalar Value Normalizers.

Each capture-setting field is extracted with `resolve()` and a numeric pattern.
Parse failures are silent: the field is simply absent and sibling fields are
unaffected.
"""
import math
import re
from typing import Optional, Tuple

from pmtk.utils.field_resolver import FieldQuery, resolve
from pmtk.utils.tag_bag import TagBag

# Candidate keys per field, highest priority first
DATE_TIME_KEYS: FieldQuery = (
    'DateTimeOriginal', 'DateTime', 'CreateDate', 'ModifyDate',
    'xmp:CreateDate', 'MediaCreateDate', 'DateCreated', 'ContentCreateDate'
)
MAKE_KEYS: FieldQuery = (
    'Make', 'Manufacturer', 'CameraManufacturer', 'xmp:Make',
    'Software', 'DeviceManufacturer', 'MakerNote', 'Brand',
    'Producer', 'CameraMake', 'Vendor'
)
MODEL_KEYS: FieldQuery = (
    'Model', 'CameraModel', 'DeviceModel', 'xmp:Model',
    'CameraModelName', 'CameraType', 'HandlerType',
    'DeviceName', 'PhoneModel'
)
EXPOSURE_KEYS: FieldQuery = (
    'ExposureTime', 'ShutterSpeedValue', 'Exposure', 'ShutterSpeed',
    'ExpTime', 'Shutter', 'ExposureValue'
)
F_NUMBER_KEYS: FieldQuery = (
    'FNumber', 'ApertureValue', 'Aperture', 'F-Stop',
    'Fnumber', 'Aperture Value', 'FNumber Value', 'F-number'
)
ISO_KEYS: FieldQuery = (
    'ISOSpeedRatings', 'ISO', 'ISOSpeed', 'BaseISO',
    'ISO Value', 'ISOValue', 'ISO Speed', 'SensitivityType'
)
FOCAL_LENGTH_KEYS: FieldQuery = (
    'FocalLength', 'Focal', 'FocalLengthIn35mmFilm',
    'FocalLength35mm', 'Focal Length', 'Focal Length In 35mm Format'
)
SOFTWARE_KEYS: FieldQuery = ('Software', 'ProcessingSoftware', 'Creator')
ORIENTATION_KEYS: FieldQuery = ('Orientation', 'ImageOrientation', 'Image Orientation')
# Pixel dimensions are preferred over the DPI-valued X/YResolution tags
WIDTH_KEYS: FieldQuery = ('ImageWidth', 'ExifImageWidth', 'PixelXDimension', 'Width', 'XResolution')
HEIGHT_KEYS: FieldQuery = ('ImageHeight', 'ExifImageHeight', 'PixelYDimension', 'Height', 'YResolution')
WHITE_BALANCE_KEYS: FieldQuery = ('WhiteBalance', 'WB')
FLASH_KEYS: FieldQuery = ('Flash', 'FlashMode', 'FlashFired')
LENS_KEYS: FieldQuery = ('LensModel', 'Lens', 'LensInfo', 'LensMake')

FIELD_QUERIES = {
    'date_time': DATE_TIME_KEYS,
    'make': MAKE_KEYS,
    'model': MODEL_KEYS,
    'exposure': EXPOSURE_KEYS,
    'f_number': F_NUMBER_KEYS,
    'iso': ISO_KEYS,
    'focal_length': FOCAL_LENGTH_KEYS,
    'software': SOFTWARE_KEYS,
    'orientation': ORIENTATION_KEYS,
    'resolution_width': WIDTH_KEYS,
    'resolution_height': HEIGHT_KEYS,
    'white_balance': WHITE_BALANCE_KEYS,
    'flash': FLASH_KEYS,
    'lens': LENS_KEYS,
}

F_NUMBER_PATTERN = re.compile(r'f/(\d+\.?\d*)|(\d+\.?\d*)')
FOCAL_LENGTH_PATTERN = re.compile(r'(\d+\.?\d*)\s*mm|(\d+\.?\d*)')
DIGITS_PATTERN = re.compile(r'(\d+)')
LEADING_FLOAT_PATTERN = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
LEADING_INT_PATTERN = re.compile(r'^\s*([+-]?\d+)')


# ============================================================================
# Parsing helpers
# ============================================================================

def parse_leading_float(text: Optional[str]) -> float:
    """
    Parse the numeric prefix of a string ('0.002 sec' -> 0.002).

    Returns:
        The parsed value, or NaN when the string has no numeric prefix.
    """
    if text is None:
        return math.nan
    match = LEADING_FLOAT_PATTERN.match(str(text))
    if not match:
        return math.nan
    return float(match.group(1))


def parse_leading_int(text: Optional[str]) -> Optional[int]:
    """Parse the integer prefix of a string, or None."""
    if text is None:
        return None
    match = LEADING_INT_PATTERN.match(str(text))
    return int(match.group(1)) if match else None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _digits_or_int(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    match = DIGITS_PATTERN.search(text)
    if match:
        return int(match.group(1))
    return parse_leading_int(text)


# ============================================================================
# Field normalizers
# ============================================================================

def format_exposure(raw: Optional[str]) -> Optional[str]:
    """
    Normalize an exposure time to a fraction string.

    Fractions pass through unchanged; decimals in (0, 1) become '1/N';
    anything else passes through.
    """
    if not raw:
        return None
    if '/' in raw:
        return raw
    value = parse_leading_float(raw)
    if math.isfinite(value) and 0 < value < 1:
        return f"1/{round_half_up(1 / value)}"
    return raw


def parse_f_number(raw: Optional[str]) -> Optional[float]:
    """Parse 'f/1.8' or '1.8' into 1.8."""
    if not raw:
        return None
    match = F_NUMBER_PATTERN.search(raw)
    if match:
        return _finite_or_none(float(match.group(1) or match.group(2)))
    return _finite_or_none(parse_leading_float(raw))


def parse_focal_length(raw: Optional[str]) -> Optional[float]:
    """Parse '4.2 mm' or '4.2' into 4.2."""
    if not raw:
        return None
    match = FOCAL_LENGTH_PATTERN.search(raw)
    if match:
        return _finite_or_none(float(match.group(1) or match.group(2)))
    return _finite_or_none(parse_leading_float(raw))


def parse_first_int(raw: Optional[str]) -> Optional[int]:
    """Parse the first run of digits ('ISO 200' -> 200, '6 (Right-top)' -> 6)."""
    if not raw:
        return None
    return _digits_or_int(raw)


def format_resolution(width: Optional[str], height: Optional[str]) -> Optional[str]:
    """Combine width and height into '<w> x <h>' when both parse."""
    w = _digits_or_int(width) if width else None
    h = _digits_or_int(height) if height else None
    if w is None or h is None:
        return None
    return f"{w} x {h}"


def combine_make_model(make: Optional[str], model: Optional[str]) -> Optional[str]:
    """
    Prefix the model with the make unless the model already contains it.

    'Apple' + 'iPhone 13' -> 'Apple iPhone 13'; 'Apple' + 'Apple iPhone 13'
    stays unchanged. The comparison is a case-insensitive substring check.
    """
    if model and make:
        if make.lower() in model.lower():
            return model
        return f"{make} {model}"
    return model


def _stripped(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


# ============================================================================
# Extraction from a tag bag
# ============================================================================

def extract_date_time(tags: TagBag) -> Optional[str]:
    return resolve(tags, DATE_TIME_KEYS)


def extract_make(tags: TagBag) -> Optional[str]:
    return _stripped(resolve(tags, MAKE_KEYS))


def extract_model(tags: TagBag) -> Optional[str]:
    return _stripped(resolve(tags, MODEL_KEYS))


def extract_make_and_model(tags: TagBag) -> Tuple[Optional[str], Optional[str]]:
    """Resolve make and the derived model."""
    make = extract_make(tags)
    return make, combine_make_model(make, extract_model(tags))


def extract_exposure_time(tags: TagBag) -> Optional[str]:
    return format_exposure(resolve(tags, EXPOSURE_KEYS))


def extract_f_number(tags: TagBag) -> Optional[float]:
    return parse_f_number(resolve(tags, F_NUMBER_KEYS))


def extract_iso(tags: TagBag) -> Optional[int]:
    return parse_first_int(resolve(tags, ISO_KEYS))


def extract_focal_length(tags: TagBag) -> Optional[float]:
    return parse_focal_length(resolve(tags, FOCAL_LENGTH_KEYS))


def extract_software(tags: TagBag) -> Optional[str]:
    return resolve(tags, SOFTWARE_KEYS)


def extract_orientation(tags: TagBag) -> Optional[int]:
    return parse_first_int(resolve(tags, ORIENTATION_KEYS))


def extract_resolution(tags: TagBag) -> Optional[str]:
    return format_resolution(resolve(tags, WIDTH_KEYS), resolve(tags, HEIGHT_KEYS))


def extract_white_balance(tags: TagBag) -> Optional[str]:
    return resolve(tags, WHITE_BALANCE_KEYS)


def extract_flash(tags: TagBag) -> Optional[str]:
    return resolve(tags, FLASH_KEYS)


def extract_lens(tags: TagBag) -> Optional[str]:
    return resolve(tags, LENS_KEYS)
