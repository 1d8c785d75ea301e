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
Tag Decoder.

Decodes the embedded metadata of an image into the nested key/value structure
consumed by `TagBag.from_mapping()`:
- IFD0, Exif, Interoperability and GPS tags (Pillow)
- TIFF-family containers Pillow cannot open, e.g. BigTIFF (tifffile)
- XMP packets (lxml)
- HEIC/HEIF containers when pillow-heif is installed

Each tag becomes a `{"value": raw, "description": text}` entry with a
human-readable description ('f/1.8', '1/250', '4.2 mm', '6 (Right-top)').
With `DecodeOptions.expanded` the output is grouped as
`{"file", "exif", "gps", "xmp"}`; otherwise all tags are merged at the root.
"""

import io
import logging
import math
import re
import unicodedata
from numbers import Rational
from typing import Any, Dict, List, Optional, Tuple

import lxml.etree as etree
import tifffile
from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import GPSTAGS, IFD, TAGS

from pmtk.utils.data_models import DecodeOptions
from pmtk.utils.exceptions import DecodeFailureError
from pmtk.utils.field_resolver import format_number
from pmtk.utils.gps_resolver import apply_hemisphere, format_dms, process_coordinate_array
from pmtk.utils.value_normalizers import round_half_up

logger = logging.getLogger(__name__)


def _register_heif_support() -> bool:
    """Register the HEIF opener with Pillow when pillow-heif is installed."""
    try:
        from pillow_heif import register_heif_opener
    except ImportError:
        logger.debug("pillow-heif is not installed; HEIC/HEIF images cannot be opened")
        return False
    register_heif_opener()
    return True

HEIF_SUPPORTED = _register_heif_support()

REVERSE_TAGS = {name: code for code, name in TAGS.items()}
REVERSE_GPSTAGS = {name: code for code, name in GPSTAGS.items()}

# Tag value interpretation mappings, keyed by tag name
TAG_VALUE_MAPPINGS = {
    'Orientation': {
        1: "Top-left",
        2: "Top-right",
        3: "Bottom-right",
        4: "Bottom-left",
        5: "Left-top",
        6: "Right-top",
        7: "Right-bottom",
        8: "Left-bottom",
    },
    'WhiteBalance': {
        0: "Auto",
        1: "Manual",
    },
    'ExposureMode': {
        0: "Auto exposure",
        1: "Manual exposure",
        2: "Auto bracket",
    },
    'ExposureProgram': {
        0: "Not defined",
        1: "Manual",
        2: "Normal program",
        3: "Aperture priority",
        4: "Shutter priority",
        5: "Creative program",
        6: "Action program",
        7: "Portrait mode",
        8: "Landscape mode",
    },
    'MeteringMode': {
        0: "Unknown",
        1: "Average",
        2: "Center-weighted average",
        3: "Spot",
        4: "Multi-spot",
        5: "Pattern",
        6: "Partial",
        255: "Other",
    },
    'ResolutionUnit': {
        1: "None",
        2: "inches",
        3: "centimeters",
    },
    'ColorSpace': {
        1: "sRGB",
        65535: "Uncalibrated",
    },
    'SceneCaptureType': {
        0: "Standard",
        1: "Landscape",
        2: "Portrait",
        3: "Night scene",
    },
    'GPSAltitudeRef': {
        0: "Sea level",
        1: "Sea level reference (negative value)",
    },
}

FLASH_MODES = {
    1: "compulsory flash mode",
    2: "compulsory flash mode",
    3: "auto mode",
}

GPS_REF_NAMES = {
    'N': "North latitude",
    'S': "South latitude",
    'E': "East longitude",
    'W': "West longitude",
}

# Tags stored as RATIONAL; tifffile returns them as (numerator, denominator) runs
RATIONAL_TAGS = {
    'ExposureTime', 'FNumber', 'ApertureValue', 'MaxApertureValue', 'ShutterSpeedValue',
    'BrightnessValue', 'ExposureBiasValue', 'FocalLength', 'DigitalZoomRatio',
    'XResolution', 'YResolution', 'LensSpecification', 'CompressedBitsPerPixel',
    'GPSLatitude', 'GPSLongitude', 'GPSAltitude', 'GPSTimeStamp', 'GPSDOP',
    'GPSSpeed', 'GPSImgDirection', 'GPSDestBearing',
}

# Pointer and bulk-data tags left out of the output
SKIPPED_TAGS = {
    273,    # StripOffsets
    279,    # StripByteCounts
    324,    # TileOffsets
    325,    # TileByteCounts
    700,    # XMP (parsed separately)
    34665,  # ExifIFDPointer
    34853,  # GPSInfo
    34675,  # InterColorProfile
    40965,  # InteroperabilityIFDPointer
}

TIFF_SIGNATURES = (b'II*\x00', b'MM\x00*', b'II+\x00', b'MM\x00+')

XMP_START = b'<x:xmpmeta'
XMP_END = b'</x:xmpmeta>'
RDF_NS = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'
# Properties from these namespaces are also stored under an 'xmp:' prefixed key
XMP_ALIAS_NAMESPACES = {
    'http://ns.adobe.com/xap/1.0/',
    'http://ns.adobe.com/tiff/1.0/',
    'http://ns.adobe.com/exif/1.0/',
}
XMP_GPS_PATTERN = re.compile(
    r'^\s*(\d+),(\d+(?:\.\d+)?)(?:,(\d+(?:\.\d+)?))?\s*([NSEW])\s*$', re.IGNORECASE
)

USER_COMMENT_PREFIX_LENGTH = 8

# BYTE-typed tags that Pillow returns as raw bytes
BYTE_VALUED_TAGS = {'GPSAltitudeRef', 'GPSVersionID'}


# ============================================================================
# Value revival and description
# ============================================================================

def _sanitize_string(input_str: str) -> str:
    """Remove NUL bytes and non-printable characters, keeping whitespace."""
    sanitized = input_str.replace('\x00', '')
    sanitized = "".join(ch for ch in sanitized if unicodedata.category(ch)[0] != 'C' or ch.isspace())
    return sanitized.strip()


def _bytes_to_text(data: bytes) -> Optional[str]:
    """Decode bytes that hold text; returns None for binary payloads."""
    try:
        text = data.decode('utf-8').replace('\x00', '')
    except UnicodeDecodeError:
        return None
    if any(unicodedata.category(ch)[0] == 'C' and not ch.isspace() for ch in text):
        return None
    return text.strip()


def _pair_rationals(name: str, value: Any) -> Any:
    """Collapse tifffile (numerator, denominator) runs into floats."""
    if name not in RATIONAL_TAGS or not isinstance(value, (tuple, list)):
        return value
    if len(value) == 0 or len(value) % 2 or not all(isinstance(v, int) for v in value):
        return value
    floats = [n / d if d else math.nan for n, d in zip(value[0::2], value[1::2])]
    return floats[0] if len(floats) == 1 else floats


def revive_value(value: Any, name: str = '') -> Any:
    """
    Convert a decoded tag value to plain Python data.

    Rationals become floats, text bytes become strings, binary bytes become a
    short summary and tuples become lists.
    """
    if value is None or isinstance(value, (bool, str, float)):
        return _sanitize_string(value) if isinstance(value, str) else value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, Rational):
        try:
            return float(value)
        except (ZeroDivisionError, ValueError):
            return math.nan
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
        if name in BYTE_VALUED_TAGS and data:
            return data[0] if len(data) == 1 else list(data)
        if name == 'UserComment' and len(data) >= USER_COMMENT_PREFIX_LENGTH:
            data = data[USER_COMMENT_PREFIX_LENGTH:]
        text = _bytes_to_text(data)
        return text if text is not None else f"binary data ({len(data)} bytes)"
    if isinstance(value, dict):
        return {str(k): revive_value(v, str(k)) for k, v in value.items()}
    if isinstance(value, (tuple, list)):
        return [revive_value(v, name) for v in value]
    if hasattr(value, 'tolist'):
        # numpy arrays and scalars from tifffile
        return revive_value(value.tolist(), name)
    return str(value)


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Rational)):
        try:
            return float(value)
        except (ZeroDivisionError, ValueError):
            return None
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return _as_float(value[0])
    return None


def _describe_flash(value: int) -> str:
    if value & 0x20:
        return "No flash function"
    parts = ["Flash fired" if value & 0x1 else "Flash did not fire"]
    mode = FLASH_MODES.get((value >> 3) & 0x3)
    if mode:
        parts.append(mode)
    if value & 0x40:
        parts.append("red-eye reduction mode")
    return ', '.join(parts)


def _describe_generic(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ', '.join(_describe_generic(v) for v in value)
    if isinstance(value, dict):
        return ', '.join(f"{k}: {_describe_generic(v)}" for k, v in value.items())
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    return str(value)


def describe_value(name: str, value: Any) -> Optional[str]:
    """
    Produce the human-readable description of a revived tag value.

    Args:
        name: Tag name (e.g. 'FNumber').
        value: Revived value.

    Returns:
        Display text, or None when the value is missing.
    """
    if value is None:
        return None
    number = _as_float(value)

    if name == 'ExposureTime' and number is not None:
        if 0 < number < 1:
            return f"1/{round_half_up(1 / number)}"
        return format_number(number)
    if name == 'FNumber' and number is not None:
        return f"f/{number:.1f}"
    if name in ('ApertureValue', 'MaxApertureValue') and number is not None:
        # APEX aperture value
        return f"f/{2 ** (number / 2):.1f}"
    if name == 'FocalLength' and number is not None:
        return f"{format_number(round(number, 2))} mm"
    if name == 'FocalLengthIn35mmFilm' and number is not None:
        return f"{format_number(number)} mm"
    if name == 'Orientation' and number is not None:
        code = int(number)
        return f"{code} ({TAG_VALUE_MAPPINGS['Orientation'].get(code, 'Unknown')})"
    if name == 'Flash' and number is not None:
        return _describe_flash(int(number))
    if name in TAG_VALUE_MAPPINGS and number is not None:
        return TAG_VALUE_MAPPINGS[name].get(int(number), format_number(number))
    if name in ('GPSLatitude', 'GPSLongitude') and isinstance(value, list) and len(value) == 3:
        degrees, minutes, seconds = (_as_float(v) or 0.0 for v in value)
        return format_dms(degrees, minutes, round(seconds, 2))
    if name in ('GPSLatitudeRef', 'GPSLongitudeRef') and isinstance(value, str) and value:
        return GPS_REF_NAMES.get(value[0].upper(), value)
    if name == 'GPSAltitude' and number is not None:
        return f"{format_number(round(number, 2))} m"
    if name == 'LensSpecification' and isinstance(value, list) and len(value) >= 4:
        min_focal, max_focal, min_fstop, max_fstop = ((_as_float(v) or 0.0) for v in value[:4])
        return f"{min_focal:.1f}-{max_focal:.1f} mm f/{min_fstop:.1f}-{max_fstop:.1f}"
    return _describe_generic(value)


# ============================================================================
# XMP
# ============================================================================

def parse_xmp_coordinate(text: Any) -> Optional[float]:
    """Parse an XMP GPSCoordinate ('34,3.508N' or '34,3,30.5S') to signed decimal degrees."""
    if text is None:
        return None
    match = XMP_GPS_PATTERN.match(str(text))
    if not match:
        try:
            return float(text)
        except (TypeError, ValueError):
            return None
    parts = [match.group(1), match.group(2)] + ([match.group(3)] if match.group(3) else [])
    decimal = process_coordinate_array([float(p) for p in parts])
    return -decimal if match.group(4).upper() in ('S', 'W') else decimal


def _xmp_property_value(element) -> Any:
    container = None
    for child in element:
        if isinstance(child.tag, str) and child.tag in (
                f'{{{RDF_NS}}}Seq', f'{{{RDF_NS}}}Bag', f'{{{RDF_NS}}}Alt'):
            container = child
            break
    if container is not None:
        items = [_xmp_property_value(li) for li in container if isinstance(li.tag, str)]
        if container.tag == f'{{{RDF_NS}}}Alt':
            return items[0] if items else ''
        return items

    children = [child for child in element if isinstance(child.tag, str)]
    if children or element.get(f'{{{RDF_NS}}}parseType') == 'Resource':
        struct: Dict[str, Any] = {}
        nodes = children
        if len(children) == 1 and children[0].tag == f'{{{RDF_NS}}}Description':
            nodes = [c for c in children[0] if isinstance(c.tag, str)]
            for qname, value in children[0].attrib.items():
                if not qname.startswith(f'{{{RDF_NS}}}'):
                    struct[etree.QName(qname).localname] = value
        for node in nodes:
            struct[etree.QName(node).localname] = _xmp_property_value(node)
        return struct

    resource = element.get(f'{{{RDF_NS}}}resource')
    if resource is not None:
        return resource
    return (element.text or '').strip()


def _store_xmp_property(result: Dict[str, Any], qname: str, value: Any):
    name = etree.QName(qname)
    result[name.localname] = value
    if name.namespace in XMP_ALIAS_NAMESPACES:
        result.setdefault(f"xmp:{name.localname}", value)


def parse_xmp(packet: bytes) -> Dict[str, Any]:
    """
    Parse an XMP packet into a mapping keyed by property local names.

    A `Location` block with signed decimal `Latitude`/`Longitude` is added when
    the packet carries `exif:GPSLatitude` and `exif:GPSLongitude`.

    Args:
        packet: The raw `<x:xmpmeta>` packet.

    Returns:
        Property mapping (empty when the packet is not XML).
    """
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(packet, parser)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Malformed XMP packet: {e}")
        return {}
    if root is None:
        return {}

    result: Dict[str, Any] = {}
    for description in root.iter(f'{{{RDF_NS}}}Description'):
        parent = description.getparent()
        if parent is None or parent.tag != f'{{{RDF_NS}}}RDF':
            continue
        for qname, value in description.attrib.items():
            if qname.startswith(f'{{{RDF_NS}}}'):
                continue
            _store_xmp_property(result, qname, value)
        for child in description:
            if isinstance(child.tag, str):
                _store_xmp_property(result, child.tag, _xmp_property_value(child))

    latitude = parse_xmp_coordinate(result.get('GPSLatitude'))
    longitude = parse_xmp_coordinate(result.get('GPSLongitude'))
    if latitude is not None and longitude is not None and 'Location' not in result:
        result['Location'] = {'Latitude': latitude, 'Longitude': longitude}
    return result


# ============================================================================
# Decoder
# ============================================================================

class TagDecoder:
    """Decoder for the embedded metadata of one in-memory image."""

    def __init__(self, data: bytes, options: Optional[DecodeOptions] = None):
        """
        Initialize the decoder.

        Args:
            data: The raw file bytes.
            options: Decoding options (defaults when None).
        """
        if not data:
            raise DecodeFailureError("No image data to decode")
        self.data = bytes(data)
        self.options = options or DecodeOptions()

    # ------------------------------------------------------------------
    # Keys and entries
    # ------------------------------------------------------------------

    def _tag_key(self, code: Optional[int], name: Optional[str]) -> Optional[str]:
        """Output key for a tag, or None when the tag is dropped."""
        if not self.options.translate_keys:
            return str(code) if code is not None else name
        if name:
            return name
        if code is None or not self.options.include_unknown:
            return None
        return f"0x{code:04X}"

    def _entry(self, name: str, value: Any) -> Any:
        revived = revive_value(value, name)
        result = revived if self.options.revive_values else value
        if not self.options.translate_values:
            return result
        return {'value': result, 'description': describe_value(name, revived)}

    def _named_tags(self, items: List[Tuple[Optional[int], Optional[str], Any]]) -> Dict[str, Any]:
        tags: Dict[str, Any] = {}
        for code, name, value in items:
            if code in SKIPPED_TAGS:
                continue
            key = self._tag_key(code, name)
            if key is None:
                continue
            try:
                tags[key] = self._entry(name or key, value)
            except Exception as e:
                logger.warning(f"Skipping tag {code} ({name}) due to parsing error: {e}")
        return tags

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    @staticmethod
    def _safe_ifd(exif: Image.Exif, ifd: IFD) -> Dict[int, Any]:
        try:
            return dict(exif.get_ifd(ifd))
        except (KeyError, ValueError, TypeError, SyntaxError, OSError) as e:
            logger.debug(f"Could not read {ifd.name} IFD: {e}")
            return {}

    def _read_with_pillow(self) -> Optional[Dict[str, Any]]:
        """Read IFD0, Exif, Interop and GPS tags with Pillow; None if Pillow cannot open the data."""
        try:
            with Image.open(io.BytesIO(self.data)) as img:
                img_format = img.format
                width, height = img.size
                xmp_packet = img.info.get('xmp')
                exif = img.getexif()
                ifd0 = [(code, TAGS.get(code), value) for code, value in exif.items()]
                exif_ifd = self._safe_ifd(exif, IFD.Exif)
                interop_ifd = self._safe_ifd(exif, IFD.Interop)
                gps_ifd = self._safe_ifd(exif, IFD.GPSInfo)
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
            logger.debug(f"Pillow could not open image: {e}")
            return None

        exif_items = ifd0 + [(code, TAGS.get(code), value) for code, value in exif_ifd.items()]
        exif_items += [(code, TAGS.get(code), value) for code, value in interop_ifd.items()]
        gps_items = [(code, GPSTAGS.get(code), value) for code, value in gps_ifd.items()]

        if isinstance(xmp_packet, str):
            xmp_packet = xmp_packet.encode('utf-8')
        return {
            'file': self._file_tags(img_format, width, height),
            'exif': self._named_tags(exif_items),
            'gps_raw': self._named_tags(gps_items),
            'xmp_packet': xmp_packet,
        }

    def _read_with_tifffile(self) -> Optional[Dict[str, Any]]:
        """Read page-0 tags of a TIFF-family container with tifffile."""
        if not self.data.startswith(TIFF_SIGNATURES):
            return None
        try:
            with tifffile.TiffFile(io.BytesIO(self.data)) as tif:
                if not tif.pages:
                    return None
                page = tif.pages[0]
                page_tags = page.tags  # type: ignore
                width = page.imagewidth  # type: ignore
                height = page.imagelength  # type: ignore
                items: List[Tuple[Optional[int], Optional[str], Any]] = []
                gps_items: List[Tuple[Optional[int], Optional[str], Any]] = []
                xmp_packet = None
                for tag in page_tags.values():
                    if tag.code == 700:
                        xmp_packet = tag.value
                    elif tag.code == 34665 and isinstance(tag.value, dict):
                        items += self._tifffile_items(tag.value, REVERSE_TAGS)
                    elif tag.code == 34853 and isinstance(tag.value, dict):
                        gps_items += self._tifffile_items(tag.value, REVERSE_GPSTAGS)
                    else:
                        name = TAGS.get(tag.code) or (None if tag.name == str(tag.code) else tag.name)
                        items.append((tag.code, name, _pair_rationals(name or '', tag.value)))
        except (tifffile.TiffFileError, OSError, ValueError, IndexError) as e:
            logger.debug(f"tifffile could not read image: {e}")
            return None

        if isinstance(xmp_packet, str):
            xmp_packet = xmp_packet.encode('utf-8')
        return {
            'file': self._file_tags('TIFF', width, height),
            'exif': self._named_tags(items),
            'gps_raw': self._named_tags(gps_items),
            'xmp_packet': xmp_packet,
        }

    @staticmethod
    def _tifffile_items(ifd: Dict[Any, Any], reverse: Dict[str, int]) -> List[Tuple[Optional[int], Optional[str], Any]]:
        items = []
        for key, value in ifd.items():
            name = str(key)
            if name.isdigit():
                items.append((int(name), None, value))
            else:
                items.append((reverse.get(name), name, _pair_rationals(name, value)))
        return items

    def _file_tags(self, img_format: Optional[str], width: int, height: int) -> Dict[str, Any]:
        if not self.options.translate_values:
            return {'FileType': img_format, 'ImageWidth': width, 'ImageHeight': height}
        return {
            'FileType': {'value': img_format, 'description': img_format},
            'ImageWidth': {'value': width, 'description': f"{width}px"},
            'ImageHeight': {'value': height, 'description': f"{height}px"},
        }

    def _find_xmp_packet(self) -> Optional[bytes]:
        start = self.data.find(XMP_START)
        if start < 0:
            return None
        end = self.data.find(XMP_END, start)
        if end < 0:
            return None
        return self.data[start:end + len(XMP_END)]

    def _xmp_tags(self, packet: Optional[bytes]) -> Dict[str, Any]:
        packet = packet or self._find_xmp_packet()
        if not packet:
            return {}
        properties = parse_xmp(packet)
        if not self.options.translate_values:
            return properties
        return {key: self._xmp_entry(value) for key, value in properties.items()}

    def _xmp_entry(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._xmp_entry(item) for key, item in value.items()}
        if isinstance(value, list):
            return {'value': value, 'description': _describe_generic(value)}
        if isinstance(value, str):
            return {'value': value, 'description': value}
        return value

    @staticmethod
    def _unwrap(entry: Any) -> Any:
        return entry.get('value') if isinstance(entry, dict) else entry

    def _gps_summary(self, gps_raw: Dict[str, Any]) -> Dict[str, float]:
        """Signed decimal Latitude, Longitude and Altitude from the raw GPS tags."""
        if not self.options.translate_keys:
            return {}
        summary: Dict[str, float] = {}
        for axis, negative_ref in (('Latitude', 'S'), ('Longitude', 'W')):
            raw = revive_value(self._unwrap(gps_raw.get(f'GPS{axis}')))
            if isinstance(raw, list) and raw:
                ref = revive_value(self._unwrap(gps_raw.get(f'GPS{axis}Ref')))
                decimal = apply_hemisphere(process_coordinate_array(raw), ref, negative_ref)
                if math.isfinite(decimal):
                    summary[axis] = decimal
        altitude = _as_float(revive_value(self._unwrap(gps_raw.get('GPSAltitude'))))
        if altitude is not None and math.isfinite(altitude):
            altitude_ref = _as_float(revive_value(self._unwrap(gps_raw.get('GPSAltitudeRef')), 'GPSAltitudeRef'))
            summary['Altitude'] = -altitude if altitude_ref == 1 else altitude
        return summary

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def decode(self) -> Dict[str, Any]:
        """
        Decode the image metadata.

        Returns:
            The nested tag mapping (grouped or flat, per the options).

        Raises:
            DecodeFailureError: If no reader recognizes the data.
        """
        groups = self._read_with_pillow() or self._read_with_tifffile()
        if groups is None:
            xmp = self._xmp_tags(None)
            if not xmp:
                hint = "" if HEIF_SUPPORTED else " (install pillow-heif for HEIC/HEIF)"
                raise DecodeFailureError(f"Unrecognized or corrupt image data{hint}")
            groups = {'file': {}, 'exif': {}, 'gps_raw': {}, 'xmp_packet': None}
            xmp_tags = xmp
        else:
            xmp_tags = self._xmp_tags(groups['xmp_packet'])

        file_tags, exif_tags, gps_raw = groups['file'], groups['exif'], groups['gps_raw']

        if not self.options.expanded:
            flat: Dict[str, Any] = {}
            for group in (file_tags, xmp_tags, exif_tags, gps_raw):
                flat.update(group)
            return flat

        output: Dict[str, Any] = {}
        if file_tags:
            output['file'] = file_tags
        if exif_tags or gps_raw:
            output['exif'] = {**exif_tags, **gps_raw}
        gps_summary = self._gps_summary(gps_raw)
        if gps_summary:
            output['gps'] = gps_summary
        if xmp_tags:
            output['xmp'] = xmp_tags
        return output


def decode_tags(data: bytes, options: Optional[DecodeOptions] = None) -> Dict[str, Any]:
    """
    Decode the embedded metadata of an image.

    Args:
        data: The raw file bytes.
        options: Decoding options.

    Returns:
        The nested tag mapping.

    Raises:
        DecodeFailureError: If the data is empty or not a recognized image.
    """
    return TagDecoder(data, options).decode()
