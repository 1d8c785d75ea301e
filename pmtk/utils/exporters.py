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
Metadata Exporters.

Writes `ImageMetadata` records to disk:
- one `<fileName>-metadata.json` document per image
- a GeoJSON FeatureCollection of the geotagged images
- an Excel workbook with one row per image (openpyxl)
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from pmtk.utils.config_loader import config
from pmtk.utils.data_models import EXPORT_KEYS, ImageMetadata
from pmtk.utils.exceptions import ExportError

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = "-metadata.json"
DEFAULT_INDENT = 2
GEOJSON_FILENAME = "locations.geojson"
SPREADSHEET_FILENAME = "metadata.xlsx"

# Spreadsheet columns: the export keys with gps split into two columns
SPREADSHEET_COLUMNS = [key for _, key in EXPORT_KEYS if key != 'gps'] + ['latitude', 'longitude']
HEADER_FILL = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
MAX_COLUMN_WIDTH = 60


def _indent() -> int:
    return int(config.get("export.indent", DEFAULT_INDENT))


def export_filename(metadata: ImageMetadata, suffix: Optional[str] = None) -> str:
    """The JSON export file name for a record ('IMG_0001.jpg' -> 'IMG_0001.jpg-metadata.json')."""
    suffix = suffix if suffix is not None else config.get("export.suffix", DEFAULT_SUFFIX)
    return f"{metadata.file_name}{suffix}"


def metadata_to_json(metadata: ImageMetadata, indent: Optional[int] = None) -> str:
    """Serialize one record to its export JSON text."""
    return metadata.to_json(indent=_indent() if indent is None else indent)


def write_metadata_json(metadata: ImageMetadata, out_dir: Union[str, Path], indent: Optional[int] = None) -> Path:
    """
    Write one record as `<fileName>-metadata.json`.

    Args:
        metadata: The record to export.
        out_dir: Destination directory (created when missing).
        indent: JSON indentation (config `export.indent` when None).

    Returns:
        Path of the written file.

    Raises:
        ExportError: If the file cannot be written.
    """
    out_path = Path(out_dir) / export_filename(metadata)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(metadata_to_json(metadata, indent), encoding='utf-8')
    except OSError as e:
        raise ExportError(f"Could not write {out_path}: {e}") from e
    logger.debug(f"Wrote {out_path}")
    return out_path


def metadata_to_geojson(records: Iterable[ImageMetadata]) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection of the geotagged records.

    Records without a location are left out. Each feature is a Point at
    `[longitude, latitude]` whose properties are the record minus `gps`.

    Args:
        records: Metadata records.

    Returns:
        The FeatureCollection as a dictionary.
    """
    features: List[Dict[str, Any]] = []
    for metadata in records:
        if metadata.gps is None:
            continue
        properties = metadata.to_dict()
        properties.pop('gps', None)
        features.append({
            'type': 'Feature',
            'geometry': {
                'type': 'Point',
                'coordinates': [metadata.gps.longitude, metadata.gps.latitude],
            },
            'properties': properties,
        })
    return {'type': 'FeatureCollection', 'features': features}


def write_geojson(records: Iterable[ImageMetadata], out_path: Union[str, Path], indent: Optional[int] = None) -> Path:
    """
    Write the GeoJSON FeatureCollection of the geotagged records.

    Raises:
        ExportError: If the file cannot be written.
    """
    out_path = Path(out_path)
    collection = metadata_to_geojson(records)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(collection, indent=_indent() if indent is None else indent, ensure_ascii=False),
            encoding='utf-8'
        )
    except OSError as e:
        raise ExportError(f"Could not write {out_path}: {e}") from e
    logger.debug(f"Wrote {len(collection['features'])} feature(s) to {out_path}")
    return out_path


def metadata_to_row(metadata: ImageMetadata) -> Dict[str, Any]:
    """Flatten one record into a spreadsheet row keyed by SPREADSHEET_COLUMNS."""
    row = metadata.to_dict()
    gps = row.pop('gps', None)
    if gps:
        row['latitude'] = gps['latitude']
        row['longitude'] = gps['longitude']
    return row


def write_spreadsheet(records: Iterable[ImageMetadata], out_path: Union[str, Path]) -> Path:
    """
    Write an Excel workbook with one row per record.

    Args:
        records: Metadata records.
        out_path: Destination `.xlsx` path.

    Returns:
        Path of the written workbook.

    Raises:
        ExportError: If the workbook cannot be saved.
    """
    out_path = Path(out_path)
    workbook = Workbook()
    ws = workbook.active
    ws.title = "Metadata"

    for col_idx, column_name in enumerate(SPREADSHEET_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column_name)
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center')

    widths = [len(name) for name in SPREADSHEET_COLUMNS]
    row_count = 0
    for row_idx, metadata in enumerate(records, start=2):
        row = metadata_to_row(metadata)
        for col_idx, column_name in enumerate(SPREADSHEET_COLUMNS, start=1):
            value = row.get(column_name)
            ws.cell(row=row_idx, column=col_idx, value=value)
            if value is not None:
                widths[col_idx - 1] = max(widths[col_idx - 1], len(str(value)))
        row_count += 1

    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, MAX_COLUMN_WIDTH)
    ws.freeze_panes = 'B2'

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(out_path)
    except OSError as e:
        raise ExportError(f"Could not save {out_path}: {e}") from e
    logger.debug(f"Wrote {row_count} row(s) to {out_path}")
    return out_path
