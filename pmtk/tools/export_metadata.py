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
Photo Metadata Export Tool for PMTK.

This module powers the 'export' command. Every supported image under the
input path is extracted and written as:
- json: one `<fileName>-metadata.json` per image, mirroring the input
  directory structure under the output directory
- geojson: a single `locations.geojson` FeatureCollection
- xlsx: a single `metadata.xlsx` workbook
"""

import asyncio
import logging
from pathlib import Path
from typing import List

from pmtk.utils.exceptions import ExportError
from pmtk.utils.exporters import (
    GEOJSON_FILENAME, SPREADSHEET_FILENAME, write_geojson, write_metadata_json, write_spreadsheet
)
from pmtk.utils.metadata_extractor import extract_batch
from pmtk.utils.path_helpers import get_image_files, prepare_output_dir
from pmtk.utils.script_arguments import ExportArguments

logger = logging.getLogger('export_metadata')


def _write_json_files(args: ExportArguments, image_files: List[Path], records) -> List[Path]:
    written = []
    for file_path, record in zip(image_files, records):
        out_dir = prepare_output_dir(args.input_path, args.output_path, file_path)
        written.append(write_metadata_json(record, out_dir))
    return written


def export_metadata(args: ExportArguments) -> int:
    """
    Export the metadata of the input image(s).

    Args:
        args: Parsed command-line arguments

    Returns:
        0 on success, 1 on failure
    """
    logger.info("=== export_metadata started ===")
    logger.debug(f"Arguments: {args}")

    image_files = get_image_files(args.input_path)
    if not image_files:
        logger.error(f"No supported images found at {args.input_path}")
        return 1
    logger.info(f"Found {len(image_files)} image(s) under {args.input_path}")

    results = asyncio.run(extract_batch(image_files, timeout=args.timeout))
    records = [image.metadata for image in results.values()]

    try:
        if args.export_format == 'json':
            written = _write_json_files(args, image_files, records)
            logger.info(f"Wrote {len(written)} metadata file(s) to {args.output_path}")
        elif args.export_format == 'geojson':
            out_path = write_geojson(records, args.output_path / GEOJSON_FILENAME)
            located = sum(1 for record in records if record.has_location)
            logger.info(f"Wrote {located} located image(s) to {out_path}")
        else:
            out_path = write_spreadsheet(records, args.output_path / SPREADSHEET_FILENAME)
            logger.info(f"Wrote {len(records)} row(s) to {out_path}")
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        return 1

    logger.info("Export completed successfully")
    return 0
