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
Photo Metadata Reading and Reporting Tool for PMTK.

This module powers the 'read' command: it extracts the normalized metadata of
every supported image under the input path and renders it as a Markdown or
HTML report, or as a JSON array of records.
"""

import asyncio
import json
import logging
import sys
from typing import List

from pmtk.utils.config_loader import config
from pmtk.utils.data_models import ImageMetadata
from pmtk.utils.metadata_extractor import extract_batch
from pmtk.utils.path_helpers import get_image_files
from pmtk.utils.report_formatters import format_report
from pmtk.utils.script_arguments import ReadArguments

logger = logging.getLogger('read_metadata')


def collect_metadata(args: ReadArguments) -> List[ImageMetadata]:
    """
    Extract the metadata of every supported image under the input path.

    Args:
        args: Parsed command-line arguments

    Returns:
        The records, in file order
    """
    image_files = get_image_files(args.input_path)
    logger.info(f"Found {len(image_files)} image(s) under {args.input_path}")
    if not image_files:
        return []
    results = asyncio.run(extract_batch(image_files, timeout=args.timeout))
    return [image.metadata for image in results.values()]


def render(records: List[ImageMetadata], report_format: str) -> str:
    """Render the records in the requested format ('md', 'html' or 'json')."""
    if report_format == 'json':
        indent = int(config.get("export.indent", 2))
        return json.dumps([record.to_dict() for record in records], indent=indent, ensure_ascii=False)
    return format_report(records, report_format)


def read_metadata(args: ReadArguments) -> int:
    """
    Generate the metadata report for the input path.

    Args:
        args: Parsed command-line arguments

    Returns:
        0 on success, 1 on failure
    """
    logger.info("=== read_metadata started ===")
    logger.debug(f"Arguments: {args}")

    records = collect_metadata(args)
    if not records:
        logger.error(f"No supported images found at {args.input_path}")
        return 1

    located = sum(1 for record in records if record.has_location)
    logger.info(f"Extracted metadata for {len(records)} image(s), {located} with location")

    report = render(records, args.report_format)

    if args.output_path is None:
        sys.stdout.write(report)
        sys.stdout.write("\n")
        sys.stdout.flush()
    else:
        try:
            args.output_path.parent.mkdir(parents=True, exist_ok=True)
            args.output_path.write_text(report, encoding='utf-8')
            logger.info(f"Report written successfully: {args.output_path}")
        except OSError as e:
            logger.error(f"Failed to write report: {e}")
            return 1

    logger.info("Analysis completed successfully")
    return 0
