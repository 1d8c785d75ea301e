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
Command-line interface for the Photo Metadata ToolKit (PMTK).

This script provides the main entry point for the `pmtk` command,
parsing user arguments and dispatching them to the appropriate tool.
"""
import argparse
import logging
import sys
from pathlib import Path
from pmtk.utils.config_loader import config
from pmtk.utils.log_helpers import setup_logger
from pmtk.utils.script_arguments import ExportArguments, ReadArguments


def positive_float(value: str) -> float:
    """Validate that the value is a positive number of seconds."""
    try:
        fvalue = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Timeout must be a number of seconds, got '{value}'")
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"Timeout must be positive, got '{fvalue}'")
    return fvalue


def resolve_log_level(verbose: bool) -> int:
    """DEBUG with --verbose, otherwise the configured `logging.level`."""
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(str(config.get("logging.level", "INFO")).upper())
    return level if isinstance(level, int) else logging.INFO


def main():
    """
    Main function to parse arguments and call the appropriate tool.
    """
    parser = argparse.ArgumentParser(
        description='PMTK',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='tool', help='Available tools')
    subparsers.required = True

    def add_common_args(p):
        p.add_argument('-i', '--input', required=True, type=Path, dest='input_path', help='An image file or a directory searched recursively.')
        p.add_argument('-c', '--config', type=Path, default=None, dest='config', help='Path to a custom configuration file.')
        p.add_argument('-t', '--timeout', type=positive_float, default=None, dest='timeout', help='Per-file decode timeout in seconds (default from config).')
        p.add_argument('-v', '--verbose', action='store_true', dest='verbose', help='Enable verbose logging.')

    # --- Read Metadata Tool ---
    read_parser = subparsers.add_parser(
        'read',
        help='Read and report the normalized metadata of photos.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_common_args(read_parser)
    read_parser.add_argument('-o', '--output', type=Path, default=None, dest='output_path', help='Report file path; the report is printed when omitted.')
    read_parser.add_argument('-f', '--report-format', type=str.lower, default='md', choices=['md', 'html', 'json'], dest='report_format', help='Format for the output report.')

    # --- Export Metadata Tool ---
    export_parser = subparsers.add_parser(
        'export',
        help='Export the normalized metadata of photos to JSON, GeoJSON or Excel.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_common_args(export_parser)
    export_parser.add_argument('-o', '--output', type=Path, default=None, dest='output_path', help='Output directory (defaults to the input directory).')
    export_parser.add_argument('-f', '--format', type=str.lower, default='json', choices=['json', 'geojson', 'xlsx'], dest='export_format', help='Export format.')

    args = parser.parse_args()
    tool = args.tool
    args_dict = vars(args)
    args_dict.pop('tool', None)

    if args.config:
        config.load(args.config)

    # --- Logger Setup ---
    # A report printed to stdout must not be interleaved with log output
    stream = sys.stderr if tool == 'read' and args.output_path is None else sys.stdout
    log_file = config.get("logging.file") or None
    logger = setup_logger(log_file=log_file, level=resolve_log_level(args.verbose), stream=stream)

    try:
        script_args = ReadArguments(**args_dict) if tool == 'read' else ExportArguments(**args_dict)
    except ValueError:
        # handle_error has already logged the reason
        sys.exit(2)

    try:
        if tool == 'read':
            from pmtk.tools.read_metadata import read_metadata
            result = read_metadata(script_args)
        else:
            from pmtk.tools.export_metadata import export_metadata
            result = export_metadata(script_args)
    except Exception as e:
        logger.error(f"An unexpected error occurred: {e}", exc_info=True)
        sys.exit(1)
    if result:
        sys.exit(result)

if __name__ == "__main__":
    main()
