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
File and Directory Path Utilities for PMTK.

This module provides helper functions for file system operations, such as
recursively finding supported image files and preparing output directories
that preserve the input directory structure.
"""
import os
import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.webp', '.heic', '.heif', '.dng')


def is_supported_image(path: Union[str, Path]) -> bool:
    """True if the file name has a supported image extension (case-insensitive)."""
    return str(path).lower().endswith(SUPPORTED_EXTENSIONS)


def get_image_files(input_path: Union[str, Path]) -> List[Path]:
    """
    Get a list of supported image files from an input path (file or directory).

    Directories are searched recursively; results are sorted for a stable
    report order.

    Args:
        input_path: The path to a single image file or a directory.

    Returns:
        List[Path]: Absolute paths to the supported image files.
    """
    input_path = Path(input_path)
    image_files = []
    if input_path.is_dir():
        for root, _, files in os.walk(input_path):
            for file in files:
                if is_supported_image(file):
                    image_files.append(Path(root, file).resolve())
    elif input_path.is_file() and is_supported_image(input_path):
        image_files.append(input_path.resolve())
    else:
        logger.debug(f"No supported image at {input_path}")
    return sorted(image_files)


def prepare_output_dir(input_path: Union[str, Path], output_path: Union[str, Path],
                       file_path: Union[str, Path]) -> Path:
    """
    Construct the output directory for a processed file, preserving directory structure.

    Args:
        input_path: The root input directory (or the single input file).
        output_path: The root output directory.
        file_path: The full path to the input file being processed.

    Returns:
        Path: The directory the file's outputs belong in.
    """
    input_path = Path(input_path).resolve()
    if not input_path.is_dir():
        return Path(output_path)
    relative_dir = Path(os.path.relpath(Path(file_path).resolve().parent, input_path))
    return Path(output_path) / relative_dir
