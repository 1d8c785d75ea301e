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
Dataclass-based Argument Models for PMTK Tools.

This module defines strongly-typed dataclasses for parsing and validating the
command-line arguments for each tool (`read`, `export`). It uses
`__post_init__` for validation and resolving defaults, ensuring that the core
logic receives clean and validated inputs.

Classes:
    BaseArguments: A base dataclass for common script arguments.
    ReadArguments: Arguments for the read_metadata tool.
    ExportArguments: Arguments for the export_metadata tool.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

READ_FORMATS = ('md', 'html', 'json')
EXPORT_FORMATS = ('json', 'geojson', 'xlsx')


@dataclass
class BaseArguments:
    """A base dataclass for common script arguments."""
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    config: Optional[Path] = None
    timeout: Optional[float] = None
    verbose: bool = False

    def __post_init__(self):
        """Coerce path-like arguments to Path objects."""
        if self.input_path and isinstance(self.input_path, str):
            self.input_path = Path(self.input_path)
        if self.output_path and isinstance(self.output_path, str):
            self.output_path = Path(self.output_path)
        if self.config and isinstance(self.config, str):
            self.config = Path(self.config)

    def handle_error(self, message: str):
        """Logs an error and raises ValueError."""
        logger.error(message)
        raise ValueError(message)

    def _validate_common(self):
        if self.input_path is None:
            raise ValueError("An input file or directory is required.")
        if not self.input_path.exists():
            raise ValueError(f"Input path not found: {self.input_path}")
        if self.config is not None and not self.config.is_file():
            raise ValueError(f"Config file not found: {self.config}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")


@dataclass
class ReadArguments(BaseArguments):
    """Arguments for the read_metadata tool."""
    report_format: str = 'md'

    def __post_init__(self):
        """Validation for read_metadata arguments."""
        super().__post_init__()
        try:
            self._validate_common()
            if self.report_format not in READ_FORMATS:
                raise ValueError(f"Unsupported report format '{self.report_format}'. Choose from {', '.join(READ_FORMATS)}.")
            if self.output_path is not None and self.output_path.is_dir():
                raise ValueError(f"Report output must be a file, not a directory: {self.output_path}")
        except ValueError as e:
            self.handle_error(str(e))


@dataclass
class ExportArguments(BaseArguments):
    """Arguments for the export_metadata tool."""
    export_format: str = 'json'

    def __post_init__(self):
        """Validation and default resolution for export arguments."""
        super().__post_init__()
        try:
            self._validate_common()
            if self.export_format not in EXPORT_FORMATS:
                raise ValueError(f"Unsupported export format '{self.export_format}'. Choose from {', '.join(EXPORT_FORMATS)}.")
            self._resolve_defaults()
        except ValueError as e:
            self.handle_error(str(e))

    def _resolve_defaults(self):
        """Default the output directory to the input directory."""
        if self.output_path is None:
            self.output_path = self.input_path if self.input_path.is_dir() else self.input_path.parent
        elif self.output_path.is_file():
            raise ValueError(f"Export output must be a directory, not a file: {self.output_path}")
