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
Custom Exceptions Module.

A centralized module for custom exceptions used throughout the Photo Metadata
ToolKit. Decode and read errors are raised by the low-level layers and caught
at the acquisition boundary, where they degrade to an empty tag bag.
"""

class PmtkError(Exception):
    """Base exception for all toolkit errors."""
    pass

class DecodeFailureError(PmtkError):
    """Raised when the tag decoder cannot parse the image container."""
    pass

class DecodeTimeoutError(DecodeFailureError):
    """Raised when the tag decoder exceeds its time budget."""
    pass

class FileReadError(PmtkError):
    """Raised when the input bytes of an image cannot be read."""
    pass

class ExportError(PmtkError):
    """Error writing an exported metadata file."""
    pass
