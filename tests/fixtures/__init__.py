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
Test fixtures and mock data factories for PMTK tests.

This package contains:
- MockPhoto: Factory for creating in-memory JPEG/PNG/TIFF photos with EXIF,
  GPS and XMP metadata
"""

from tests.fixtures.mock_photo_factory import MockPhoto, build_xmp_packet

__all__ = ['MockPhoto', 'build_xmp_packet']
