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
Photo Metadata ToolKit.

Extracts capture settings, device identity and geolocation from the tag data
embedded in image files and normalizes them into `ImageMetadata` records.
"""

__version__ = "0.1.0"
