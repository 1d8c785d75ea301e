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
Photo Metadata ToolKit Test Suite.

This package contains tests for PMTK components including:
- Unit tests for individual functions and classes
- Integration tests running real images through the default decoder
- End-to-end tests for CLI commands
"""
