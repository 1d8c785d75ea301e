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
Command implementations for the `pmtk` CLI (`read`, `export`).
"""
