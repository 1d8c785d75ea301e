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
Unit tests for path helpers.
"""

from pathlib import Path

import pytest

from pmtk.utils.path_helpers import get_image_files, is_supported_image, prepare_output_dir


@pytest.fixture
def photo_tree(tmp_path):
    """A directory with images in nested folders and one non-image file."""
    (tmp_path / 'trip' / 'day1').mkdir(parents=True)
    for name in ('trip/b.JPG', 'trip/a.png', 'trip/day1/c.heic', 'trip/notes.txt'):
        (tmp_path / name).write_bytes(b'x')
    return tmp_path / 'trip'


@pytest.mark.unit
class TestPathHelpers:
    """Test image discovery and output directories."""

    @pytest.mark.parametrize("name, expected", [
        ('IMG_0001.JPG', True),
        ('photo.jpeg', True),
        ('scan.tiff', True),
        ('image.HEIC', True),
        ('notes.txt', False),
        ('archive.jpg.zip', False),
    ])
    def test_is_supported_image(self, name, expected):
        assert is_supported_image(name) is expected

    def test_directory_is_searched_recursively(self, photo_tree):
        files = get_image_files(photo_tree)

        assert [f.name for f in files] == ['a.png', 'b.JPG', 'c.heic']
        assert all(f.is_absolute() for f in files)

    def test_single_file(self, photo_tree):
        assert get_image_files(photo_tree / 'a.png') == [(photo_tree / 'a.png').resolve()]

    def test_unsupported_or_missing(self, photo_tree):
        assert get_image_files(photo_tree / 'notes.txt') == []
        assert get_image_files(photo_tree / 'missing') == []

    def test_prepare_output_dir_mirrors_structure(self, photo_tree, tmp_path):
        out_dir = prepare_output_dir(photo_tree, tmp_path / 'out', photo_tree / 'day1' / 'c.heic')
        assert out_dir == tmp_path / 'out' / 'day1'

    def test_prepare_output_dir_for_single_file(self, photo_tree, tmp_path):
        out_dir = prepare_output_dir(photo_tree / 'a.png', tmp_path / 'out', photo_tree / 'a.png')
        assert out_dir == Path(tmp_path / 'out')
