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
End-to-End tests for the `pmtk export` command.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest
from openpyxl import load_workbook

from tests.fixtures.mock_photo_factory import MockPhoto

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_pmtk(*args):
    return subprocess.run(
        [sys.executable, '-m', 'pmtk', *args],
        capture_output=True, text=True, encoding='utf-8', cwd=PROJECT_ROOT
    )


@pytest.fixture
def photo_dir(tmp_path):
    """Two geotagged photos in nested folders and one without GPS."""
    photos = tmp_path / 'photos'
    MockPhoto(latitude=-33.8689, longitude=151.2084).save_to_file(photos / 'sydney.jpg')
    MockPhoto(latitude=40.7128, longitude=-74.006).save_to_file(photos / 'usa' / 'nyc.jpg')
    MockPhoto().save_to_file(photos / 'usa' / 'indoor.jpg')
    return photos


@pytest.mark.e2e
@pytest.mark.slow
class TestExportCommand:
    """Test the `pmtk export` command end-to-end."""

    def test_export_json_mirrors_directories(self, photo_dir, tmp_path):
        """Test one JSON file per image under the mirrored folder structure."""
        # Act
        out_dir = tmp_path / 'out'
        result = run_pmtk('export', '-i', str(photo_dir), '-o', str(out_dir))

        # Assert
        assert result.returncode == 0, f"Command failed: {result.stderr}"
        nyc = json.loads((out_dir / 'usa' / 'nyc.jpg-metadata.json').read_text(encoding='utf-8'))
        assert nyc['gps']['longitude'] == pytest.approx(-74.006, abs=1e-4)
        assert (out_dir / 'sydney.jpg-metadata.json').exists()
        indoor = json.loads((out_dir / 'usa' / 'indoor.jpg-metadata.json').read_text(encoding='utf-8'))
        assert 'gps' not in indoor

    def test_export_json_next_to_single_file(self, photo_dir):
        result = run_pmtk('export', '-i', str(photo_dir / 'sydney.jpg'))

        assert result.returncode == 0, f"Command failed: {result.stderr}"
        assert (photo_dir / 'sydney.jpg-metadata.json').exists()

    def test_export_geojson(self, photo_dir, tmp_path):
        """Test that only geotagged photos become features."""
        out_dir = tmp_path / 'out'

        result = run_pmtk('export', '-i', str(photo_dir), '-o', str(out_dir), '-f', 'geojson')

        assert result.returncode == 0, f"Command failed: {result.stderr}"
        collection = json.loads((out_dir / 'locations.geojson').read_text(encoding='utf-8'))
        names = sorted(feature['properties']['fileName'] for feature in collection['features'])
        assert names == ['nyc.jpg', 'sydney.jpg']

    def test_export_xlsx(self, photo_dir, tmp_path):
        out_dir = tmp_path / 'out'

        result = run_pmtk('export', '-i', str(photo_dir), '-o', str(out_dir), '-f', 'xlsx')

        assert result.returncode == 0, f"Command failed: {result.stderr}"
        ws = load_workbook(out_dir / 'metadata.xlsx').active
        assert ws.max_row == 4
        assert sorted(ws.cell(row=r, column=1).value for r in range(2, 5)) == ['indoor.jpg', 'nyc.jpg', 'sydney.jpg']

    def test_export_to_existing_file_fails(self, photo_dir):
        result = run_pmtk('export', '-i', str(photo_dir), '-o', str(photo_dir / 'sydney.jpg'))

        assert result.returncode == 2
        assert 'must be a directory' in result.stdout

    def test_export_unknown_format(self, photo_dir):
        result = run_pmtk('export', '-i', str(photo_dir), '-f', 'csv')

        assert result.returncode == 2
        assert 'invalid choice' in result.stderr
