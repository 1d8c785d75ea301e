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
Pytest configuration and shared fixtures for PMTK test suite.

This module provides:
- Sample decoder outputs shaped like the tags of common devices
- Real encoded photos built with the MockPhoto factory
- An event recorder standing in for a diagnostic hook

Fixtures are organized by scope:
- session: Created once per test session (expensive setup)
- function: Created for each test function (default)

Example:
    >>> def test_using_fixture(iphone_tags):
    ...     '''Test using the iphone_tags fixture.'''
    ...     assert TagBag.from_mapping(iphone_tags).get('Make')
"""

import pytest

from tests.fixtures.mock_photo_factory import MockPhoto, build_xmp_packet


# =============================================================================
# Session-scope Fixtures (Created once per test session)
# =============================================================================

@pytest.fixture(scope="session")
def temp_dir(tmp_path_factory):
    """
    Create a temporary directory for the entire test session.

    Returns:
        Path: Path to temporary directory
    """
    return tmp_path_factory.mktemp("pmtk_tests")


@pytest.fixture(scope="session")
def sydney_jpeg_bytes():
    """
    A JPEG taken in Sydney (southern/eastern hemisphere) with full camera tags.

    Returns:
        bytes: The encoded JPEG
    """
    return MockPhoto(latitude=-33.8689, longitude=151.2084).to_bytes()


@pytest.fixture(scope="session")
def xmp_packet():
    """An XMP packet with GPS at 34,3.508N / 118,14.5W."""
    return build_xmp_packet()


# =============================================================================
# Function-scope Fixtures (Created for each test)
# =============================================================================

@pytest.fixture
def iphone_tags():
    """
    Decoder output for an iPhone photo with an Apple location block.

    Returns:
        dict: Nested tag mapping
    """
    return {
        'Make': {'value': 'Apple', 'description': 'Apple'},
        'Model': {'value': 'iPhone 13', 'description': 'iPhone 13'},
        'DateTimeOriginal': {'value': '2024:05:01 10:20:30', 'description': '2024:05:01 10:20:30'},
        'ExposureTime': {'value': 0.004, 'description': '1/250'},
        'FNumber': {'value': 1.6, 'description': 'f/1.6'},
        'ISOSpeedRatings': {'value': 50, 'description': '50'},
        'FocalLength': {'value': 5.1, 'description': '5.1 mm'},
        'Software': {'value': '17.1', 'description': '17.1'},
        'Orientation': {'value': 6, 'description': '6 (Right-top)'},
        'ExifImageWidth': {'value': 4032, 'description': '4032'},
        'ExifImageHeight': {'value': 3024, 'description': '3024'},
        'WhiteBalance': {'value': 0, 'description': 'Auto'},
        'Flash': {'value': 16, 'description': 'Flash did not fire, compulsory flash mode'},
        'LensModel': {'value': 'iPhone 13 back dual wide camera 5.1mm f/1.6',
                      'description': 'iPhone 13 back dual wide camera 5.1mm f/1.6'},
        'GPSLatitude': {'value': [37.0, 46.0, 29.64], 'description': '37° 46\' 29.64"'},
        'GPSLatitudeRef': {'value': 'N', 'description': 'North latitude'},
        'GPSLongitude': {'value': [122.0, 25.0, 9.84], 'description': '122° 25\' 9.84"'},
        'GPSLongitudeRef': {'value': 'W', 'description': 'West longitude'},
        'apple': {'Location': {'Latitude': 37.7749, 'Longitude': -122.4194}},
    }


@pytest.fixture
def samsung_tags():
    """Decoder output for a Samsung photo with string location components."""
    return {
        'Make': 'samsung',
        'Model': 'SM-G991B',
        'ExposureTime': '0.01',
        'FNumber': '1.8',
        'ISO': 'ISO 125',
        'samsung': {'Location': {'Latitude': '51.5072', 'Longitude': '-0.1276'}},
    }


@pytest.fixture
def standard_exif_tags():
    """Flat EXIF output with southern/western hemisphere references."""
    return {
        'Make': {'value': 'Canon', 'description': 'Canon'},
        'Model': {'value': 'Canon EOS R5', 'description': 'Canon EOS R5'},
        'GPSLatitude': {'value': [22.0, 54.0, 23.4], 'description': '22° 54\' 23.4"'},
        'GPSLatitudeRef': {'value': 'S', 'description': 'South latitude'},
        'GPSLongitude': {'value': [43.0, 10.0, 22.8], 'description': '43° 10\' 22.8"'},
        'GPSLongitudeRef': {'value': 'W', 'description': 'West longitude'},
    }


@pytest.fixture
def xmp_tags():
    """Expanded output holding only an XMP namespace with a Location block."""
    return {
        'xmp': {
            'CreateDate': {'value': '2023-07-14T12:00:00', 'description': '2023-07-14T12:00:00'},
            'Make': {'value': 'FUJIFILM', 'description': 'FUJIFILM'},
            'Location': {'Latitude': 48.8584, 'Longitude': 2.2945},
        }
    }


@pytest.fixture
def event_recorder():
    """
    A diagnostic hook that records every event it receives.

    Returns:
        list: Received events; `.milestones` lists their milestones in order
    """
    class Recorder(list):
        def __call__(self, event):
            self.append(event)

        @property
        def milestones(self):
            return [event.milestone for event in self]

    return Recorder()
