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
Unit tests for the field resolver.

Covers value text extraction, the search table and first-match-wins
resolution across root, namespaces and deep vendor paths.
"""

import pytest

from pmtk.utils.data_models import ABSENT, ArrayValue, Described, Nested, Scalar
from pmtk.utils.field_resolver import (
    SEARCH_LOCATIONS,
    SearchLocation,
    extract_text,
    format_number,
    iter_locations,
    locate_raw,
    resolve,
    stringify,
    to_python,
)
from pmtk.utils.tag_bag import TagBag
from pmtk.utils.value_normalizers import DATE_TIME_KEYS, LENS_KEYS, MAKE_KEYS


@pytest.mark.unit
class TestValueText:
    """Test conversion of tag values to text."""

    @pytest.mark.parametrize("value, expected", [
        (2.0, '2'),
        (0.5, '0.5'),
        (7, '7'),
        (True, 'true'),
        (False, 'false'),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_stringify_array_joins_with_commas(self):
        array = ArrayValue((Scalar(1), Scalar(2.5), Scalar('x')))
        assert stringify(array) == '1,2.5,x'

    def test_stringify_nested_has_no_text(self):
        assert stringify(Nested({'a': Scalar(1)})) is None

    def test_extract_text_prefers_description(self):
        """Test that a description wins over the raw value."""
        assert extract_text(Described('f/1.8', Scalar(1.8))) == 'f/1.8'

    def test_extract_text_falls_back_to_raw(self):
        """Test that an empty description falls back to the stringified raw value."""
        assert extract_text(Described('', Scalar(5))) == '5'
        assert extract_text(Described(None, ABSENT)) is None

    def test_zero_is_a_hit(self):
        """Test that numeric zero counts as a value (e.g. WhiteBalance 0)."""
        assert extract_text(Scalar(0)) == '0'

    def test_empty_string_is_not_a_hit(self):
        assert extract_text(Scalar('')) is None

    def test_arrays_and_mappings_are_not_hits(self):
        assert extract_text(ArrayValue((Scalar(1),))) is None
        assert extract_text(Nested({})) is None

    def test_to_python(self):
        """Test conversion back to plain Python data."""
        value = Nested({'a': ArrayValue((Scalar(1), Described('x', ABSENT)))})
        assert to_python(value) == {'a': [1, 'x']}


@pytest.mark.unit
class TestLocateRaw:
    """Test typed value location used for coordinates."""

    def test_keeps_numeric_type(self):
        node = Nested({'Latitude': Scalar(10.5)})
        assert locate_raw(node, ('Latitude',)) == 10.5

    def test_skips_booleans_and_empty_strings(self):
        """Test that booleans and empty strings fall through to the next key."""
        node = Nested({'Latitude': Scalar(True), 'Lat': Scalar(''), 'lat': Scalar(3)})
        assert locate_raw(node, ('Latitude', 'Lat', 'lat')) == 3

    def test_returns_arrays_as_lists(self):
        node = Nested({'GPSLatitude': ArrayValue((Scalar(33), Scalar(52), Scalar(8.16)))})
        assert locate_raw(node, ('GPSLatitude',)) == [33, 52, 8.16]

    def test_description_wins(self):
        node = Nested({'GPSLatitude': Described('33.5', Scalar(1.0))})
        assert locate_raw(node, ('GPSLatitude',)) == '33.5'

    def test_non_container(self):
        assert locate_raw(Scalar(1), ('Latitude',)) is None


@pytest.mark.unit
class TestSearchTable:
    """Test the search location table loaded from resources."""

    def test_sorted_by_priority_with_root_first(self):
        priorities = [location.priority for location in SEARCH_LOCATIONS]

        assert priorities == sorted(priorities)
        assert SEARCH_LOCATIONS[0].kind == 'root'

    def test_contains_namespaces_and_vendor_paths(self):
        paths = {location.path for location in SEARCH_LOCATIONS}

        assert {'xmp', 'exif', 'gps', 'apple', 'samsung', 'file'} <= paths
        assert 'MakerNote.Apple' in paths
        assert 'iOS' in paths

    def test_iter_locations_skips_missing_and_scalars(self):
        """Test that only existing mapping containers are yielded."""
        bag = TagBag.from_mapping({'exif': {'Make': 'Canon'}, 'xmp': 'not a mapping'})

        yielded = [location.path for location, _ in iter_locations(bag)]

        assert yielded == ['', 'exif']


@pytest.mark.unit
class TestResolve:
    """Test first-match-wins field resolution."""

    def test_root_wins_over_namespace(self):
        bag = TagBag.from_mapping({'Make': 'Root', 'xmp': {'Make': 'Xmp'}})
        assert resolve(bag, MAKE_KEYS) == 'Root'

    def test_namespace_order(self):
        """Test that xmp is searched before exif."""
        bag = TagBag.from_mapping({'exif': {'Make': 'Exif'}, 'xmp': {'Make': 'Xmp'}})
        assert resolve(bag, MAKE_KEYS) == 'Xmp'

    def test_key_order_within_a_location(self):
        """Test that earlier synonyms win within the same container."""
        bag = TagBag.from_mapping({'DateTime': '2024:01:01 00:00:00', 'DateTimeOriginal': '2023:06:01 08:00:00'})
        assert resolve(bag, DATE_TIME_KEYS) == '2023:06:01 08:00:00'

    def test_first_location_hit_beats_better_key_deeper(self):
        """Test that a lower-priority synonym at the root beats the primary key deeper down."""
        bag = TagBag.from_mapping({'ModifyDate': 'root', 'exif': {'DateTimeOriginal': 'exif'}})
        assert resolve(bag, DATE_TIME_KEYS) == 'root'

    def test_empty_value_continues_search(self):
        """Test that an empty string is skipped and the search continues."""
        bag = TagBag.from_mapping({'Make': '', 'exif': {'Make': 'Canon'}})
        assert resolve(bag, MAKE_KEYS) == 'Canon'

    def test_deep_vendor_path(self):
        bag = TagBag.from_mapping({'MakerNote': {'Apple': {'LensModel': 'Back Camera'}}})
        assert resolve(bag, LENS_KEYS) == 'Back Camera'

    def test_missing_field(self):
        bag = TagBag.from_mapping({'exif': {'Model': 'X'}})
        assert resolve(bag, LENS_KEYS) is None

    def test_empty_bag(self):
        assert resolve(TagBag.empty(), MAKE_KEYS) is None

    def test_custom_locations(self):
        """Test resolving against an explicit search table."""
        bag = TagBag.from_mapping({'Make': 'Root', 'custom': {'Make': 'Custom'}})
        locations = (SearchLocation('namespace', 'custom', 0),)

        assert resolve(bag, MAKE_KEYS, locations) == 'Custom'
