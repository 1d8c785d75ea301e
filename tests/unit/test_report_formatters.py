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
Unit tests for the Markdown and HTML report formatters.
"""

import pytest

from pmtk.utils.data_models import GeoCoordinate, GpsSource, ImageMetadata
from pmtk.utils.report_formatters import (
    HtmlReportFormatter,
    MarkdownReportFormatter,
    build_sections,
    format_coordinate,
    format_report,
)


@pytest.fixture
def record():
    return ImageMetadata(
        file_name='IMG_0001.jpg',
        date_time='2024:05:01 10:20:30',
        make='Apple',
        model='Apple iPhone 13',
        exposure='1/250',
        f_number=1.8,
        iso=200,
        focal_length=4.2,
        resolution='64 x 48',
        gps=GeoCoordinate(-33.8689, 151.2084, GpsSource.STANDARD_EXIF),
    )


@pytest.mark.unit
class TestFormatCoordinate:
    """Test coordinate display text."""

    def test_decimal_style(self):
        assert format_coordinate(-33.8689, 'lat') == '33.868900° S'
        assert format_coordinate(151.2084, 'lon', precision=2) == '151.21° E'

    def test_dms_style(self):
        assert format_coordinate(34.058472, 'lat', 'dms') == '34° 3\' 30.5" N'
        assert format_coordinate(-118.241667, 'lon', 'dms') == '118° 14\' 30" W'

    def test_invalid_arguments(self):
        with pytest.raises(ValueError, match="axis"):
            format_coordinate(1.0, 'alt')
        with pytest.raises(ValueError, match="style"):
            format_coordinate(1.0, 'lat', 'utm')


@pytest.mark.unit
class TestBuildSections:
    """Test grouping of record fields into sections."""

    def test_sections_and_rows(self, record):
        sections = {section.id: section for section in build_sections(record)}

        assert list(sections) == ['file-information', 'camera-information', 'capture-settings', 'location']
        capture = dict(sections['capture-settings'].rows)
        assert capture == {'Exposure': '1/250 s', 'Aperture': 'f/1.8', 'ISO': '200', 'Focal Length': '4.2 mm'}
        assert dict(sections['location'].rows)['Source'] == 'standard_exif'

    def test_name_only_record(self):
        """Test that a name-only record has just the file section."""
        sections = build_sections(ImageMetadata(file_name='broken.jpg'))

        assert [section.id for section in sections] == ['file-information']


@pytest.mark.unit
class TestMarkdownReport:
    """Test MarkdownReportFormatter output."""

    def test_report_structure(self, record):
        """Test title, table of contents, tables and footer."""
        # Arrange
        formatter = MarkdownReportFormatter(record.file_name)
        formatter.add_metadata(record)

        # Act
        report = formatter.format()

        # Assert
        assert report.startswith('# Metadata Report: IMG_0001.jpg')
        assert '## Table of Contents' in report
        assert '- [Capture Settings](#capture-settings)' in report
        assert '| Make | Apple |' in report
        assert '| Latitude | 33.868900° S |' in report
        assert 'Report generated by Photo Metadata ToolKit' in report

    def test_pipes_are_escaped(self):
        formatter = MarkdownReportFormatter('a.jpg')
        formatter.add_section('camera', 'Camera', [('Lens', 'A|B')])

        assert '| Lens | A\\|B |' in formatter.format()

    def test_empty_section_is_skipped(self):
        formatter = MarkdownReportFormatter('a.jpg', include_footer=False)
        formatter.add_section('empty', 'Empty', [])

        assert formatter.sections == []
        assert formatter.format() == '# Metadata Report: a.jpg'

    def test_anchor(self):
        assert MarkdownReportFormatter.anchor('Camera Information') == 'camera-information'
        assert MarkdownReportFormatter.anchor('Date/Time') == 'datetime'


@pytest.mark.unit
class TestHtmlReport:
    """Test HtmlReportFormatter output."""

    def test_html_document(self, record):
        formatter = HtmlReportFormatter(record.file_name)
        formatter.add_metadata(record)

        report = formatter.format()

        assert report.startswith('<!DOCTYPE html>')
        assert '<title>Metadata Report: IMG_0001.jpg</title>' in report
        assert '<table>' in report
        assert '<h2' in report

    def test_title_is_escaped(self):
        report = HtmlReportFormatter('<b>.jpg').format()
        assert '<title>Metadata Report: &lt;b&gt;.jpg</title>' in report


@pytest.mark.unit
class TestFormatReport:
    """Test format_report() over several records."""

    def test_single_footer_for_many_records(self, record):
        other = ImageMetadata(file_name='IMG_0002.jpg', make='Canon')

        report = format_report([record, other], 'md')

        assert report.count('Report generated by') == 1
        assert report.index('IMG_0001.jpg') < report.index('IMG_0002.jpg')

    def test_html_for_many_records(self, record):
        other = ImageMetadata(file_name='IMG_0002.jpg')

        report = format_report([record, other], 'html')

        assert '<title>Metadata Report: 2 images</title>' in report
        assert report.count('<!DOCTYPE html>') == 1

    def test_unknown_format(self, record):
        with pytest.raises(ValueError, match="Unsupported report format"):
            format_report([record], 'pdf')
