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
Report Formatters for Photo Metadata.

This module provides classes for formatting per-image metadata reports in
different formats (Markdown, HTML) for the Read Metadata tool.

Classes:
    ReportFormatter: Abstract base class for all report formatters
    MarkdownReportFormatter: Formats Markdown reports with table of contents
    HtmlReportFormatter: Formats complete HTML reports (Markdown converted by mistune)
"""

import html
import logging
import re
from abc import ABC, abstractmethod
from importlib import metadata
from typing import List, Optional, Sequence, Tuple

import mistune

from pmtk.utils.data_models import ImageMetadata, ReportSection
from pmtk.utils.field_resolver import format_number
from pmtk.utils.gps_resolver import decimal_to_dms, format_dms

logger = logging.getLogger(__name__)

try:
    __version__ = metadata.version("photo-metadata-toolkit")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

COORDINATE_STYLES = ('decimal', 'dms')


# ============================================================================
# Value formatting
# ============================================================================

def format_coordinate(value: float, axis: str, style: str = 'decimal', precision: int = 6) -> str:
    """
    Format a signed decimal coordinate with its hemisphere letter.

    Args:
        value: Signed decimal degrees.
        axis: 'lat' or 'lon'.
        style: 'decimal' ('12.345678° N') or 'dms' ('12° 20\\' 44.44" N').
        precision: Decimal places for the decimal style.

    Returns:
        The formatted coordinate.
    """
    if axis not in ('lat', 'lon'):
        raise ValueError(f"Unknown axis '{axis}', expected 'lat' or 'lon'")
    if style not in COORDINATE_STYLES:
        raise ValueError(f"Unknown coordinate style '{style}', expected one of {COORDINATE_STYLES}")
    if axis == 'lat':
        hemisphere = 'S' if value < 0 else 'N'
    else:
        hemisphere = 'W' if value < 0 else 'E'
    if style == 'dms':
        degrees, minutes, seconds = decimal_to_dms(value)
        return f"{format_dms(degrees, minutes, round(seconds, 2))} {hemisphere}"
    return f"{abs(value):.{precision}f}° {hemisphere}"


def _escape_cell(value: str) -> str:
    return value.replace('|', '\\|').replace('\n', ' ')


def build_sections(record: ImageMetadata) -> List[ReportSection]:
    """
    Group the fields of a record into report sections.

    Fields that are absent are left out; sections without rows are dropped.
    """
    def rows(*pairs: Tuple[str, Optional[object]]) -> List[Tuple[str, str]]:
        return [(label, format_number(v) if isinstance(v, (int, float)) else str(v))
                for label, v in pairs if v is not None]

    sections = [
        ReportSection('file-information', 'File Information', rows(
            ('File Name', record.file_name),
            ('Date/Time', record.date_time),
            ('Resolution', record.resolution),
            ('Orientation', record.orientation),
            ('Software', record.software),
        )),
        ReportSection('camera-information', 'Camera Information', rows(
            ('Make', record.make),
            ('Model', record.model),
            ('Lens', record.lens),
        )),
        ReportSection('capture-settings', 'Capture Settings', rows(
            ('Exposure', f"{record.exposure} s" if record.exposure else None),
            ('Aperture', f"f/{format_number(record.f_number)}" if record.f_number is not None else None),
            ('ISO', record.iso),
            ('Focal Length', f"{format_number(record.focal_length)} mm" if record.focal_length is not None else None),
            ('White Balance', record.white_balance),
            ('Flash', record.flash),
        )),
    ]
    if record.gps is not None:
        sections.append(ReportSection('location', 'Location', [
            ('Latitude', format_coordinate(record.gps.latitude, 'lat')),
            ('Longitude', format_coordinate(record.gps.longitude, 'lon')),
            ('DMS', f"{format_coordinate(record.gps.latitude, 'lat', 'dms')}, "
                    f"{format_coordinate(record.gps.longitude, 'lon', 'dms')}"),
            ('Source', record.gps.source.value),
        ]))
    return [section for section in sections if section.has_data()]


# ============================================================================
# Report Generator Classes
# ============================================================================

class ReportFormatter(ABC):
    """
    Base class for generating photo metadata reports.

    Attributes:
        filename: Name of the file being reported on.
        sections: List of ReportSection objects to include in the report.
        report_title: Logical report name shown in headers.
    """

    def __init__(self, filename: str = "Unknown"):
        self.filename = filename
        self.sections: List[ReportSection] = []
        self.report_title: str = "Metadata Report"

    def add_section(self, section_id: str, title: str, rows: Sequence[Tuple[str, str]]) -> None:
        """
        Add a section to the report.

        Only adds the section if it has rows.
        """
        if rows:
            self.sections.append(ReportSection(id=section_id, title=title, rows=list(rows)))
            logger.debug(f"Added section '{section_id}' with title '{title}'")
        else:
            logger.debug(f"Skipped section '{section_id}' - no data available")

    def add_metadata(self, record: ImageMetadata) -> None:
        """Add the standard sections for one metadata record."""
        for section in build_sections(record):
            self.add_section(section.id, section.title, section.rows)

    def format(self) -> str:
        """
        Generate the complete report as a string.

        Returns:
            Complete report as formatted string
        """
        parts = [self._render_header()]
        for section in self.sections:
            if section.has_data():
                parts.append(self._render_section(section))
        parts.append(self._render_footer())
        return "\n\n".join(filter(None, parts))

    @abstractmethod
    def _render_header(self) -> str:
        pass

    @abstractmethod
    def _render_section(self, section: ReportSection) -> str:
        pass

    @abstractmethod
    def _render_footer(self) -> str:
        pass


class MarkdownReportFormatter(ReportFormatter):
    """
    Generate Markdown reports with table of contents.

    Example:
        >>> formatter = MarkdownReportFormatter('IMG_0001.jpg')
        >>> formatter.add_metadata(record)
        >>> markdown = formatter.format()
    """

    def __init__(self, filename: str = "Unknown", include_footer: bool = True):
        super().__init__(filename)
        self.include_footer = include_footer

    @staticmethod
    def anchor(title: str) -> str:
        anchor = title.lower().replace(' ', '-')
        return re.sub(r'[^a-z0-9\-_]', '', anchor).strip('-')

    def _render_header(self) -> str:
        lines = [f"# {self.report_title}: {self.filename}"]
        if len(self.sections) > 1:
            lines.append("")
            lines.append("## Table of Contents")
            lines.append("")
            for section in self.sections:
                lines.append(f"- [{section.title}](#{self.anchor(section.title)})")
        return "\n".join(lines)

    def _render_section(self, section: ReportSection) -> str:
        lines = [f"## {section.title}", "", "| Field | Value |", "|---|---|"]
        for label, value in section.rows:
            lines.append(f"| {_escape_cell(label)} | {_escape_cell(value)} |")
        return "\n".join(lines)

    def _render_footer(self) -> str:
        if not self.include_footer:
            return ""
        return f"---\n\n*Report generated by Photo Metadata ToolKit v{__version__}*"


class HtmlReportFormatter(MarkdownReportFormatter):
    """
    Generate complete HTML reports.

    Renders the Markdown report, converts it to HTML with mistune and wraps
    it in a minimal styled document.
    """

    CSS = """
    body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; margin: 2rem auto; max-width: 960px; color: #212121; }
    h1 { font-size: 1.6rem; border-bottom: 2px solid #1976d2; padding-bottom: .3rem; }
    h2 { font-size: 1.2rem; color: #1976d2; margin-top: 1.6rem; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #e0e0e0; padding: .35rem .6rem; text-align: left; }
    th { background: #ddebf7; }
    .report { margin-top: 2rem; font-size: .85rem; color: #757575; }
    """

    def __init__(self, filename: str = "Unknown"):
        super().__init__(filename, include_footer=False)

    def _markdown_to_html(self, markdown: str) -> str:
        """Convert Markdown to HTML using mistune with the table plugin."""
        md_parser = mistune.create_markdown(plugins=['table'])
        return str(md_parser(markdown))

    def format(self) -> str:
        """
        Generate the complete HTML report.

        Returns:
            Complete HTML document as string
        """
        return self.wrap_markdown(super().format())

    def wrap_markdown(self, markdown: str) -> str:
        """Convert Markdown to a complete HTML document."""
        return self._wrap_in_html_template(self._markdown_to_html(markdown))

    def _wrap_in_html_template(self, body_html: str) -> str:
        title = html.escape(f"{self.report_title}: {self.filename}")
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{self.CSS}</style>
</head>
<body>
    {body_html}
    <div class="report">Report generated by Photo Metadata ToolKit v{__version__}</div>
</body>
</html>"""


def format_report(records: Sequence[ImageMetadata], report_format: str = 'md') -> str:
    """
    Format one report per record and join them.

    Args:
        records: Metadata records.
        report_format: 'md' or 'html'.

    Returns:
        The combined report text.
    """
    if report_format not in ('md', 'html'):
        raise ValueError(f"Unsupported report format '{report_format}'")
    last = len(records) - 1
    markdown = "\n\n".join(
        _format_one(MarkdownReportFormatter(r.file_name, include_footer=(i == last and report_format == 'md')), r)
        for i, r in enumerate(records)
    )
    if report_format == 'html':
        title = records[0].file_name if len(records) == 1 else f"{len(records)} images"
        return HtmlReportFormatter(title).wrap_markdown(markdown)
    return markdown


def _format_one(formatter: ReportFormatter, record: ImageMetadata) -> str:
    formatter.add_metadata(record)
    return formatter.format()
