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
Metadata Extractor for Photos.

This module provides a MetadataExtractor class to build the normalized
`ImageMetadata` record from a `TagBag`, and the async entry points that read,
decode and normalize single files or batches of files.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from pmtk.utils import value_normalizers as normalizers
from pmtk.utils.acquisition import Decoder, acquire_tag_bag
from pmtk.utils.config_loader import config
from pmtk.utils.data_models import (
    ExtractionIssue, GeoCoordinate, ImageMetadata, Milestone, UploadedImage, generate_image_id
)
from pmtk.utils.exceptions import FileReadError
from pmtk.utils.gps_resolver import resolve_gps
from pmtk.utils.log_helpers import LoggingDiagnosticHook, emit_event
from pmtk.utils.tag_bag import TagBag

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, str, Path]
BatchItem = Union[str, Path, Tuple[str, bytes], Tuple[str, str, bytes]]

DEFAULT_MAX_CONCURRENCY = 8


class MetadataExtractor:
    """Builds the normalized metadata record of one image from its tags."""

    def __init__(self, tag_bag: TagBag, file_name: str, hook: Optional[Callable] = None):
        """
        Initializes the MetadataExtractor.

        Args:
            tag_bag: The classified tags of the image.
            file_name: Name of the source file.
            hook: Optional diagnostic hook.
        """
        self.tag_bag = tag_bag
        self.file_name = file_name
        self.hook = hook

    def _safe(self, field_name: str, func: Callable[[TagBag], Any]) -> Any:
        """Run one field extractor; a parse failure leaves only that field absent."""
        try:
            return func(self.tag_bag)
        except (ValueError, TypeError, ArithmeticError) as e:
            logger.debug(f"Could not parse {field_name} for {self.file_name}: {e}")
            return None

    def extract_date_time(self) -> Optional[str]:
        return self._safe('date_time', normalizers.extract_date_time)

    def extract_make_and_model(self) -> Tuple[Optional[str], Optional[str]]:
        result = self._safe('model', normalizers.extract_make_and_model)
        return result if result is not None else (None, None)

    def extract_exposure(self) -> Optional[str]:
        return self._safe('exposure', normalizers.extract_exposure_time)

    def extract_f_number(self) -> Optional[float]:
        return self._safe('f_number', normalizers.extract_f_number)

    def extract_iso(self) -> Optional[int]:
        return self._safe('iso', normalizers.extract_iso)

    def extract_focal_length(self) -> Optional[float]:
        return self._safe('focal_length', normalizers.extract_focal_length)

    def extract_software(self) -> Optional[str]:
        return self._safe('software', normalizers.extract_software)

    def extract_orientation(self) -> Optional[int]:
        return self._safe('orientation', normalizers.extract_orientation)

    def extract_resolution(self) -> Optional[str]:
        return self._safe('resolution', normalizers.extract_resolution)

    def extract_white_balance(self) -> Optional[str]:
        return self._safe('white_balance', normalizers.extract_white_balance)

    def extract_flash(self) -> Optional[str]:
        return self._safe('flash', normalizers.extract_flash)

    def extract_lens(self) -> Optional[str]:
        return self._safe('lens', normalizers.extract_lens)

    def extract_gps(self) -> Optional[GeoCoordinate]:
        """
        Resolves the image location.

        Returns:
            The GeoCoordinate, or None when no strategy yields a valid pair.
        """
        gps = self._safe('gps', resolve_gps)
        if gps is not None:
            emit_event(self.hook, Milestone.GPS_RESOLVED, self.file_name,
                       source=gps.source.value, latitude=gps.latitude, longitude=gps.longitude)
        else:
            emit_event(self.hook, Milestone.GPS_ABSENT, self.file_name,
                       issue=ExtractionIssue.INVALID_COORDINATE.value)
        return gps

    def build(self) -> ImageMetadata:
        """
        Builds the ImageMetadata record.

        Returns:
            The record; only `file_name` is set when the tag bag is empty.
        """
        if self.tag_bag.is_empty:
            return ImageMetadata(file_name=self.file_name)

        make, model = self.extract_make_and_model()
        metadata = ImageMetadata(
            file_name=self.file_name,
            date_time=self.extract_date_time(),
            make=make,
            model=model,
            exposure=self.extract_exposure(),
            f_number=self.extract_f_number(),
            iso=self.extract_iso(),
            focal_length=self.extract_focal_length(),
            software=self.extract_software(),
            orientation=self.extract_orientation(),
            resolution=self.extract_resolution(),
            white_balance=self.extract_white_balance(),
            flash=self.extract_flash(),
            lens=self.extract_lens(),
            gps=self.extract_gps(),
        )
        resolved = [key for key in metadata.to_dict() if key not in ('fileName', 'gps')]
        emit_event(self.hook, Milestone.FIELDS_RESOLVED, self.file_name, fields=resolved)
        return metadata


def build_metadata(tag_bag: TagBag, file_name: str, hook: Optional[Callable] = None) -> ImageMetadata:
    """Builds the ImageMetadata record of one image from its TagBag."""
    return MetadataExtractor(tag_bag, file_name, hook).build()


def _read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Cannot read {path}: {e}") from e


async def extract_image_metadata(
    source: ImageSource,
    file_name: Optional[str] = None,
    decoder: Optional[Decoder] = None,
    timeout: Optional[float] = None,
    hook: Optional[Callable] = None
) -> ImageMetadata:
    """
    Extracts the normalized metadata of one image.

    Never raises for unreadable or undecodable input: the result then holds
    only the file name.

    Args:
        source: Raw image bytes or a path to the image file.
        file_name: Name reported in the record; defaults to the path's name.
        decoder: Tag decoder override (see `acquire_tag_bag`).
        timeout: Decode timeout in seconds (config default when None).
        hook: Diagnostic hook; defaults to a LoggingDiagnosticHook.

    Returns:
        The ImageMetadata record.
    """
    hook = hook if hook is not None else LoggingDiagnosticHook()
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
        file_name = file_name or 'image'
    else:
        path = Path(source)
        file_name = file_name or path.name
        try:
            data = await asyncio.to_thread(_read_file, path)
        except FileReadError as e:
            logger.debug(str(e))
            emit_event(hook, Milestone.FILE_READ_FAILED, file_name,
                       issue=ExtractionIssue.FILE_READ_FAILURE.value, error=str(e))
            return ImageMetadata(file_name=file_name)

    tag_bag = await acquire_tag_bag(data, decoder=decoder, timeout=timeout, hook=hook, file_name=file_name)
    return build_metadata(tag_bag, file_name, hook)


def _split_item(item: BatchItem) -> Tuple[Optional[str], ImageSource, str]:
    if isinstance(item, tuple):
        if len(item) == 3:
            image_id, name, data = item
            return image_id, data, name
        name, data = item
        return None, data, name
    path = Path(item)
    return None, path, path.name


def _max_concurrency(value: Optional[int]) -> int:
    if value is None:
        value = config.get("batch.max_concurrency", DEFAULT_MAX_CONCURRENCY)
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid batch.max_concurrency; using the default")
        return DEFAULT_MAX_CONCURRENCY
    return max(1, value)


async def extract_batch(
    items: Iterable[BatchItem],
    decoder: Optional[Decoder] = None,
    timeout: Optional[float] = None,
    hook: Optional[Callable] = None,
    max_concurrency: Optional[int] = None
) -> Dict[str, UploadedImage]:
    """
    Extracts metadata from many images concurrently.

    Each item is processed independently; a failing item yields a record with
    only its file name and never affects the others.

    Args:
        items: Paths, (file_name, bytes) pairs, or (image_id, file_name, bytes)
            triples carrying a caller-assigned id.
        decoder: Tag decoder override.
        timeout: Per-file decode timeout in seconds.
        hook: Diagnostic hook shared by all items.
        max_concurrency: Upper bound on simultaneous decodes
            (config `batch.max_concurrency` when None).

    Returns:
        Mapping of image id (caller-assigned or generated) to UploadedImage,
        in item order.

    Raises:
        ValueError: If two items carry the same caller-assigned id.
    """
    semaphore = asyncio.Semaphore(_max_concurrency(max_concurrency))
    hook = hook if hook is not None else LoggingDiagnosticHook()

    async def _process(image_id: str, source: ImageSource, name: str) -> UploadedImage:
        async with semaphore:
            metadata = await extract_image_metadata(source, name, decoder=decoder, timeout=timeout, hook=hook)
        return UploadedImage(id=image_id, file_name=name, metadata=metadata)

    entries = [_split_item(item) for item in items]
    ids: List[str] = []
    for image_id, _, _ in entries:
        if image_id is not None:
            if image_id in ids:
                raise ValueError(f"Duplicate image id '{image_id}' in batch")
            ids.append(image_id)

    tasks = []
    for image_id, source, name in entries:
        if image_id is None:
            image_id = generate_image_id()
            while image_id in ids:
                image_id = generate_image_id()
            ids.append(image_id)
        tasks.append(_process(image_id, source, name))

    results = await asyncio.gather(*tasks)
    logger.debug(f"Extracted metadata for {len(results)} image(s)")
    return {image.id: image for image in results}
