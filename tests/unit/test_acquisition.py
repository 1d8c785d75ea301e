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
Unit tests for tag bag acquisition.

Decoders are stubbed so that success, failure, timeout and unusable output
can each be exercised without real image data.
"""

import asyncio
import threading
import time

import pytest

from pmtk.utils.acquisition import DEFAULT_TIMEOUT_SECONDS, acquire_tag_bag, default_timeout
from pmtk.utils.config_loader import config
from pmtk.utils.data_models import DecodeOptions, ImageMetadata, Milestone, Scalar
from pmtk.utils.exceptions import DecodeFailureError
from pmtk.utils.metadata_extractor import extract_image_metadata


@pytest.mark.unit
class TestAcquireTagBag:
    """Test acquire_tag_bag() with stub decoders."""

    def test_successful_decode(self, event_recorder):
        """Test that decoder output is classified into a TagBag."""
        # Arrange
        def decoder(data, options):
            return {'Make': 'Apple', 'size': len(data)}

        # Act
        bag = asyncio.run(acquire_tag_bag(b'abcd', decoder=decoder, timeout=5, hook=event_recorder,
                                          file_name='a.jpg'))

        # Assert
        assert bag.get('Make') == Scalar('Apple')
        assert bag.get('size') == Scalar(4)
        assert event_recorder.milestones == [Milestone.DECODE_STARTED, Milestone.DECODE_FINISHED]
        assert event_recorder[0].file_name == 'a.jpg'
        assert event_recorder[1].detail['top_level_keys'] == 2

    def test_options_are_passed_to_decoder(self):
        received = []

        def decoder(data, options):
            received.append(options)
            return {'Make': 'Apple'}

        options = DecodeOptions(expanded=False)
        asyncio.run(acquire_tag_bag(b'x', decoder=decoder, options=options, timeout=5))

        assert received == [options]

    def test_decoder_error_returns_empty_bag(self, event_recorder):
        """Test that a raising decoder degrades to an empty bag."""
        def decoder(data, options):
            raise DecodeFailureError("corrupt")

        bag = asyncio.run(acquire_tag_bag(b'x', decoder=decoder, timeout=5, hook=event_recorder))

        assert bag.is_empty
        assert event_recorder.milestones == [Milestone.DECODE_STARTED, Milestone.DECODE_FAILED]
        assert 'DecodeFailureError' in event_recorder[1].detail['error']

    def test_timeout_returns_empty_bag(self, event_recorder):
        """Test that a decoder exceeding the timeout is abandoned."""
        # Arrange
        release = threading.Event()

        def blocking_decoder(data, options):
            release.wait(30)
            return {'Make': 'late'}

        # Act
        try:
            bag = asyncio.run(acquire_tag_bag(b'x', decoder=blocking_decoder, timeout=0.05,
                                              hook=event_recorder))
        finally:
            release.set()

        # Assert
        assert bag.is_empty
        assert event_recorder.milestones == [Milestone.DECODE_STARTED, Milestone.DECODE_TIMEOUT]
        assert event_recorder[1].detail['timeout'] == 0.05

    def test_hung_decoder_does_not_block_loop_shutdown(self):
        """Test that a whole extraction run ends soon after the timeout while its decoder still hangs."""
        # Arrange
        release = threading.Event()

        def hung_decoder(data, options):
            release.wait(30)
            return {'Make': 'late'}

        # Act
        start = time.perf_counter()
        try:
            metadata = asyncio.run(extract_image_metadata(b'x', 'a.jpg', decoder=hung_decoder, timeout=0.2))
            elapsed = time.perf_counter() - start
        finally:
            release.set()

        # Assert
        assert metadata == ImageMetadata(file_name='a.jpg')
        assert elapsed < 5

    def test_late_result_after_timeout_is_discarded(self):
        """Test that a decoder finishing after its caller gave up raises nothing."""
        finished = threading.Event()

        def slow_decoder(data, options):
            time.sleep(0.3)
            finished.set()
            return {'Make': 'late'}

        bag = asyncio.run(acquire_tag_bag(b'x', decoder=slow_decoder, timeout=0.05))

        assert bag.is_empty
        assert finished.wait(5)

    def test_non_mapping_output_is_empty(self, event_recorder):
        """Test that a decoder returning a list yields an empty bag."""
        bag = asyncio.run(acquire_tag_bag(b'x', decoder=lambda d, o: ['a', 'b'], timeout=5,
                                          hook=event_recorder))

        assert bag.is_empty
        assert event_recorder.milestones[-1] is Milestone.TAG_BAG_EMPTY

    def test_default_decoder_on_garbage(self, event_recorder):
        """Test that bytes no reader recognizes produce an empty bag."""
        bag = asyncio.run(acquire_tag_bag(b'definitely not an image', timeout=5, hook=event_recorder))

        assert bag.is_empty
        assert Milestone.DECODE_FAILED in event_recorder.milestones

    def test_failing_hook_does_not_change_result(self):
        """Test that a hook raising an exception is ignored."""
        def broken_hook(event):
            raise RuntimeError("hook down")

        bag = asyncio.run(acquire_tag_bag(b'x', decoder=lambda d, o: {'Make': 'Apple'}, timeout=5,
                                          hook=broken_hook))

        assert bag.get('Make') == Scalar('Apple')


@pytest.mark.unit
class TestDefaultTimeout:
    """Test the configured decode timeout."""

    def test_reads_configuration(self):
        try:
            config.set('extraction.timeout_seconds', 2.5)
            assert default_timeout() == 2.5
        finally:
            config.reload()

    @pytest.mark.parametrize("value", [-1, 0, 'soon'])
    def test_invalid_values_use_default(self, value):
        try:
            config.set('extraction.timeout_seconds', value)
            assert default_timeout() == DEFAULT_TIMEOUT_SECONDS
        finally:
            config.reload()
