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
Tag Bag Acquisition.

Runs the blocking tag decoder on a daemon thread, bounded by a timeout, and
classifies its output into a `TagBag`. Every failure (timeout, decoder error,
unusable output) degrades to an empty bag; nothing is raised to the caller.
"""
import asyncio
import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional

from pmtk.utils.config_loader import config
from pmtk.utils.data_models import DecodeOptions, Milestone
from pmtk.utils.log_helpers import emit_event
from pmtk.utils.tag_bag import TagBag

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes, DecodeOptions], Mapping[str, Any]]

DEFAULT_TIMEOUT_SECONDS = 10.0


def default_timeout() -> float:
    """The configured decode timeout in seconds."""
    try:
        timeout = float(config.get("extraction.timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError):
        logger.warning("Invalid extraction.timeout_seconds; using the default")
        return DEFAULT_TIMEOUT_SECONDS
    return timeout if timeout > 0 else DEFAULT_TIMEOUT_SECONDS


def default_decoder() -> Decoder:
    from pmtk.utils.tag_decoder import decode_tags
    return decode_tags


def run_decoder_thread(decoder: Decoder, data: bytes, options: DecodeOptions,
                       file_name: str = '') -> 'asyncio.Future[Mapping[str, Any]]':
    """
    Start the decoder on its own daemon thread.

    Each decode gets a dedicated thread outside the loop's default executor.
    An abandoned decoder holds no shared worker slot and is never joined at
    event loop or interpreter shutdown.

    Returns:
        A loop future resolved with the decoder output or its exception.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _deliver(result, error):
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def _worker():
        result, error = None, None
        try:
            result = decoder(data, options)
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(_deliver, result, error)
        except RuntimeError:
            # Loop already closed; nobody is waiting for this result
            logger.debug(f"Discarding late decoder result for {file_name or '<bytes>'}")

    threading.Thread(target=_worker, name=f"pmtk-decode-{file_name or 'bytes'}", daemon=True).start()
    return future


async def acquire_tag_bag(
    data: bytes,
    decoder: Optional[Decoder] = None,
    options: Optional[DecodeOptions] = None,
    timeout: Optional[float] = None,
    hook: Optional[Callable] = None,
    file_name: str = ''
) -> TagBag:
    """
    Decode raw image bytes into a TagBag.

    The decoder runs on a daemon thread raced against `timeout`. A decoder
    that never returns cannot be interrupted; its thread is abandoned and the
    call returns an empty bag once the timeout expires.

    Args:
        data: The raw file bytes.
        decoder: Callable `decode(data, options) -> Mapping`; defaults to
            `pmtk.utils.tag_decoder.decode_tags`.
        options: Decoder options (fixed defaults when None).
        timeout: Seconds to wait; defaults to `extraction.timeout_seconds`.
        hook: Diagnostic hook receiving ExtractionEvents.
        file_name: Name used in diagnostics.

    Returns:
        The classified tags, or an empty TagBag on any failure.
    """
    decoder = decoder or default_decoder()
    options = options or DecodeOptions()
    timeout = default_timeout() if timeout is None else timeout

    emit_event(hook, Milestone.DECODE_STARTED, file_name, size=len(data), timeout=timeout)
    start = time.perf_counter()
    try:
        raw = await asyncio.wait_for(run_decoder_thread(decoder, data, options, file_name), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug(f"Decoder timed out after {timeout}s for {file_name or '<bytes>'}")
        emit_event(hook, Milestone.DECODE_TIMEOUT, file_name, timeout=timeout)
        return TagBag.empty()
    except Exception as e:
        logger.debug(f"Decoder failed for {file_name or '<bytes>'}: {e}")
        emit_event(hook, Milestone.DECODE_FAILED, file_name, error=f"{type(e).__name__}: {e}")
        return TagBag.empty()

    tag_bag = TagBag.from_mapping(raw)
    duration = time.perf_counter() - start
    emit_event(hook, Milestone.DECODE_FINISHED, file_name,
               duration_seconds=round(duration, 4), top_level_keys=len(tag_bag))
    if tag_bag.is_empty:
        emit_event(hook, Milestone.TAG_BAG_EMPTY, file_name)
    return tag_bag
