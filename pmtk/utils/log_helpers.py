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
This module provides logging helpers for the Photo Metadata ToolKit, including
the diagnostic hooks notified at extraction milestones.
"""

import logging
import os
import sys
from typing import Any, Optional, TextIO

from pmtk.utils.data_models import ExtractionEvent, Milestone

# Milestones that indicate a degraded extraction
WARNING_MILESTONES = frozenset({
    Milestone.DECODE_TIMEOUT,
    Milestone.DECODE_FAILED,
    Milestone.FILE_READ_FAILED,
})


class DiagnosticHook:
    """
    Receives an `ExtractionEvent` at each extraction milestone.

    Subclass and override `__call__`, or pass any callable taking one event.
    """
    def __call__(self, event: ExtractionEvent) -> None:
        raise NotImplementedError


class LoggingDiagnosticHook(DiagnosticHook):
    """Writes each event as a structured log record."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('pmtk.diagnostics')

    def __call__(self, event: ExtractionEvent) -> None:
        level = logging.WARNING if event.milestone in WARNING_MILESTONES else logging.DEBUG
        details = ', '.join(f"{k}={v}" for k, v in event.detail.items())
        message = f"[{event.milestone.value}] {event.file_name}"
        if details:
            message = f"{message} ({details})"
        self.logger.log(level, message, extra={
            'milestone': event.milestone.value,
            'file_name': event.file_name,
            'detail': dict(event.detail),
        })


class NullDiagnosticHook(DiagnosticHook):
    """Discards every event."""

    def __call__(self, event: ExtractionEvent) -> None:
        return None


def emit_event(hook: Any, milestone: Milestone, file_name: str, **detail: Any) -> None:
    """
    Build an ExtractionEvent and pass it to `hook`.

    A failing hook is logged and otherwise ignored so that diagnostics never
    change extraction results.
    """
    if hook is None:
        return
    try:
        hook(ExtractionEvent(milestone, file_name, detail))
    except Exception as e:
        logging.getLogger(__name__).debug(f"Diagnostic hook failed on {milestone.value}: {e}")


def setup_logger(log_file: Optional[str] = None, level: int = logging.INFO,
                 stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Set up and configure the root logger.

    Args:
        log_file (str, optional): The full path to the log file.
        level (int): The logging level.
        stream (TextIO, optional): Console stream; stdout when None.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter('%(message)s')
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Pillow logs every chunk it parses at DEBUG
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logger


def shutdown_logger(logger: logging.Logger):
    """
    Safely shuts down a logger by removing and closing its handlers.
    This releases the log file.
    """
    if not logger:
        return
    handlers = logger.handlers[:]
    for handler in handlers:
        handler.flush()
        handler.close()
        logger.removeHandler(handler)
