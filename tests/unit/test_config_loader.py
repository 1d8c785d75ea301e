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
Unit tests for the configuration singleton.
"""

import pytest

from pmtk.utils.config_loader import Config, config


@pytest.fixture
def restore_config():
    """Reload the packaged config.toml after the test."""
    yield config
    config.load()


@pytest.mark.unit
class TestConfig:
    """Test Config loading and access."""

    def test_singleton(self):
        assert Config() is config

    def test_packaged_defaults(self):
        assert config.get('extraction.timeout_seconds') == 10.0
        assert config.get('batch.max_concurrency') == 8
        assert config.get('export.suffix') == '-metadata.json'

    def test_missing_key_returns_default(self):
        assert config.get('export.missing', 'fallback') == 'fallback'
        assert config.get('nothing.here') is None

    def test_get_section(self):
        assert config.get_section('export')['indent'] == 2
        assert config.get_section('unknown') == {}

    def test_set_creates_sections(self, restore_config):
        config.set('custom.nested.value', 5)
        assert config.get('custom.nested.value') == 5

    def test_load_custom_file_merges_defaults(self, restore_config, tmp_path):
        """Test that a partial config file overlays the defaults."""
        # Arrange
        custom = tmp_path / 'custom.toml'
        custom.write_text('[extraction]\ntimeout_seconds = 3.5\n', encoding='utf-8')

        # Act
        config.load(custom)

        # Assert
        assert config.get('extraction.timeout_seconds') == 3.5
        assert config.get('batch.max_concurrency') == 8

    def test_invalid_toml_falls_back_to_defaults(self, restore_config, tmp_path):
        broken = tmp_path / 'broken.toml'
        broken.write_text('[extraction\ntimeout_seconds = ', encoding='utf-8')

        config.load(broken)

        assert config.get('extraction.timeout_seconds') == 10.0

    def test_missing_file_uses_defaults(self, restore_config, tmp_path):
        config.load(tmp_path / 'absent.toml')
        assert config.get('logging.level') == 'INFO'
