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
Configuration Management for the Photo Metadata ToolKit.

This module provides a singleton configuration manager (`Config`) that loads,
parses, and provides access to settings from a central `config.toml` file.
Values missing from the file fall back to the built-in defaults.

Classes:
    Config: A singleton class for managing application-wide configuration.
"""
import copy
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.toml"


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Singleton configuration manager"""
    _instance = None
    _config: Dict[str, Any] = {}
    _path: Path = DEFAULT_CONFIG_PATH

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self):
        """Load configuration from the current config path"""
        defaults = self._default_config()
        if self._path.exists():
            try:
                with open(self._path, "rb") as f:
                    self._config = _merge(defaults, tomllib.load(f))
                logger.debug(f"Loaded configuration from {self._path}")
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Could not load {self._path}: {e}")
                self._config = defaults
        else:
            self._config = defaults

    def _default_config(self) -> Dict[str, Any]:
        """Default configuration if config.toml doesn't exist"""
        return {
            "extraction": {
                "timeout_seconds": 10.0
            },
            "batch": {
                "max_concurrency": 8
            },
            "export": {
                "indent": 2,
                "suffix": "-metadata.json"
            },
            "logging": {
                "level": "INFO",
                "file": ""
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., "export.indent")
            default: Default value if key is not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get("extraction.timeout_seconds")
            10.0
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section

        Args:
            section: Section name (e.g., "export")

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def set(self, key: str, value: Any):
        """Set configuration value using dot notation

        Note:
            This only modifies the in-memory configuration.
            Changes are not persisted to config.toml.
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def load(self, path: Optional[Union[str, Path]] = None):
        """Load configuration from another file (or the default one when None)"""
        self._path = Path(path) if path else DEFAULT_CONFIG_PATH
        if path and not self._path.exists():
            logger.warning(f"Config file not found: {self._path}; using defaults")
        self._load_config()

    def reload(self):
        """Reload configuration from the current config file"""
        self._load_config()

# Singleton instance
config = Config()
