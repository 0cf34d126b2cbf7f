"""Configuration management for the field engine.

Handles loading and saving engine defaults (replacement character, default
encodings, integer width, scope version, file buffer size) from a TOML file,
and holds the process-wide active configuration consulted by the converter
and by newly created fields.
"""

import copy
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import tomli_w

from .constants import (
    DEFAULT_INTEGER_WIDTH,
    DEFAULT_NARROW_CHARSET,
    DEFAULT_REPLACEMENT,
    NARROW_CHARSETS,
    TextEncoding,
    V2Spec,
    WIDE_ENCODINGS,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ID3FIELD_CONFIG"


def get_config_dir() -> Path:
    """Get the configuration directory (~/.id3field on all platforms)."""
    return Path.home() / ".id3field"


def get_config_path() -> Path:
    """Get the full path to the config file.

    The ID3FIELD_CONFIG environment variable overrides the default location.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "config.toml"


class Config:
    """Configuration manager for engine settings."""

    DEFAULT_CONFIG: Dict[str, Any] = {
        "text": {
            # Substituted for characters ISO-8859-1 cannot represent
            "replacement": DEFAULT_REPLACEMENT,
            # Characters a narrow (LATIN1) item may hold: "ascii" or "latin-1"
            "narrow_charset": DEFAULT_NARROW_CHARSET,
            # Encoding given to new UNICODE_TEXT fields: UTF16, UTF16BE or UTF8
            "default_unicode_encoding": "UTF16",
        },
        "integer": {
            # Width in bytes of integer fields without a fixed size
            "default_width": DEFAULT_INTEGER_WIDTH,
        },
        "scope": {
            "default_spec": "ID3V2_3_0",
        },
        "io": {
            # Buffer size for from_file/to_file, 0 means system default
            "buffer_size": 0,
        },
        "logging": {
            "level": "warning",
        },
    }

    def __init__(self, config_path: Optional[Path] = None, load: bool = True):
        """Initialize configuration manager.

        Args:
            config_path: TOML file to use instead of the default location
            load: Read the file immediately if it exists
        """
        self.config_path = Path(config_path) if config_path else get_config_path()
        self.data: Dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)
        self._dirty = False
        if load:
            self.load()

    def load(self) -> bool:
        """Load configuration from file.

        Returns:
            True if loaded successfully, False if file doesn't exist or error occurred
        """
        if not self.config_path.exists():
            return False

        try:
            with open(self.config_path, "rb") as f:
                loaded_data = tomllib.load(f)
            self._merge_config(self.data, loaded_data)
            self._dirty = False
            return True
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config {self.config_path}: {e}")
            return False

    def save(self, force: bool = False) -> bool:
        """Save configuration to file.

        Args:
            force: If True, save even if config hasn't been modified

        Returns:
            True if saved successfully, False otherwise
        """
        if not force and not self._dirty:
            return True

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "wb") as f:
                tomli_w.dump(self.data, f)
            self._dirty = False
            return True
        except OSError as e:
            logger.error(f"Error saving config {self.config_path}: {e}")
            return False

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge override dict into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def is_dirty(self) -> bool:
        return self._dirty

    # Text settings
    def get_replacement(self) -> str:
        """Get the replacement character for unmappable text."""
        return self.data["text"]["replacement"]

    def set_replacement(self, replacement: str) -> None:
        """Set the replacement character.

        Raises:
            ValueError: If replacement is not a single ASCII character
        """
        if len(replacement) != 1 or ord(replacement) > 0x7F:
            raise ValueError("Replacement must be a single ASCII character")
        self.data["text"]["replacement"] = replacement
        self._dirty = True

    def get_narrow_charset(self) -> str:
        """Get the character set narrow items are restricted to."""
        charset = self.data["text"]["narrow_charset"]
        if charset not in NARROW_CHARSETS:
            logger.warning(f"Unknown narrow charset {charset!r} in config, using {DEFAULT_NARROW_CHARSET}")
            return DEFAULT_NARROW_CHARSET
        return charset

    def set_narrow_charset(self, charset: str) -> None:
        """Set the narrow character set.

        Raises:
            ValueError: If charset is not "ascii" or "latin-1"
        """
        if charset not in NARROW_CHARSETS:
            raise ValueError(f"Unsupported narrow charset: {charset}")
        self.data["text"]["narrow_charset"] = charset
        self._dirty = True

    def get_default_unicode_encoding(self) -> TextEncoding:
        """Get the encoding given to new UNICODE_TEXT fields."""
        name = self.data["text"]["default_unicode_encoding"]
        try:
            return TextEncoding[name]
        except KeyError:
            logger.warning(f"Unknown text encoding {name!r} in config, using UTF16")
            return TextEncoding.UTF16

    def set_default_unicode_encoding(self, encoding: TextEncoding) -> None:
        """Set the encoding given to new UNICODE_TEXT fields.

        Raises:
            ValueError: If encoding is not a wide encoding
        """
        encoding = TextEncoding(encoding)
        if encoding not in WIDE_ENCODINGS:
            raise ValueError(f"{encoding.name} is not a Unicode encoding")
        self.data["text"]["default_unicode_encoding"] = encoding.name
        self._dirty = True

    # Integer settings
    def get_default_width(self) -> int:
        return self.data["integer"]["default_width"]

    def set_default_width(self, width: int) -> None:
        """Set the default integer width in bytes.

        Raises:
            ValueError: If width is not between 1 and 4
        """
        if not 1 <= width <= 4:
            raise ValueError("Integer width must be between 1 and 4 bytes")
        self.data["integer"]["default_width"] = width
        self._dirty = True

    # Scope settings
    def get_default_spec(self) -> V2Spec:
        name = self.data["scope"]["default_spec"]
        try:
            return V2Spec[name]
        except KeyError:
            logger.warning(f"Unknown spec version {name!r} in config, using ID3V2_3_0")
            return V2Spec.ID3V2_3_0

    def set_default_spec(self, spec: V2Spec) -> None:
        self.data["scope"]["default_spec"] = V2Spec(spec).name
        self._dirty = True

    # I/O settings
    def get_buffer_size(self) -> Optional[int]:
        """Get the file buffer size, or None for the system default."""
        size = self.data["io"]["buffer_size"]
        return size if size > 0 else None

    def set_buffer_size(self, size: int) -> None:
        if size < 0:
            raise ValueError("Buffer size cannot be negative")
        self.data["io"]["buffer_size"] = size
        self._dirty = True

    # Logging settings
    def get_log_level(self) -> str:
        return self.data["logging"]["level"]

    def set_log_level(self, level: str) -> None:
        self.data["logging"]["level"] = level
        self._dirty = True


_active_config: Optional[Config] = None


def get_config() -> Config:
    """Return the process-wide configuration, loading it on first use."""
    global _active_config
    if _active_config is None:
        _active_config = Config()
    return _active_config


def set_config(config: Optional[Config]) -> None:
    """Replace the process-wide configuration (None reloads on next use)."""
    global _active_config
    _active_config = config


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging based on user-specified level.

    Args:
        level: Logging level (debug, info, warning, error, critical). Defaults
            to the level in the active configuration.
    """
    if level is None:
        level = get_config().get_log_level()
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
