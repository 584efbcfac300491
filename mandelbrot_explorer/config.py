"""
Configuration for the Mandelbrot explorer.

Holds the fixed constants of the viewer and loads optional overrides from
a settings.json file once at startup. Nothing here changes while the
window is open, and nothing is ever written back.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, fields

from .palettes import DEFAULT_PALETTE, PALETTE_SCALE, PALETTES


LOGGER_NAME = 'mandelbrot_explorer'
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

SETTINGS_ENV_VAR = 'MANDELBROT_EXPLORER_SETTINGS'
LOG_LEVEL_ENV_VAR = 'MANDELBROT_EXPLORER_LOG_LEVEL'
SETTINGS_FILENAME = 'settings.json'

# Default configuration
WIDTH = 500
HEIGHT = 500
MAX_ITER = 100
ZOOM_FACTOR = 1.1
SMALL_PAN_AMOUNT = 0.05  # With shift held
LARGE_PAN_AMOUNT = 0.5
SLIDER_MAX = 500

# Default view bounds (classic Mandelbrot overview)
DEFAULT_BOUNDS = (-2.0, 1.0, -1.0, 1.0)  # x_min, x_max, y_min, y_max


logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """A settings value would break one of the viewer's invariants."""


def _is_finite_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class Settings:
    """Startup configuration. Defaults reproduce the classic 500x500 view."""

    width: int = WIDTH
    height: int = HEIGHT
    max_iterations: int = MAX_ITER
    zoom_factor: float = ZOOM_FACTOR
    pan_fine: float = SMALL_PAN_AMOUNT
    pan_coarse: float = LARGE_PAN_AMOUNT
    bounds: tuple = DEFAULT_BOUNDS
    slider_max: int = SLIDER_MAX
    palette: str = DEFAULT_PALETTE

    @property
    def palette_scale(self):
        """Palette ramp divisor: the starting iteration bound, or 100 when that is 0."""
        return self.max_iterations or PALETTE_SCALE

    @classmethod
    def from_dict(cls, data):
        """
        Build settings from a parsed JSON object.

        Missing keys keep their defaults.

        Raises:
            SettingsError on unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise SettingsError(f"Settings must be a JSON object, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(unknown)}")

        values = dict(data)
        try:
            if 'bounds' in values:
                values['bounds'] = tuple(values['bounds'])
            settings = cls(**values)
            settings.validate()
        except TypeError as e:
            raise SettingsError(str(e)) from e
        return settings

    def validate(self):
        """Raise SettingsError if any value is out of range."""
        for name in ('width', 'height', 'max_iterations', 'slider_max'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise SettingsError(f"{name} must be an integer, got {value!r}")

        if self.width <= 0 or self.height <= 0:
            raise SettingsError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.max_iterations < 0:
            raise SettingsError(f"max_iterations must be non-negative, got {self.max_iterations}")
        if self.slider_max < self.max_iterations:
            raise SettingsError(
                f"slider_max ({self.slider_max}) is below max_iterations ({self.max_iterations})"
            )
        for name in ('zoom_factor', 'pan_fine', 'pan_coarse'):
            value = getattr(self, name)
            if not _is_finite_number(value):
                raise SettingsError(f"{name} must be a finite number, got {value!r}")

        if self.zoom_factor <= 0:
            raise SettingsError(f"zoom_factor must be positive, got {self.zoom_factor}")
        if not (0 < self.pan_fine <= 1 and 0 < self.pan_coarse <= 1):
            raise SettingsError(
                f"Pan amounts must be in (0, 1], got {self.pan_fine} / {self.pan_coarse}"
            )
        if len(self.bounds) != 4:
            raise SettingsError(f"bounds needs 4 numbers, got {len(self.bounds)}")
        if not all(_is_finite_number(v) for v in self.bounds):
            raise SettingsError(f"bounds must be finite numbers, got {self.bounds!r}")
        x_min, x_max, y_min, y_max = self.bounds
        if not (x_min < x_max and y_min < y_max):
            raise SettingsError(f"bounds must satisfy min < max on both axes, got {self.bounds}")
        if self.palette not in PALETTES:
            raise SettingsError(
                f"Unknown palette {self.palette!r}, choose from {', '.join(PALETTES)}"
            )


def default_settings_path():
    """settings.json path from the environment, or beside the package."""
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return env_path
    return os.path.join(os.path.dirname(__file__), SETTINGS_FILENAME)


def load_settings(path=None):
    """
    Load settings from a JSON file.

    A missing or unparsable file falls back to the defaults. Values that
    parse but are invalid raise SettingsError.
    """
    settings_path = path or default_settings_path()
    try:
        with open(settings_path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", settings_path, e)
        return Settings()

    settings = Settings.from_dict(data)
    logger.info("Loaded settings from %s", settings_path)
    return settings


def setup_logging(level=None):
    """
    Configure the package logger with a single console handler.

    Args:
        level: Level name or number; defaults to $MANDELBROT_EXPLORER_LOG_LEVEL
            or INFO

    Returns:
        The package logger
    """
    level = level or os.environ.get(LOG_LEVEL_ENV_VAR, 'INFO')
    if isinstance(level, str):
        level = level.upper()

    package_logger = logging.getLogger(LOGGER_NAME)
    if package_logger.hasHandlers():
        package_logger.handlers.clear()

    package_logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    return package_logger
