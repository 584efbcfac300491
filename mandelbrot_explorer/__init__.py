"""
Mandelbrot Set Explorer Package

An interactive Mandelbrot set explorer using Pygame for display and
Numba for JIT-compiled escape-time computation.

Quick Start:
    from mandelbrot_explorer import run
    run()

Or from command line:
    python -m mandelbrot_explorer

Package Structure:
    - compute.py: JIT-compiled escape-time and palette kernels
    - palettes.py: Color palette tables (Classic, Canvas)
    - viewport.py: View state, zoom/pan transitions, render-after-change controller
    - config.py: Constants, settings.json loading, logging setup
    - widgets.py: Iteration slider
    - app.py: Main application and event loop

Controls:
    - Scroll: Zoom in/out at mouse position
    - Arrow keys: Pan (hold SHIFT for smaller steps)
    - Slider: Maximum iterations (0-500)
    - R: Reset to default view
    - ESC: Quit
"""

from .app import run, ExplorerApp
from .compute import render, escape_time, pixel_to_complex
from .config import Settings, SettingsError, load_settings
from .palettes import PALETTES, color_palette, get_palette, list_palette_names
from .viewport import PlaneRect, ViewState, ViewportController

__version__ = "1.0.0"
__all__ = [
    "run",
    "ExplorerApp",
    "render",
    "escape_time",
    "pixel_to_complex",
    "Settings",
    "SettingsError",
    "load_settings",
    "PALETTES",
    "color_palette",
    "get_palette",
    "list_palette_names",
    "PlaneRect",
    "ViewState",
    "ViewportController",
]
