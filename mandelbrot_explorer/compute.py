"""
Escape-time computation functions using Numba JIT compilation.

This module contains the performance-critical functions of the renderer:
- Pixel to complex-plane mapping
- Escape-time iteration of z² + c, per point and over a whole grid
- Palette application into an RGBA buffer

Kernels are compiled single-threaded and without fastmath so the float64
arithmetic is IEEE exact and frames are reproducible bit for bit.
"""

import logging
import time

import numpy as np
from numba import jit

from .palettes import PALETTE_SIZE, get_default_palette


logger = logging.getLogger(__name__)

ESCAPE_RADIUS_SQUARED = 4.0  # |z| > 2 always diverges
CHANNELS = 4  # RGBA
OPAQUE = 255


@jit(nopython=True, cache=True)
def pixel_to_complex(x_min, x_max, y_min, y_max, width, height, px, py):
    """
    Map a pixel to its sample point in the complex plane.

    The mapping is left-aligned and half-open: pixel 0 lands exactly on
    x_min, pixel width-1 stops one step short of x_max.
    """
    real = x_min + px * (x_max - x_min) / width
    imag = y_min + py * (y_max - y_min) / height
    return real, imag


@jit(nopython=True, cache=True)
def escape_time(real, imag, max_iter):
    """
    Iterate z² + c starting from z = c.

    Both the escape test and the update read the same r2/i2 squares,
    computed once per iteration.

    Args:
        real, imag: The point c
        max_iter: Iteration bound (0 means the loop never runs)

    Returns:
        (iterations, inside) where inside is True if the point never
        escaped within max_iter iterations
    """
    zr = real
    zi = imag
    iterations = 0
    inside = True

    while iterations < max_iter and inside:
        r2 = zr * zr
        i2 = zi * zi

        if r2 + i2 > ESCAPE_RADIUS_SQUARED:
            inside = False

        zi = 2 * zr * zi + imag
        zr = r2 - i2 + real

        iterations += 1

    return iterations, inside


@jit(nopython=True, cache=True)
def compute_escape_times(x_min, x_max, y_min, y_max, width, height, max_iter):
    """
    Compute escape times for every pixel of a grid.

    Args:
        x_min, x_max: Real axis bounds in the complex plane
        y_min, y_max: Imaginary axis bounds in the complex plane
        width, height: Grid dimensions in pixels
        max_iter: Maximum iteration count

    Returns:
        (iterations, inside): int64 and bool arrays of shape (height, width).
        Row 0 is y_min.
    """
    iterations = np.zeros((height, width), dtype=np.int64)
    inside = np.zeros((height, width), dtype=np.bool_)

    for py in range(height):
        for px in range(width):
            real, imag = pixel_to_complex(
                x_min, x_max, y_min, y_max, width, height, px, py
            )
            n, is_inside = escape_time(real, imag, max_iter)
            iterations[py, px] = n
            inside[py, px] = is_inside

    return iterations, inside


@jit(nopython=True, cache=True)
def apply_palette(iterations, inside, palette, out):
    """
    Color escape-time data into an RGBA buffer.

    Args:
        iterations: 2D array of escape counts from compute_escape_times
        inside: 2D bool array, True for points in the set (drawn black)
        palette: (255, 3) uint8 table indexed by iterations % 255
        out: Output RGBA array (height, width, 4), modified in place
    """
    height, width = iterations.shape

    for py in range(height):
        for px in range(width):
            if inside[py, px]:
                out[py, px, 0] = 0
                out[py, px, 1] = 0
                out[py, px, 2] = 0
            else:
                idx = iterations[py, px] % PALETTE_SIZE
                out[py, px, 0] = palette[idx, 0]
                out[py, px, 1] = palette[idx, 1]
                out[py, px, 2] = palette[idx, 2]
            out[py, px, 3] = OPAQUE


def render(bounds, width, height, max_iter, palette=None):
    """
    Render a full frame of the Mandelbrot set.

    Args:
        bounds: (x_min, x_max, y_min, y_max) region of the complex plane,
            with x_min < x_max and y_min < y_max (not checked here)
        width, height: Output dimensions in pixels
        max_iter: Non-negative iteration bound
        palette: (255, 3) uint8 table, defaults to the Classic palette

    Returns:
        Fresh uint8 RGBA array of shape (height, width, 4)
    """
    if palette is None:
        palette = get_default_palette()

    x_min, x_max, y_min, y_max = bounds
    start = time.perf_counter()

    iterations, inside = compute_escape_times(
        float(x_min), float(x_max), float(y_min), float(y_max),
        int(width), int(height), int(max_iter)
    )
    out = np.empty((height, width, CHANNELS), dtype=np.uint8)
    apply_palette(iterations, inside, palette, out)

    logger.debug(
        "Rendered %dx%d at %d iterations in %.1f ms",
        width, height, max_iter, (time.perf_counter() - start) * 1000
    )
    return out


def warmup_jit(palette=None):
    """
    Warm up JIT compilation with a tiny grid.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real frame.
    """
    render((-2.0, 1.0, -1.0, 1.0), 10, 10, 10, palette)
