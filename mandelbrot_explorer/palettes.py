"""
Color palette definitions for the escape-time renderer.

A palette is a numpy array of shape (255, 3) with RGB values (uint8),
indexed by ``iterations % 255``. The palette repeats every 255 escape
steps, which shows up as banding at high iteration counts.

The raw channel values from color_palette() are not clamped and can run
past 255. How they are squeezed into 8 bits depends on the overflow mode:
- 'wrap': value mod 256, what a plain uint8 assignment does
- 'clamp': saturate at 255, what an HTML canvas pixel array does

To add a new palette:
1. Define a create_palette_xxx() function that returns the table
2. Add it to the PALETTES dictionary at the bottom of this file
"""

import numpy as np


PALETTE_SIZE = 255  # Palette repeats every 255 iterations
PALETTE_SCALE = 100  # Ramp divisor, tracks the starting iteration bound (not the slider)

OVERFLOW_WRAP = 'wrap'
OVERFLOW_CLAMP = 'clamp'

# Channel slopes: r, g, b climb at 3x, 5x and 7x the base ramp
CHANNEL_MULTIPLIERS = (3, 5, 7)


def color_palette(iterations, scale=PALETTE_SCALE):
    """
    Raw RGB channel values for an escape count.

    Args:
        iterations: Number of iterations before the point escaped
        scale: Divisor for the channel ramps

    Returns:
        (r, g, b) tuple of non-negative ints, not limited to 0-255
    """
    k = iterations % PALETTE_SIZE
    return tuple((m * 255 * k) // scale for m in CHANNEL_MULTIPLIERS)


def build_palette_table(scale=PALETTE_SCALE, overflow=OVERFLOW_WRAP):
    """
    Build a lookup table of every color the palette can produce.

    Args:
        scale: Divisor for the channel ramps
        overflow: 'wrap' or 'clamp', how out-of-range channels become bytes

    Returns:
        (255, 3) uint8 array, row k holds the color for iterations % 255 == k

    Raises:
        ValueError if overflow is not a known mode
    """
    if overflow not in (OVERFLOW_WRAP, OVERFLOW_CLAMP):
        raise ValueError(f"Unknown overflow mode: {overflow!r}")

    raw = np.array(
        [color_palette(k, scale) for k in range(PALETTE_SIZE)],
        dtype=np.int64
    )
    if overflow == OVERFLOW_WRAP:
        raw %= 256
    else:
        np.clip(raw, 0, 255, out=raw)
    return raw.astype(np.uint8)


def create_palette_classic(scale=PALETTE_SCALE):
    """
    Classic palette: fast r/g/b ramps that wrap around every byte.

    The wrap makes the outer bands cycle through colors instead of
    saturating to white.
    """
    return build_palette_table(scale, OVERFLOW_WRAP)


def create_palette_canvas(scale=PALETTE_SCALE):
    """
    Canvas palette: same ramps, saturated at 255.

    Matches what a browser canvas shows for the same arithmetic.
    """
    return build_palette_table(scale, OVERFLOW_CLAMP)


# Registry of all available palettes.
# Keys are display names, values are factory functions.
PALETTES = {
    'Classic': create_palette_classic,
    'Canvas': create_palette_canvas,
}

DEFAULT_PALETTE = 'Classic'


def get_palette(name, scale=PALETTE_SCALE):
    """
    Get a palette by name, with its ramps divided by scale.

    Raises:
        KeyError if name not found
    """
    return PALETTES[name](scale)


def get_default_palette():
    """Get the default palette (Classic)."""
    return create_palette_classic()


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())
