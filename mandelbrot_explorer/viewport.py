"""
View state and the input-driven transitions that change it.

The view is a single immutable ViewState (plane rectangle + iteration
bound). Every input event is a plain function from the old state to a new
one; ViewportController holds the current state and redraws exactly once
after each transition.
"""

import logging
from dataclasses import dataclass, replace
from typing import NamedTuple

from . import config
from .compute import render


logger = logging.getLogger(__name__)

ZOOM_IN = 'in'
ZOOM_OUT = 'out'

PAN_LEFT = 'left'
PAN_RIGHT = 'right'
PAN_UP = 'up'
PAN_DOWN = 'down'

# Key names as delivered by the UI layer
ARROW_KEYS = {
    'ArrowLeft': PAN_LEFT,
    'ArrowRight': PAN_RIGHT,
    'ArrowUp': PAN_UP,
    'ArrowDown': PAN_DOWN,
}


class PlaneRect(NamedTuple):
    """Visible region of the complex plane. Unpacks as (x_min, x_max, y_min, y_max)."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y


DEFAULT_RECT = PlaneRect(*config.DEFAULT_BOUNDS)


@dataclass(frozen=True)
class ViewState:
    """Everything needed to reproduce a frame."""

    rect: PlaneRect = DEFAULT_RECT
    max_iterations: int = config.MAX_ITER


def pixel_to_plane(rect, pixel, grid):
    """
    Convert a pixel position to plane coordinates under rect.

    Uses the same left-aligned mapping as the renderer.
    """
    px, py = pixel
    width, height = grid
    cx = rect.min_x + px * (rect.max_x - rect.min_x) / width
    cy = rect.min_y + py * (rect.max_y - rect.min_y) / height
    return cx, cy


def zoom(state, cursor_pixel, direction, grid, factor=config.ZOOM_FACTOR):
    """
    Scale the view around the point under the cursor.

    The cursor's plane point stays fixed while both axes scale by 1/factor
    (zoom in) or factor (zoom out).

    Raises:
        ValueError for an unknown direction
    """
    if direction == ZOOM_IN:
        f = 1 / factor
    elif direction == ZOOM_OUT:
        f = factor
    else:
        raise ValueError(f"Unknown zoom direction: {direction!r}")

    rect = state.rect
    cx, cy = pixel_to_plane(rect, cursor_pixel, grid)
    new_rect = PlaneRect(
        cx + (rect.min_x - cx) * f,
        cx + (rect.max_x - cx) * f,
        cy + (rect.min_y - cy) * f,
        cy + (rect.max_y - cy) * f,
    )
    return replace(state, rect=new_rect)


def pan(state, direction, fine=False,
        fine_amount=config.SMALL_PAN_AMOUNT, coarse_amount=config.LARGE_PAN_AMOUNT):
    """
    Shift the view by a fraction of its current extent.

    Left/up move toward smaller coordinates, right/down toward larger.

    Raises:
        ValueError for an unknown direction
    """
    amount = fine_amount if fine else coarse_amount
    rect = state.rect

    if direction in (PAN_LEFT, PAN_RIGHT):
        shift = amount * (rect.max_x - rect.min_x)
        if direction == PAN_LEFT:
            shift = -shift
        new_rect = rect._replace(min_x=rect.min_x + shift, max_x=rect.max_x + shift)
    elif direction in (PAN_UP, PAN_DOWN):
        shift = amount * (rect.max_y - rect.min_y)
        if direction == PAN_UP:
            shift = -shift
        new_rect = rect._replace(min_y=rect.min_y + shift, max_y=rect.max_y + shift)
    else:
        raise ValueError(f"Unknown pan direction: {direction!r}")

    return replace(state, rect=new_rect)


def set_iteration_bound(state, n):
    """Replace the iteration bound. Range checking is the slider's job."""
    return replace(state, max_iterations=n)


def handle_wheel(state, cursor_pixel, delta_y, grid, factor=config.ZOOM_FACTOR):
    """
    Apply a wheel event. Positive delta (toward the user) zooms in.

    A zero delta leaves the state unchanged.
    """
    if delta_y > 0:
        return zoom(state, cursor_pixel, ZOOM_IN, grid, factor)
    if delta_y < 0:
        return zoom(state, cursor_pixel, ZOOM_OUT, grid, factor)
    return state


def handle_key(state, key, modifier_held=False, **pan_amounts):
    """Apply a key event. Keys other than the arrows return state unchanged."""
    direction = ARROW_KEYS.get(key)
    if direction is None:
        return state
    return pan(state, direction, modifier_held, **pan_amounts)


class ViewportController:
    """
    Owns the current ViewState and redraws after every change.

    Usage:
        controller = ViewportController(500, 500, on_render=show)
        controller.redraw()
        controller.handle_wheel((250, 250), 1)   # renders once

    on_render is called as on_render(buffer, state) with a fresh RGBA
    buffer for the new state.
    """

    def __init__(self, width, height, on_render, state=None, palette=None,
                 settings=None):
        self.settings = settings or config.Settings()
        self.width = width
        self.height = height
        self.on_render = on_render
        self.palette = palette
        self.state = state or ViewState(
            PlaneRect(*self.settings.bounds), self.settings.max_iterations
        )

    @property
    def grid(self):
        return self.width, self.height

    @property
    def _pan_amounts(self):
        return {
            'fine_amount': self.settings.pan_fine,
            'coarse_amount': self.settings.pan_coarse,
        }

    def redraw(self):
        """Render the current state and hand the buffer to on_render."""
        rect = self.state.rect
        buffer = render(rect, self.width, self.height, self.state.max_iterations,
                        self.palette)
        self.on_render(buffer, self.state)
        return buffer

    def _transition(self, new_state, reason):
        if new_state is self.state:
            return self.state
        self.state = new_state
        logger.debug(
            "%s -> x=[%r, %r] y=[%r, %r] iter=%d", reason,
            *new_state.rect, new_state.max_iterations
        )
        self.redraw()
        return self.state

    def zoom(self, cursor_pixel, direction):
        new_state = zoom(self.state, cursor_pixel, direction, self.grid,
                         self.settings.zoom_factor)
        return self._transition(new_state, f"zoom {direction}")

    def pan(self, direction, fine=False):
        new_state = pan(self.state, direction, fine, **self._pan_amounts)
        return self._transition(new_state, f"pan {direction}")

    def set_iteration_bound(self, n):
        return self._transition(set_iteration_bound(self.state, n), "iterations")

    def handle_wheel(self, cursor_pixel, delta_y):
        new_state = handle_wheel(self.state, cursor_pixel, delta_y, self.grid,
                                 self.settings.zoom_factor)
        return self._transition(new_state, "wheel")

    def handle_key(self, key, modifier_held=False):
        new_state = handle_key(self.state, key, modifier_held, **self._pan_amounts)
        return self._transition(new_state, f"key {key}")

    def reset(self):
        """Back to the default view, keeping the iteration bound."""
        new_state = replace(self.state, rect=PlaneRect(*self.settings.bounds))
        return self._transition(new_state, "reset")
