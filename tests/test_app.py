import numpy as np
import pygame
import pytest

from mandelbrot_explorer.app import ExplorerApp, key_name
from mandelbrot_explorer.config import Settings
from mandelbrot_explorer.palettes import get_palette
from mandelbrot_explorer.viewport import ViewportController, ViewState
from mandelbrot_explorer.widgets import Slider


def mouse_down(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=pos, button=button)


def mouse_up(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONUP, pos=pos, button=button)


def mouse_move(pos):
    return pygame.event.Event(pygame.MOUSEMOTION, pos=pos, rel=(0, 0), buttons=(1, 0, 0))


def key_down(key, mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=key, mod=mod)


def test_key_names():
    assert key_name(pygame.K_LEFT) == 'ArrowLeft'
    assert key_name(pygame.K_RIGHT) == 'ArrowRight'
    assert key_name(pygame.K_UP) == 'ArrowUp'
    assert key_name(pygame.K_DOWN) == 'ArrowDown'
    assert key_name(pygame.K_a) is None


@pytest.fixture
def slider():
    return Slider(0, 0, 100, 0, 500, 100)


def test_slider_click_sets_value(slider):
    assert slider.handle_event(mouse_down((50, 8))) == (True, True)
    assert slider.value == 250
    assert slider.dragging


def test_slider_drag_clamps_to_range(slider):
    slider.handle_event(mouse_down((10, 8)))
    assert slider.handle_event(mouse_move((400, 300))) == (True, True)
    assert slider.value == 500
    assert slider.handle_event(mouse_move((-50, 8))) == (True, True)
    assert slider.value == 0


def test_slider_release_stops_drag(slider):
    slider.handle_event(mouse_down((10, 8)))
    assert slider.handle_event(mouse_up((10, 8))) == (True, False)
    assert not slider.dragging
    assert slider.handle_event(mouse_move((90, 8))) == (False, False)
    assert slider.value == 50


def test_slider_ignores_clicks_outside(slider):
    assert slider.handle_event(mouse_down((50, 40))) == (False, False)
    assert slider.handle_event(mouse_down((50, 8), button=3)) == (False, False)
    assert slider.value == 100


def test_slider_same_value_is_not_a_change(slider):
    assert slider.handle_event(mouse_down((20, 8))) == (True, False)


def test_slider_initial_value_is_clamped():
    assert Slider(0, 0, 100, 0, 500, 900).value == 500


@pytest.fixture
def app():
    frames = []
    app = ExplorerApp(Settings(width=8, height=8))
    app.controller = ViewportController(
        8, 8, on_render=lambda buffer, state: frames.append(state), settings=app.settings
    )
    app.slider = Slider(0, 34, 100, 0, 500, 100)
    app.frames = frames
    return app


def test_arrow_keys_pan(app):
    app._handle_key(key_down(pygame.K_LEFT))
    assert app.controller.state.rect.min_x == pytest.approx(-3.5)
    app._handle_key(key_down(pygame.K_RIGHT, pygame.KMOD_LSHIFT))
    assert app.controller.state.rect.min_x == pytest.approx(-3.5 + 0.15)
    assert len(app.frames) == 2


def test_reset_and_escape_keys(app):
    app._handle_key(key_down(pygame.K_UP))
    app._handle_key(key_down(pygame.K_r))
    assert app.controller.state == ViewState()

    app.running = True
    app._handle_key(key_down(pygame.K_ESCAPE))
    assert not app.running


def test_other_keys_are_ignored(app):
    app._handle_key(key_down(pygame.K_q))
    assert app.frames == []
    assert app.controller.state == ViewState()


def wheel(y):
    return pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=y, flipped=False)


@pytest.fixture
def pointer(monkeypatch):
    position = [(4, 4)]
    monkeypatch.setattr(pygame.mouse, "get_pos", lambda: position[0])
    return position


@pytest.fixture
def queue(monkeypatch):
    pending = []

    def get():
        events = list(pending)
        pending.clear()
        return events

    monkeypatch.setattr(pygame.event, "get", get)
    return pending


def test_wheel_toward_user_zooms_in(app, pointer):
    app._handle_zoom(wheel(-1))
    assert app.controller.state.rect.width == pytest.approx(3.0 / 1.1)
    assert len(app.frames) == 1


def test_wheel_away_from_user_zooms_out(app, pointer):
    app._handle_zoom(wheel(1))
    assert app.controller.state.rect.width == pytest.approx(3.0 * 1.1)


def test_wheel_zoom_keeps_point_under_pointer(app, pointer):
    pointer[0] = (0, 0)
    app._handle_zoom(wheel(-1))
    assert app.controller.state.rect.min_x == -2.0
    assert app.controller.state.rect.min_y == -1.0


def test_wheel_below_canvas_is_ignored(app, pointer):
    pointer[0] = (4, 20)
    app._handle_zoom(wheel(-1))
    assert app.frames == []
    assert app.controller.state == ViewState()


def test_slider_click_sets_iteration_bound(app, queue):
    queue.append(mouse_down((50, 40)))
    app._handle_events()
    assert app.controller.state.max_iterations == 250
    assert len(app.frames) == 1

    # Releasing, or clicking the same value again, does not re-render
    queue.extend([mouse_up((50, 40)), mouse_down((50, 40))])
    app._handle_events()
    assert len(app.frames) == 1


def test_slider_drag_renders_each_new_value(app, queue):
    queue.extend([mouse_down((10, 40)), mouse_move((20, 40)), mouse_move((20, 41))])
    app._handle_events()
    assert app.controller.state.max_iterations == 100
    assert [state.max_iterations for state in app.frames] == [50, 100]


def test_events_reach_wheel_and_key_handlers(app, queue, pointer):
    queue.extend([wheel(-1), key_down(pygame.K_DOWN), key_down(pygame.K_a)])
    app._handle_events()
    assert len(app.frames) == 2
    assert app.controller.state.rect.height == pytest.approx(2.0 / 1.1)


def test_quit_event_stops_the_loop(app, queue):
    app.running = True
    queue.append(pygame.event.Event(pygame.QUIT))
    app._handle_events()
    assert not app.running


def test_components_follow_settings():
    app = ExplorerApp(Settings(width=8, height=8, max_iterations=50))
    app._init_components()
    assert np.array_equal(app.controller.palette, get_palette('Classic', 50))
    assert app.controller.state.max_iterations == 50
    assert app.slider.value == 50
    # A canvas narrower than the slider margin still gets a usable slider
    assert app.slider.width == 1


def test_slider_width_is_at_least_one_pixel():
    slider = Slider(0, 0, -5, 0, 500, 100)
    assert slider.width == 1
    assert slider.value_at(-10) == 0
    assert slider.value_at(10) == 500
