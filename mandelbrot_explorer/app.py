"""
Main application module for the Mandelbrot explorer.

Contains the ExplorerApp class which handles:
- Window setup and main loop
- User input (wheel zoom, arrow-key pan, iteration slider)
- Display of each frame the viewport controller renders
"""

import logging

import pygame

from . import config
from .compute import warmup_jit
from .palettes import get_palette
from .viewport import ViewportController
from .widgets import Slider


logger = logging.getLogger(__name__)

# pygame key codes -> key names understood by the controller
PYGAME_ARROW_KEYS = {
    pygame.K_LEFT: 'ArrowLeft',
    pygame.K_RIGHT: 'ArrowRight',
    pygame.K_UP: 'ArrowUp',
    pygame.K_DOWN: 'ArrowDown',
}

INSTRUCTIONS = (
    "Use the mouse wheel to zoom in and out. Use the arrow keys to pan the",
    "image. Hold down the SHIFT key to pan in smaller steps. R resets the view.",
)


def key_name(key):
    """Controller key name for a pygame key code, or None for other keys."""
    return PYGAME_ARROW_KEYS.get(key)


class ExplorerApp:
    """
    Main application class for the Mandelbrot explorer.

    Handles the pygame window and event loop. Every input is handled to
    completion, including the full re-render, before the next one.
    """

    PANEL_HEIGHT = 80  # Control strip below the canvas
    BACKGROUND = (30, 30, 30)
    TEXT_COLOR = (200, 200, 200)

    def __init__(self, settings=None):
        """
        Initialize the application.

        Args:
            settings: config.Settings, defaults to the built-in constants
        """
        self.settings = settings or config.Settings()
        self.width = self.settings.width
        self.height = self.settings.height

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None
        self.small_font = None

        # Components
        self.controller = None
        self.slider = None

        # Display state
        self.current_surface = None

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height + self.PANEL_HEIGHT)
        )
        pygame.display.set_caption("Mandelbrot Set")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont('Arial', 14)
        self.small_font = pygame.font.SysFont('Arial', 12)

    def _init_components(self):
        """Initialize controller and slider."""
        self.controller = ViewportController(
            self.width, self.height,
            on_render=self._show_frame,
            palette=get_palette(self.settings.palette, self.settings.palette_scale),
            settings=self.settings,
        )
        self.slider = Slider(
            10, self.height + 26, max(1, min(self.width - 20, 300)),
            0, self.settings.slider_max, self.settings.max_iterations
        )

    def _warmup_and_initial_render(self):
        """Warm up JIT and do initial render."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit(self.controller.palette)
        self.controller.redraw()
        logger.info("Explorer ready at %dx%d", self.width, self.height)

    def _show_frame(self, buffer, state):
        """Turn a freshly rendered RGBA buffer into the display surface."""
        self.current_surface = pygame.surfarray.make_surface(
            buffer[:, :, :3].swapaxes(0, 1)
        )
        pygame.display.set_caption(
            f"Mandelbrot Set - x [{state.rect.min_x:.6g}, {state.rect.max_x:.6g}] "
            f"y [{state.rect.min_y:.6g}, {state.rect.max_y:.6g}]"
        )

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            # Slider gets first crack at mouse events
            slider_handled, value_changed = self.slider.handle_event(event)
            if value_changed:
                self.controller.set_iteration_bound(self.slider.value)
            if slider_handled:
                continue

            if event.type == pygame.MOUSEWHEEL:
                self._handle_zoom(event)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_zoom(self, event):
        """Handle mouse wheel zoom over the canvas."""
        mx, my = pygame.mouse.get_pos()
        if my >= self.height:
            return
        # pygame's y is positive when scrolling away from the user
        self.controller.handle_wheel((mx, my), -event.y)

    def _handle_key(self, event):
        """Handle keyboard input."""
        name = key_name(event.key)
        if name is not None:
            self.controller.handle_key(name, bool(event.mod & pygame.KMOD_SHIFT))
        elif event.key == pygame.K_r:
            self.controller.reset()
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _draw(self):
        """Draw the current frame and the control strip."""
        self.screen.fill(self.BACKGROUND)

        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))

        label = self.font.render(
            f"Iterations: {self.controller.state.max_iterations}", True, self.TEXT_COLOR
        )
        self.screen.blit(label, (10, self.height + 6))
        self.slider.draw(self.screen)

        text_y = self.height + 46
        for line in INSTRUCTIONS:
            text = self.small_font.render(line, True, self.TEXT_COLOR)
            self.screen.blit(text, (10, text_y))
            text_y += 14

        pygame.display.flip()


def run(settings=None):
    """
    Run the Mandelbrot explorer.

    Args:
        settings: config.Settings; read from settings.json when omitted
    """
    config.setup_logging()
    if settings is None:
        settings = config.load_settings()
    app = ExplorerApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
