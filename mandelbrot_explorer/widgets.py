"""
UI components for the explorer's control strip.
"""

import pygame


class Slider:
    """A horizontal integer slider (range input)."""

    KNOB_WIDTH = 10

    def __init__(self, x, y, width, min_value, max_value, value, height=16):
        self.x = x
        self.y = y
        self.width = max(1, width)
        self.height = height
        self.min_value = min_value
        self.max_value = max_value
        self.value = self._clamp(value)
        self.dragging = False

    def _clamp(self, value):
        return max(self.min_value, min(self.max_value, int(value)))

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def value_at(self, mx):
        """Slider value for a mouse x position, clamped to the range."""
        t = (mx - self.x) / self.width
        span = self.max_value - self.min_value
        return self._clamp(round(self.min_value + t * span))

    def knob_x(self):
        span = self.max_value - self.min_value
        t = (self.value - self.min_value) / span if span else 0
        return self.x + int(t * self.width)

    def _set_from_mouse(self, mx):
        old_value = self.value
        self.value = self.value_at(mx)
        return self.value != old_value

    def handle_event(self, event):
        """Returns (handled, value_changed)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.get_rect().collidepoint(event.pos):
                self.dragging = True
                return True, self._set_from_mouse(event.pos[0])

        elif event.type == pygame.MOUSEMOTION and self.dragging:
            return True, self._set_from_mouse(event.pos[0])

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.dragging:
                self.dragging = False
                return True, False

        return False, False

    def draw(self, screen):
        rect = self.get_rect()

        # Track
        track = pygame.Rect(rect.left, rect.centery - 2, rect.width, 4)
        pygame.draw.rect(screen, (80, 80, 80), track)

        # Filled part
        filled = pygame.Rect(rect.left, rect.centery - 2, self.knob_x() - rect.left, 4)
        pygame.draw.rect(screen, (100, 140, 180), filled)

        # Knob
        knob_color = (220, 220, 220) if self.dragging else (180, 180, 180)
        knob = pygame.Rect(self.knob_x() - self.KNOB_WIDTH // 2, rect.top,
                           self.KNOB_WIDTH, rect.height)
        pygame.draw.rect(screen, knob_color, knob)
        pygame.draw.rect(screen, (100, 100, 100), knob, 1)
