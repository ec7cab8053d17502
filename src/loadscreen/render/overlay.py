"""
overlay.py
----------
Pygame renderer for a LoadingView.

Draws, back to front: background image, dark scrim, title/description,
hint line, progress bar with status text, spinner, continue prompt with
countdown bar. Every layer is multiplied by the screen fade.
"""

import math
import os

import pygame

from loadscreen.core.debug.debug_logger import DebugLogger
from loadscreen.core.runtime.loading_settings import Display
from loadscreen.loading.view import LoadingView


class Spinner:
    """Ring of dots with a fading tail, rotated over time."""

    def __init__(self, radius=28, dot_count=12, color=Display.ACCENT_COLOR):
        size = radius * 2 + 12
        self.base = pygame.Surface((size, size), pygame.SRCALPHA)
        center = size // 2
        for i in range(dot_count):
            angle = 2 * math.pi * i / dot_count
            x = int(center + math.cos(angle) * radius)
            y = int(center + math.sin(angle) * radius)
            alpha = int(255 * (0.3 + 0.7 * (i / dot_count)))
            pygame.draw.circle(self.base, (*color, alpha), (x, y), 5)
        self.angle = 0.0

    def update(self, dt: float):
        self.angle = (self.angle + 270 * dt) % 360

    def render(self) -> pygame.Surface:
        return pygame.transform.rotozoom(self.base, -self.angle, 1.0)


class LoadingOverlay:
    """Draws the loading screen described by a LoadingView."""

    def __init__(self, view: LoadingView, size=(Display.WIDTH, Display.HEIGHT), asset_root="."):
        self.view = view
        self.width, self.height = size
        self.asset_root = asset_root

        self.title_font = pygame.font.Font(None, 64)
        self.body_font = pygame.font.Font(None, 30)
        self.small_font = pygame.font.Font(None, 24)

        self.spinner = Spinner()
        self._canvas = pygame.Surface(size, pygame.SRCALPHA)
        self._images = {}

    # ===========================================================
    # Assets
    # ===========================================================

    def _image(self, ref) -> pygame.Surface:
        """Image for a background reference, cached; flat fallback when missing."""
        if isinstance(ref, pygame.Surface):
            return ref

        if ref not in self._images:
            path = os.path.join(self.asset_root, str(ref))
            try:
                image = pygame.image.load(path).convert()
                image = pygame.transform.smoothscale(image, (self.width, self.height))
                DebugLogger.system(f"Loaded background: {path}", category="render")
            except (pygame.error, FileNotFoundError) as e:
                image = pygame.Surface((self.width, self.height))
                shade = 30 + (hash(str(ref)) % 40)
                image.fill((shade // 2, shade // 2, shade))
                DebugLogger.warn(f"Failed to load {path}: {e}, using fallback", category="render")
            self._images[ref] = image
        return self._images[ref]

    # ===========================================================
    # Update / Draw
    # ===========================================================

    def update(self, dt: float):
        if self.view.spinner_visible:
            self.spinner.update(dt)

    def draw(self, surface: pygame.Surface):
        screen_alpha = self.view.alpha("screen")
        if screen_alpha <= 0:
            return

        canvas = self._canvas
        canvas.fill((*Display.BACKGROUND_COLOR, 255))

        if self.view.background_image is not None:
            image = self._image(self.view.background_image).copy()
            image.set_alpha(int(255 * self.view.alpha("background")))
            canvas.blit(image, (0, 0))

        scrim = pygame.Surface((self.width, self.height // 3), pygame.SRCALPHA)
        scrim.fill((0, 0, 0, 150))
        canvas.blit(scrim, (0, self.height - scrim.get_height()))

        self._draw_texts(canvas)
        self._draw_bars(canvas)

        if self.view.spinner_visible:
            spin = self.spinner.render()
            canvas.blit(spin, spin.get_rect(center=(self.width - 70, self.height - 70)))

        canvas.set_alpha(int(255 * screen_alpha))
        surface.blit(canvas, (0, 0))

    def _text(self, canvas, font, text, pos, alpha=1.0, anchor="topleft"):
        if not text or alpha <= 0:
            return
        rendered = font.render(text, True, Display.TEXT_COLOR)
        rendered.set_alpha(int(255 * alpha))
        rect = rendered.get_rect(**{anchor: pos})
        canvas.blit(rendered, rect)

    def _draw_texts(self, canvas):
        texts = self.view.texts
        base_y = self.height - self.height // 3 + 24

        self._text(canvas, self.title_font, texts["title"], (48, base_y))
        self._text(canvas, self.body_font, texts["description"], (50, base_y + 60))
        self._text(canvas, self.small_font, texts["hint"], (50, base_y + 110),
                   alpha=self.view.alpha("hint"))

        prompt_alpha = self.view.alpha("continue")
        if prompt_alpha > 0:
            prompt = f"Press any key to continue ({texts['countdown']})"
            self._text(canvas, self.body_font, prompt,
                       (self.width // 2, self.height // 2), alpha=prompt_alpha, anchor="center")

    def _draw_bars(self, canvas):
        bar = pygame.Rect(50, self.height - 40, self.width - 200, 10)
        pygame.draw.rect(canvas, (60, 70, 90), bar)
        filled = bar.copy()
        filled.width = int(bar.width * self.view.progress)
        pygame.draw.rect(canvas, Display.ACCENT_COLOR, filled)
        self._text(canvas, self.small_font, self.view.texts["status"],
                   (bar.right + 12, bar.centery), anchor="midleft")

        prompt_alpha = self.view.alpha("continue")
        if prompt_alpha > 0 and self.view.countdown_max > 0:
            track = pygame.Rect(0, 0, 300, 6)
            track.center = (self.width // 2, self.height // 2 + 30)
            pygame.draw.rect(canvas, (60, 70, 90), track)
            left = track.copy()
            left.width = int(track.width * self.view.countdown / self.view.countdown_max)
            pygame.draw.rect(canvas, Display.ACCENT_COLOR, left)
