"""
demo.py
-------
Pygame driver that cycles through the packaged scenes behind the loading screen.

Responsibilities:
- Initialize pygame and the loading-screen services
- Feed unscaled frame time and "any input" to the state machine every frame
- Stand in for the game: show the activated scene, press SPACE for the next one
"""

import sys

import pygame

from loadscreen.core.debug.debug_logger import DebugLogger
from loadscreen.core.runtime.loading_settings import Display
from loadscreen.core.services.config_manager import DATA_ROOT
from loadscreen.core.services.event_manager import LoadingEndedEvent, get_events
from loadscreen.loading.config import load_loading_config
from loadscreen.loading.load_source import SimulatedLoadSource
from loadscreen.loading.scene_info import SceneInfoLoader
from loadscreen.loading.state_machine import init_loading_screen
from loadscreen.loading.view import LoadingView
from loadscreen.render.overlay import LoadingOverlay

INPUT_EVENTS = (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN, pygame.JOYBUTTONDOWN)


class DemoLoop:
    """Main loop hosting a fake game and its loading screen."""

    def __init__(self, minimum_wait=2, image_change_speed=6):
        DebugLogger.section("Initializing Demo")

        pygame.init()
        pygame.display.set_caption(Display.CAPTION)
        self.surface = pygame.display.set_mode((Display.WIDTH, Display.HEIGHT))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 48)
        DebugLogger.init_entry("Pygame")

        self.scenes = SceneInfoLoader().load_all()
        if not self.scenes:
            raise FileNotFoundError("No scene descriptions found")
        self.scene_index = 0
        self.current_scene = "Main Menu"
        self.minimum_wait = minimum_wait
        self.image_change_speed = image_change_speed
        DebugLogger.init_sub(f"{len(self.scenes)} scene(s) available")

        config = load_loading_config()
        events = get_events()
        self.view = LoadingView(config.screen_fade_time, config.content_fade_time)
        self.view.attach(events)
        self.overlay = LoadingOverlay(self.view, asset_root=DATA_ROOT)

        self.source = SimulatedLoadSource(
            default_duration=4.0,
            known_targets=[scene.scene_name for scene in self.scenes],
            on_activated=self._on_scene_activated,
        )
        self.loading_screen = init_loading_screen(
            self.source, events=events, config=config, visibility=self.view.visibility
        )
        events.subscribe(LoadingEndedEvent, self._on_loading_ended)
        DebugLogger.init_entry("Loading Screen")

        self.running = True

    # ===========================================================
    # Callbacks
    # ===========================================================

    def _on_scene_activated(self, target_id: str):
        self.current_scene = target_id

    def _on_loading_ended(self, event):
        DebugLogger.action(f"Now playing '{self.current_scene}'")

    def load_next_scene(self):
        scene = self.scenes[self.scene_index % len(self.scenes)]
        self.scene_index += 1
        self.loading_screen.request_load(
            scene.to_session(self.minimum_wait, self.image_change_speed)
        )

    # ===========================================================
    # Main Loop
    # ===========================================================

    def run(self):
        DebugLogger.section("Demo Loop")
        while self.running:
            # Raw wall time; unaffected by any game time scale
            dt = self.clock.tick(Display.FPS) / 1000.0
            any_input = self._poll_events()

            self.source.update(dt)
            self.loading_screen.advance(dt, any_input)
            self.view.update(dt)
            self.overlay.update(dt)

            self._draw()

        pygame.quit()

    def _poll_events(self) -> bool:
        any_input = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type in INPUT_EVENTS:
                any_input = True
                if (event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE
                        and not self.loading_screen.is_active):
                    self.load_next_scene()
                    any_input = False
        return any_input

    def _draw(self):
        self.surface.fill((20, 24, 32))
        label = self.font.render(
            f"{self.current_scene}  (SPACE: next scene)", True, Display.TEXT_COLOR
        )
        self.surface.blit(label, label.get_rect(center=(Display.WIDTH // 2, Display.HEIGHT // 2)))
        self.overlay.draw(self.surface)
        pygame.display.flip()


def main():
    DemoLoop().run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
