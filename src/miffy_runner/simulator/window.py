"""
Pygame window for playing Miffy Runner on a desktop.

Keyboard Mapping:
    SPACE / UP: Tap (start, jump, restart)
    DOWN: Speed drop while jumping, duck otherwise
    1-4: Spring, summer, autumn, winter
    + / -: Speed multiplier up / down
    ESC / Q: Quit
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pygame

from miffy_runner.config.settings import SEASONS, Settings
from miffy_runner.progress.achievements import Achievement
from miffy_runner.simulation.run import RunController
from miffy_runner.simulator.framebuffer import FrameRenderer

logger = logging.getLogger(__name__)

SEASON_KEYS = {
    pygame.K_1: SEASONS[0],
    pygame.K_2: SEASONS[1],
    pygame.K_3: SEASONS[2],
    pygame.K_4: SEASONS[3],
}

MULTIPLIER_STEP = 0.1
TOAST_MS = 2500


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    title: str = "Miffy Runner Simulator"
    scale: int = 2
    fps: int = 60

    text_color: tuple[int, int, int] = (60, 60, 80)
    accent_color: tuple[int, int, int] = (230, 70, 90)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowConfig":
        sim = settings.simulator
        return cls(title=sim.title, scale=max(1, sim.scale), fps=max(1, sim.fps))


class SimulatorWindow:
    """
    Drives a RunController from pygame input and draws its snapshot.

    Each frame handles input, ticks the simulation, then renders, so the
    renderer never sees a half-updated tick.
    """

    def __init__(self, controller: RunController, config: Optional[WindowConfig] = None):
        self.controller = controller
        self.config = config or WindowConfig.from_settings(controller.settings)

        view = controller.settings.view
        self.renderer = FrameRenderer(view.width, view.height, view.ground_y)
        self._size = (view.width * self.config.scale, view.height * self.config.scale)

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._running = False
        self._frame_count = 0

        self._toast: Optional[Achievement] = None
        self._toast_until = 0

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode(self._size, pygame.DOUBLEBUF)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.Font(None, 14 * self.config.scale)

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

            elif event.type == pygame.KEYUP:
                self._handle_keyup(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key
        controller = self.controller

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key in (pygame.K_SPACE, pygame.K_UP):
            controller.request_tap()
        elif key == pygame.K_DOWN:
            if controller.player.jumping:
                controller.request_speed_drop()
            else:
                controller.request_duck_start()
        elif key in SEASON_KEYS:
            controller.set_season(SEASON_KEYS[key])
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            controller.set_speed_multiplier(controller.difficulty.speed_multiplier + MULTIPLIER_STEP)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            controller.set_speed_multiplier(controller.difficulty.speed_multiplier - MULTIPLIER_STEP)

    def _handle_keyup(self, event: pygame.event.Event) -> None:
        """Handle key release."""
        if event.key == pygame.K_DOWN:
            self.controller.request_duck_end()

    def _render(self) -> None:
        """Render the playfield and HUD."""
        if not self._screen:
            return

        snapshot = self.controller.snapshot()
        buffer = self.renderer.render(snapshot)

        surface = pygame.surfarray.make_surface(np.ascontiguousarray(buffer.swapaxes(0, 1)))
        if self.config.scale != 1:
            surface = pygame.transform.scale(surface, self._size)
        self._screen.blit(surface, (0, 0))

        self._render_hud(snapshot)
        self._render_toast()
        pygame.display.flip()

    def _render_hud(self, snapshot: dict) -> None:
        if not self._font:
            return

        score = f"HI {snapshot['high_score']:05d}  {snapshot['score']:05d}"
        text = self._font.render(score, True, self.config.text_color)
        self._screen.blit(text, (self._size[0] - text.get_width() - 10, 8))

        counters = (
            f"hearts {snapshot['hearts_collected']}  cakes {snapshot['cakes_collected']}"
            f"  x{snapshot['speed_multiplier']:.1f}  {snapshot['season']}"
        )
        text = self._font.render(counters, True, self.config.text_color)
        self._screen.blit(text, (10, 8))

        phase = snapshot["phase"]
        if phase != "playing":
            message = "PRESS SPACE TO START" if phase == "idle" else "GAME OVER - SPACE TO RESTART"
            text = self._font.render(message, True, self.config.accent_color)
            rect = text.get_rect(center=(self._size[0] // 2, self._size[1] // 3))
            self._screen.blit(text, rect)

    def _render_toast(self) -> None:
        """Show each unlocked achievement in turn, one at a time."""
        if not self._font:
            return

        now = pygame.time.get_ticks()
        if self._toast is None or now >= self._toast_until:
            self._toast = self.controller.get_next_notification()
            self._toast_until = now + TOAST_MS
        if self._toast is None:
            return

        message = f"{self._toast.icon} {self._toast.name}"
        text = self._font.render(message, True, self.config.accent_color)
        rect = text.get_rect(center=(self._size[0] // 2, self._size[1] - 20 * self.config.scale))
        self._screen.blit(text, rect)

    def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        while self._running:
            self._handle_events()
            self.controller.tick()
            self._render()

            if self._clock:
                self._clock.tick(self.config.fps)
            self._frame_count += 1

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
