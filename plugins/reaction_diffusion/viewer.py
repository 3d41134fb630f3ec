"""
Interactive Pygame Viewer for the Drifting Gray-Scott Simulation

Drives RDSimulator one frame per display refresh and feeds it normalized
pointer events. Window y grows downward, grid y grows upward;
normalize_pointer() inverts it.

Controls:
  SPACE       Pause / Resume
  R           Reset (re-seed, tick back to 0)
  C           Cycle palette
  B           Toggle bloom
  H           Toggle HUD overlay
  S           Save screenshot
  Q / ESC     Quit
  Mouse L     Paint pattern (brush)
"""

import os
import time
import numpy as np
import pygame

from .brush import normalize_pointer
from .colormaps import COLORMAP_ORDER
from .presets import get_preset
from .render import Renderer
from .simulator import RDSimulator


HUD_BG = (0, 0, 0, 140)
HUD_FG = (210, 215, 225)


class Viewer:
    """Pygame window around one RDSimulator."""

    def __init__(self, width=800, height=800, preset="drift", **overrides):
        self.canvas_w = width
        self.canvas_h = height
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []

        self.preset_key = preset
        self.sim = RDSimulator(preset, **overrides)
        self.renderer = Renderer()
        self.hud_font = None

    def _render_frame(self):
        rgb = self.renderer.render(self.sim.snapshot())
        return pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.sim.stats
        preset = get_preset(self.preset_key)
        line = (f"{preset['name']}  |  Tick: {stats['tick']:,}  |  "
                f"F {stats['feed']:.4f}  k {stats['kill']:.4f}  "
                f"dA {stats['dA']:.3f}  |  B: {stats['active_pct']:.1f}%  |  "
                f"{self.sim.width}x{self.sim.height}  |  FPS: {fps:.0f}")
        if self.paused:
            line = "[PAUSED]  " + line

        padding = 6
        bg_height = 24
        bg_surface = pygame.Surface((self.canvas_w, bg_height), pygame.SRCALPHA)
        bg_surface.fill(HUD_BG)
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, HUD_FG)
        screen.blit(text_surface, (padding + 4, padding))

    def _pointer(self, pos):
        return normalize_pointer(pos[0], pos[1], self.canvas_w, self.canvas_h)

    def handle_event(self, event):
        """Translate one pygame event into simulator input."""
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self._handle_keydown(event)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.sim.press(self._pointer(event.pos))
        elif event.type == pygame.MOUSEMOTION:
            self.sim.move(self._pointer(event.pos))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.sim.release_pointer()
        elif event.type == pygame.WINDOWLEAVE:
            self.sim.leave()
        elif event.type == pygame.VIDEORESIZE:
            self.canvas_w, self.canvas_h = event.w, event.h

    def _save_screenshot(self):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"rd_{self.preset_key}_{timestamp}.png")
        pygame.image.save(self._render_frame(), path)
        print(f"[RD] Screenshot saved: {path}")

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_r:
            self.sim.reset()
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud
        elif key == pygame.K_b:
            self.renderer.bloom = 0.0 if self.renderer.bloom > 0 else 0.4
        elif key == pygame.K_c:
            idx = COLORMAP_ORDER.index(self.renderer.palette)
            self.renderer.set_palette(COLORMAP_ORDER[(idx + 1) % len(COLORMAP_ORDER)])
        elif key == pygame.K_s:
            self._save_screenshot()

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h), pygame.RESIZABLE)
        pygame.display.set_caption("Reaction-Diffusion Drift")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        try:
            while self.running:
                frame_start = time.time()

                for event in pygame.event.get():
                    self.handle_event(event)

                if not self.paused:
                    self.sim.frame()

                sim_surface = self._render_frame()
                scaled = pygame.transform.smoothscale(sim_surface, (self.canvas_w, self.canvas_h))
                screen.blit(scaled, (0, 0))

                frame_time = time.time() - frame_start
                self.fps_history.append(frame_time)
                if len(self.fps_history) > 30:
                    self.fps_history.pop(0)
                avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

                self._draw_hud(screen, avg_fps)

                pygame.display.flip()
                clock.tick(60)
        finally:
            self.sim.release()
            pygame.quit()
