"""
Human Play Mode
===============

Play Deploy the Snacks interactively. The window is a Presenter for
CoreGame: it draws every snapshot and plays short synthesized cues.

Controls:
    - Click: Tap a crow, or drop a snack
    - Space: Drop a snack
    - P / ESC: Pause / resume (ESC on the menu quits)
    - Enter: Start from the menu or after game over
    - R: Restart
    - Q: Back to the menu

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--mute]
"""

from __future__ import annotations

import argparse
import logging
import math
import os
import sys
import time
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from deploy_snacks.snack_core.config_loader import GameConfig, load_config
from deploy_snacks.snack_core.game import CoreGame
from deploy_snacks.snack_core.highscore import JsonHighScoreStore
from deploy_snacks.snack_core.session import GameState
from deploy_snacks.snack_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050

DEFAULT_HIGHSCORE_PATH = os.path.join(os.path.expanduser("~"), ".deploy_snacks", "highscore.json")


# ----------------------------------------------------------------------
# Audio
# ----------------------------------------------------------------------

def _tone(
    freqs: Tuple[float, ...],
    duration: float,
    volume: float = 0.4,
    wave: str = "sine",
    sample_rate: int = SAMPLE_RATE
) -> np.ndarray:
    """Notes played back to back, each ``duration`` seconds, with a fade-out."""
    n = int(sample_rate * duration)
    t = np.arange(n) / sample_rate
    envelope = np.linspace(1.0, 0.0, n) ** 2

    parts = []
    for freq in freqs:
        phase = t * freq
        if wave == "square":
            samples = np.where(phase % 1.0 < 0.5, 1.0, -1.0)
        elif wave == "noise":
            samples = np.random.uniform(-1.0, 1.0, n)
        else:
            samples = np.sin(2 * np.pi * phase)
        parts.append(samples * envelope)

    mono = np.concatenate(parts) * volume * 32767
    return mono.astype(np.int16)


# Cue name -> (notes in Hz, seconds per note, volume, waveform)
CUE_TONES: Dict[str, Tuple[Tuple[float, ...], float, float, str]] = {
    "drop": ((520.0,), 0.06, 0.3, "square"),
    "success": ((660.0, 880.0), 0.08, 0.35, "sine"),
    "powerup": ((523.0, 659.0, 784.0, 1047.0), 0.07, 0.35, "square"),
    "powerup_end": ((784.0, 523.0), 0.08, 0.25, "sine"),
    "crow_spawn": ((300.0,), 0.25, 0.3, "noise"),
    "crow_hit": ((880.0, 1320.0), 0.05, 0.4, "square"),
    "crow_escape": ((220.0, 165.0), 0.15, 0.4, "square"),
    "health_lost": ((196.0,), 0.2, 0.4, "square"),
    "game_over": ((392.0, 330.0, 262.0), 0.18, 0.4, "sine"),
}

# Background loop, two bars of a simple arpeggio
MUSIC_NOTES = (262.0, 330.0, 392.0, 330.0, 294.0, 349.0, 440.0, 349.0)


class SoundBoard:
    """
    Synthesized sound cues on the pygame mixer.

    Any mixer failure is logged and the cue skipped; the game never sees it.
    """

    def __init__(self, enabled: bool = True):
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._music: Optional[pygame.mixer.Sound] = None
        self._music_channel: Optional[pygame.mixer.Channel] = None
        self._enabled = False

        if not enabled:
            return
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2)
            rate, _, channels = pygame.mixer.get_init()

            for name, (notes, length, volume, wave) in CUE_TONES.items():
                samples = _tone(notes, length, volume, wave, rate)
                self._sounds[name] = self._make_sound(samples, channels)
            self._music = self._make_sound(_tone(MUSIC_NOTES, 0.25, 0.12, "sine", rate), channels)
            self._enabled = True
            logger.info("Audio initialized with %d cues", len(self._sounds))
        except (pygame.error, ValueError) as e:
            logger.warning("Audio disabled: %s", e)

    @staticmethod
    def _make_sound(samples: np.ndarray, channels: int) -> pygame.mixer.Sound:
        # The mixer wants one column per output channel
        if channels > 1:
            samples = np.repeat(samples[:, np.newaxis], channels, axis=1)
        return pygame.sndarray.make_sound(np.ascontiguousarray(samples))

    def play(self, name: str) -> None:
        if not self._enabled:
            return
        try:
            if name == "music_start":
                if self._music is not None and self._music_channel is None:
                    self._music_channel = self._music.play(loops=-1)
                return
            if name == "music_stop":
                if self._music_channel is not None:
                    self._music_channel.stop()
                    self._music_channel = None
                return

            sound = self._sounds.get(name)
            if sound is None:
                logger.debug("No sound for cue %s", name)
                return
            sound.play()
        except pygame.error as e:
            logger.warning("Error playing sound %s: %s", name, e)


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------

class SnackRenderer:
    """Draws snapshots onto the pygame display."""

    def __init__(self, config: GameConfig, scale: float = 1.0):
        self._config = config
        self._scale = scale
        self._board_size = (config.board.width, config.board.height)

        # Colors
        self._sky_top = (135, 206, 235)
        self._sky_bottom = (224, 246, 255)
        self._platform_color = (44, 44, 44)
        self._platform_edge = (28, 28, 28)
        self._win_line_color = (255, 215, 0)
        self._text_dark = (51, 51, 51)
        self._heart_color = (255, 68, 68)
        self._crow_color = (20, 20, 20)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 64)
        self._font_large = pygame.font.Font(None, 36)
        self._font_medium = pygame.font.Font(None, 26)
        self._font_small = pygame.font.Font(None, 18)

        self._canvas = pygame.Surface(self._board_size)
        self._bg_surface = self._create_gradient_background()

    @property
    def window_size(self) -> Tuple[int, int]:
        w, h = self._board_size
        return int(w * self._scale), int(h * self._scale)

    def screen_to_board(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        return pos[0] / self._scale, pos[1] / self._scale

    def _create_gradient_background(self) -> pygame.Surface:
        width, height = self._board_size
        surface = pygame.Surface(self._board_size)
        for y in range(height):
            t = y / height
            color = tuple(
                int(top * (1 - t) + bottom * t)
                for top, bottom in zip(self._sky_top, self._sky_bottom)
            )
            pygame.draw.line(surface, color, (0, y), (width, y))
        return surface

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        canvas = self._canvas
        canvas.blit(self._bg_surface, (0, 0))

        self._draw_win_line(canvas, snapshot)
        self._draw_platform(canvas, snapshot)
        for piece in snapshot.tower:
            shake_x = 0.0
            if piece.shake > 0:
                shake_x = math.sin(snapshot.clock * 60.0) * piece.shake
            self._draw_item(
                canvas, piece.type_name, piece.color,
                piece.x + shake_x, piece.y, piece.width, piece.height
            )
        for food in snapshot.food_items:
            self._draw_item(
                canvas, food.type_name, food.color,
                food.x + food.wobble_offset, food.y, food.width, food.height,
                glow=food.is_power_up
            )
        self._draw_particles(canvas, snapshot)
        if snapshot.crow is not None:
            self._draw_crow(canvas, snapshot)
        if snapshot.state is not GameState.MENU:
            self._draw_drop_line(canvas, snapshot)
            self._draw_hud(canvas, snapshot)

        if snapshot.state is GameState.MENU:
            self._draw_overlay(canvas, "Deploy the Snacks", [
                f"High score: {snapshot.high_score}",
                "Enter to play, ESC to quit",
                "Click to drop snacks, tap crows before they escape",
            ])
        elif snapshot.state is GameState.PAUSED:
            self._draw_overlay(canvas, "Paused", ["P to resume, R to restart, Q for menu"])
        elif snapshot.state is GameState.GAME_OVER:
            title = "Tower Complete!" if snapshot.is_win else "Game Over"
            lines = [
                f"Score: {snapshot.score}",
                f"High score: {snapshot.high_score}",
                f"Health lost: {snapshot.max_health - snapshot.health}",
                "Enter to play again, Q for menu",
            ]
            self._draw_overlay(canvas, title, lines)

        if self._scale == 1.0:
            screen.blit(canvas, (0, 0))
        else:
            screen.blit(pygame.transform.smoothscale(canvas, self.window_size), (0, 0))

    def _draw_win_line(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        y = int(snapshot.win_line_y)
        for x in range(0, int(snapshot.board_width), 20):
            pygame.draw.line(canvas, self._win_line_color, (x, y), (x + 10, y), 2)

    def _draw_platform(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        rect = pygame.Rect(
            int(snapshot.platform_left), int(snapshot.platform_y),
            int(snapshot.platform_right - snapshot.platform_left),
            int(snapshot.board_height - snapshot.platform_y)
        )
        pygame.draw.rect(canvas, self._platform_color, rect)
        pygame.draw.rect(canvas, self._platform_edge, rect, 3)

    def _draw_item(
        self,
        canvas: pygame.Surface,
        name: str,
        color: Tuple[int, int, int],
        x: float,
        y: float,
        width: float,
        height: float,
        glow: bool = False
    ) -> None:
        rect = pygame.Rect(0, 0, int(width), int(height))
        rect.center = (int(x), int(y))
        if glow:
            pygame.draw.rect(canvas, (255, 255, 200), rect.inflate(8, 8), border_radius=8)
        pygame.draw.rect(canvas, color, rect, border_radius=6)
        pygame.draw.rect(canvas, (0, 0, 0), rect, 1, border_radius=6)
        label = self._font_small.render(name[:1].upper(), True, (255, 255, 255))
        canvas.blit(label, label.get_rect(center=rect.center))

    def _draw_particles(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        for p in snapshot.particles:
            radius = max(1, int(p.size * p.alpha))
            pygame.draw.circle(canvas, p.color, (int(p.x), int(p.y)), radius)

    def _draw_crow(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        crow = snapshot.crow
        cx, cy = int(crow.x), int(crow.y)
        flap = math.sin(crow.wing_time) * crow.radius * 0.4
        wing_span = int(crow.radius)
        pygame.draw.lines(canvas, self._crow_color, False, [
            (cx - wing_span, cy - int(flap)), (cx, cy), (cx + wing_span, cy - int(flap))
        ], 4)
        pygame.draw.circle(canvas, self._crow_color, (cx, cy), int(crow.radius * 0.4))

        # Timer ring
        fraction = max(0.0, crow.timer) / self._config.crow.timer
        ring = pygame.Rect(0, 0, int(crow.radius * 2), int(crow.radius * 2))
        ring.center = (cx, cy)
        pygame.draw.arc(canvas, self._heart_color, ring, 0, 2 * math.pi * fraction, 3)

    def _draw_drop_line(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        line = snapshot.drop_line
        color = self._win_line_color if snapshot.power_up.active else self._text_dark
        half = line.width / 2
        pygame.draw.line(
            canvas, color, (int(line.x - half), int(line.y)), (int(line.x + half), int(line.y)), 4
        )
        pygame.draw.circle(canvas, color, (int(line.x), int(line.y)), 5)

    def _draw_hud(self, canvas: pygame.Surface, snapshot: GameSnapshot) -> None:
        score = self._font_large.render(f"Score: {snapshot.score}", True, self._text_dark)
        canvas.blit(score, (12, 10))
        best = self._font_small.render(f"Best: {snapshot.high_score}", True, self._text_dark)
        canvas.blit(best, (12, 40))

        for i in range(snapshot.max_health):
            color = self._heart_color if i < snapshot.health else (180, 180, 180)
            center = (int(snapshot.board_width) - 24 - i * 28, 24)
            pygame.draw.circle(canvas, color, center, 10)

        bar_width = 200
        bar_x = int(snapshot.board_width / 2 - bar_width / 2)
        bar_y = int(snapshot.board_height - 12)
        if snapshot.power_up.active:
            progress = snapshot.power_up.progress
            fill = self._win_line_color if progress > 0.5 else (255, 107, 107)
            self._draw_bar(canvas, bar_x, bar_y, bar_width, progress, fill)
            text = f"RAPID FIRE {math.ceil(snapshot.power_up.remaining)}s"
            label = self._font_medium.render(text, True, self._text_dark)
            canvas.blit(label, label.get_rect(center=(bar_x + bar_width // 2, bar_y - 14)))
        elif snapshot.drop_cooldown_remaining > 0:
            progress = 1.0 - snapshot.drop_cooldown_remaining / snapshot.drop_cooldown
            fill = (78, 205, 196) if progress > 0.8 else (255, 107, 107)
            self._draw_bar(canvas, bar_x, bar_y, bar_width, progress, fill)

    def _draw_bar(
        self,
        canvas: pygame.Surface,
        x: int,
        y: int,
        width: int,
        progress: float,
        color: Tuple[int, int, int]
    ) -> None:
        pygame.draw.rect(canvas, (90, 90, 90), (x, y, width, 8))
        pygame.draw.rect(canvas, color, (x, y, int(width * max(0.0, min(1.0, progress))), 8))

    def _draw_overlay(self, canvas: pygame.Surface, title: str, lines) -> None:
        shade = pygame.Surface(self._board_size, pygame.SRCALPHA)
        shade.fill((0, 0, 0, 140))
        canvas.blit(shade, (0, 0))

        cx = self._board_size[0] // 2
        cy = self._board_size[1] // 2
        heading = self._font_huge.render(title, True, (255, 255, 255))
        canvas.blit(heading, heading.get_rect(center=(cx, cy - 60)))
        for i, line in enumerate(lines):
            text = self._font_medium.render(line, True, (255, 255, 255))
            canvas.blit(text, text.get_rect(center=(cx, cy + i * 30)))


class PygamePresenter:
    """Presenter that draws to the display and plays cues on the mixer."""

    def __init__(self, renderer: SnackRenderer, screen: pygame.Surface, sounds: SoundBoard):
        self._renderer = renderer
        self._screen = screen
        self._sounds = sounds

    def render(self, snapshot: GameSnapshot) -> None:
        try:
            self._renderer.draw(self._screen, snapshot)
            pygame.display.flip()
        except pygame.error as e:
            logger.warning("Render failed: %s", e)

    def play_cue(self, name: str) -> None:
        self._sounds.play(name)


# ----------------------------------------------------------------------
# Main loop
# ----------------------------------------------------------------------

class HumanPlayer:
    """Interactive game session."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        scale: float = 1.0,
        target_fps: int = 60,
        mute: bool = False,
        highscore_path: str = DEFAULT_HIGHSCORE_PATH
    ):
        pygame.init()
        self._renderer = SnackRenderer(config, scale)
        self._screen = pygame.display.set_mode(self._renderer.window_size)
        pygame.display.set_caption("Deploy the Snacks")
        self._clock = pygame.time.Clock()
        self._target_fps = target_fps
        self._running = True

        presenter = PygamePresenter(self._renderer, self._screen, SoundBoard(enabled=not mute))
        self._game = CoreGame(
            config=config,
            seed=seed,
            presenter=presenter,
            high_score_store=JsonHighScoreStore(highscore_path)
        )

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        while self._running:
            now = time.monotonic()
            self._handle_events(now)
            self._game.tick(now)
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.score

    def _handle_events(self, now: float) -> None:
        game = self._game
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key, now)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if game.state is GameState.PLAYING:
                    x, y = self._renderer.screen_to_board(event.pos)
                    game.handle_press(x, y, now)

    def _handle_key(self, key: int, now: float) -> None:
        game = self._game
        state = game.state

        if key == pygame.K_ESCAPE and state is GameState.MENU:
            self._running = False
        elif key in (pygame.K_ESCAPE, pygame.K_p):
            if state is GameState.PLAYING:
                game.pause()
            elif state is GameState.PAUSED:
                game.resume(at_time=now)
        elif key == pygame.K_SPACE and state is GameState.PLAYING:
            # Same as a press at the board centre
            config = game.config
            game.handle_press(config.board.width / 2, config.board.height / 2, now)
        elif key == pygame.K_RETURN and state in (GameState.MENU, GameState.GAME_OVER):
            game.start(at_time=now)
        elif key == pygame.K_r and state is not GameState.MENU:
            game.restart(at_time=now)
        elif key == pygame.K_q and state is not GameState.MENU:
            game.quit()


def main():
    parser = argparse.ArgumentParser(description="Play Deploy the Snacks interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scale (default: 1.0)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--highscore", type=str, default=DEFAULT_HIGHSCORE_PATH,
                        help="High score file")
    parser.add_argument("--mute", action="store_true", help="Disable sound")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load config: %s", e)
        return 1

    player = HumanPlayer(
        config=config,
        seed=args.seed,
        scale=args.scale,
        target_fps=args.fps,
        mute=args.mute,
        highscore_path=args.highscore
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
