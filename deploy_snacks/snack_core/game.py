"""
Core Game
=========

Main game orchestrator: the state machine, the input commands and the
per-frame tick that runs spawning, physics, particles, the crow and the
end-of-session checks against one owned GameSession.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.entities import FoodItem, TowerPiece
from deploy_snacks.snack_core.events import GameEvent, NullPresenter, Presenter
from deploy_snacks.snack_core.highscore import HighScoreStore, MemoryHighScoreStore
from deploy_snacks.snack_core.difficulty import DifficultyController
from deploy_snacks.snack_core.particles import KIND_POWERUP, KIND_SUCCESS, ParticleSystem
from deploy_snacks.snack_core.physics_world import LandingResult, PhysicsWorld
from deploy_snacks.snack_core.rng import GameRng
from deploy_snacks.snack_core.rules import TerminationResult, TerminationRules
from deploy_snacks.snack_core.scoring import ScoreTracker
from deploy_snacks.snack_core.session import GameSession, GameState
from deploy_snacks.snack_core.spawner import CrowController, Spawner
from deploy_snacks.snack_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Drop requests and the drop line (Spawner)
    - Falling food and landings (PhysicsWorld)
    - Score and health (ScoreTracker)
    - The crow threat (CrowController)
    - Particle bursts (ParticleSystem)
    - Difficulty ramp (DifficultyController)
    - Win/loss checks (TerminationRules)
    - Snapshots for the presenter

    States: menu -> playing -> {paused <-> playing, gameOver};
    gameOver -> menu (quit) or playing (start/restart).
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        presenter: Optional[Presenter] = None,
        high_score_store: Optional[HighScoreStore] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            presenter: Render/audio collaborator. Headless if None.
            high_score_store: Persistence collaborator. In-memory if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._presenter: Presenter = presenter if presenter is not None else NullPresenter()
        self._store: HighScoreStore = (
            high_score_store if high_score_store is not None else MemoryHighScoreStore()
        )

        # Initialize subsystems
        self._rng = GameRng(config, seed)
        self._physics = PhysicsWorld(config)
        self._scorer = ScoreTracker(config)
        self._spawner = Spawner(self._rng, config)
        self._crows = CrowController(self._rng, config)
        self._difficulty = DifficultyController(config)
        self._particles = ParticleSystem(self._rng, config)
        self._rules = TerminationRules(config)
        self._snapshot_builder = SnapshotBuilder(config)

        self._session = GameSession.create(config, high_score=self._store.load())
        self._last_time: Optional[float] = None
        self._pending_events: List[str] = []
        self._termination = TerminationResult.none()

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def session(self) -> GameSession:
        """The owned session (mutable; prefer snapshot() for reading)."""
        return self._session

    @property
    def state(self) -> GameState:
        return self._session.state

    @property
    def score(self) -> int:
        """Current score."""
        return self._session.score

    @property
    def health(self) -> int:
        return self._session.health

    @property
    def high_score(self) -> int:
        return self._session.high_score

    @property
    def is_over(self) -> bool:
        """True if the session has ended."""
        return self._session.is_over

    @property
    def is_win(self) -> bool:
        return self._session.is_win

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination.reason

    @property
    def physics(self) -> PhysicsWorld:
        return self._physics

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def crows(self) -> CrowController:
        return self._crows

    @property
    def particles(self) -> ParticleSystem:
        return self._particles

    @property
    def rules(self) -> TerminationRules:
        return self._rules

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def start(self, at_time: Optional[float] = None, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a new game from any state.

        Args:
            at_time: Current time; becomes the delta-time baseline.
            seed: New random seed. Keeps the current stream if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._rng.reset(seed)

        self._session.reset()
        self._session.state = GameState.PLAYING
        self._termination = TerminationResult.none()
        self._rebaseline(at_time)

        self._emit(GameEvent.MUSIC_START)
        logger.info("Game started")
        return self.snapshot()

    def restart(self, at_time: Optional[float] = None, seed: Optional[int] = None) -> GameSnapshot:
        """Same as start()."""
        logger.info("Restarting game")
        return self.start(at_time=at_time, seed=seed)

    def pause(self) -> bool:
        """Freeze the simulation. Only valid while playing."""
        if self._session.state is not GameState.PLAYING:
            return False
        self._session.state = GameState.PAUSED
        self._emit(GameEvent.MUSIC_STOP)
        logger.info("Game paused")
        return True

    def resume(self, at_time: Optional[float] = None) -> bool:
        """Unfreeze the simulation, re-baselining the delta-time clock."""
        if self._session.state is not GameState.PAUSED:
            return False
        self._session.state = GameState.PLAYING
        self._rebaseline(at_time)
        self._emit(GameEvent.MUSIC_START)
        logger.info("Game resumed")
        return True

    def quit(self) -> None:
        """Return to the menu from any state."""
        self._session.state = GameState.MENU
        self._emit(GameEvent.MUSIC_STOP)
        logger.info("Returned to main menu")

    def _rebaseline(self, at_time: Optional[float]) -> None:
        self._last_time = at_time
        if at_time is not None:
            self._session.clock = at_time

    # ------------------------------------------------------------------
    # Input commands
    # ------------------------------------------------------------------

    def request_drop(self, at_time: float) -> Optional[FoodItem]:
        """
        Drop an item under the drop line.

        Silently ignored during cooldown, while another item is falling
        (both lifted by rapid fire), or outside the playing state.

        Returns:
            The new FoodItem, or None if the request was ignored.
        """
        food = self._spawner.request_drop(self._session, at_time)
        if food is not None:
            self._emit(GameEvent.DROP)
        return food

    def tap_at(self, x: float, y: float, at_time: float) -> bool:
        """
        Tap the play area; a hit on the active crow removes it and
        restores one health.

        Returns:
            True if the crow was hit.
        """
        if not self._crows.tap(self._session, x, y, at_time):
            return False
        self._on_crow_hit()
        return True

    def handle_press(self, x: float, y: float, at_time: float) -> bool:
        """
        Click/touch/space semantics: hit the crow if the press is on it,
        otherwise request a drop. Presses inside the tap debounce window
        are ignored entirely.

        Returns:
            True if the press hit the crow or dropped an item.
        """
        if not self._crows.accept_tap(self._session, at_time):
            return False
        if self._crows.hit(self._session, x, y):
            self._on_crow_hit()
            return True
        return self.request_drop(at_time) is not None

    def _on_crow_hit(self) -> None:
        self._scorer.gain_health(self._session)
        self._emit(GameEvent.CROW_HIT)
        logger.debug("Crow hit! Health: %d", self._session.health)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def tick(self, now: float) -> GameSnapshot:
        """
        Advance one frame to time ``now`` and hand the result to the presenter.

        The simulation only moves while playing; the clock is tracked in
        every state so resuming never produces a large jump.

        Args:
            now: Current time in seconds (any monotonic origin).

        Returns:
            Snapshot after the frame.
        """
        dt = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now
        self._session.clock = now

        if self._session.is_playing:
            self.step(dt)

        snapshot = self.snapshot()
        self._presenter.render(snapshot)
        return snapshot

    def step(self, dt: float) -> None:
        """
        Run one simulation step of (clamped) ``dt`` seconds.

        Does nothing outside the playing state. Stops early as soon as the
        session ends.
        """
        session = self._session
        if not session.is_playing:
            return

        dt = self._physics.clamp_dt(dt)

        self._spawner.update_drop_line(session, dt)

        # Count down before landings; a pickup this frame starts at the full duration
        if session.power_up.update(dt):
            self._emit(GameEvent.POWER_UP_END)
            logger.debug("Rapid fire deactivated")

        physics_result = self._physics.step(session, dt, on_landing=self._resolve_landing)
        for _ in physics_result.lost:
            self._lose_health()
            if session.is_over:
                return

        self._particles.update(session, dt)
        for piece in session.tower:
            piece.update_shake(dt)

        crow_update = self._crows.update(session, dt)
        if crow_update.escaped:
            self._emit(GameEvent.CROW_ESCAPE)
            self._lose_health()
            if session.is_over:
                return
        elif crow_update.left_area:
            logger.debug("Crow flew off the board")

        self._termination = self._rules.check_termination(session)
        if self._termination.terminated:
            self._game_over(self._termination)
            return

        self._difficulty.update(session)

        if self._crows.maybe_spawn(session) is not None:
            self._emit(GameEvent.CROW_SPAWN)

    def _resolve_landing(self, landing: LandingResult) -> None:
        """Turn one landing into points and either a tower piece or rapid fire."""
        session = self._session
        food = landing.food
        origin = (food.x, food.y)

        if food.is_power_up:
            session.power_up.activate()
            self._particles.emit(session, KIND_POWERUP, origin)
            event = self._scorer.apply_landing(session, food)
            self._emit(GameEvent.POWER_UP)
            logger.debug(
                "%r on %s, rapid fire for %.1fs",
                event, landing.surface, session.power_up.duration
            )
            return

        session.tower.append(TowerPiece.from_food(
            food,
            wobble_offset=self._rng.uniform(0.0, 2 * math.pi),
            wobble_speed=self._rng.uniform(0.5, 1.0)
        ))
        self._particles.emit(session, KIND_SUCCESS, origin, food.color)
        event = self._scorer.apply_landing(session, food)
        self._emit(GameEvent.SUCCESS)
        logger.debug("%r on %s, score %d", event, landing.surface, session.score)

    def _lose_health(self) -> None:
        if self._scorer.lose_health(self._session) == 0:
            return
        self._emit(GameEvent.HEALTH_LOST)

        result = self._rules.check_health(self._session)
        if result.terminated:
            self._termination = result
            self._game_over(result)

    def _game_over(self, result: TerminationResult) -> None:
        session = self._session
        session.state = GameState.GAME_OVER
        session.is_win = result.is_win

        if session.score > session.high_score:
            session.high_score = session.score
            self._store.save(session.high_score)
            logger.info("New high score: %d", session.high_score)

        self._emit(GameEvent.GAME_OVER)
        self._emit(GameEvent.MUSIC_STOP)
        logger.info(
            "Game over - %s (%s), score %d",
            "Win" if result.is_win else "Lose",
            result.reason,
            session.score
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _emit(self, event: GameEvent) -> None:
        self._pending_events.append(event.cue)
        self._presenter.play_cue(event.cue)

    def snapshot(self) -> GameSnapshot:
        """Build a snapshot carrying the cues emitted since the previous one."""
        events = tuple(self._pending_events)
        self._pending_events.clear()
        return self._snapshot_builder.build(self._session, events)

    def get_info(self) -> Dict[str, Any]:
        """Summary of the current session."""
        session = self._session
        return {
            "state": session.state.value,
            "score": session.score,
            "high_score": session.high_score,
            "health": session.health,
            "health_lost": session.max_health - session.health,
            "tower_pieces": len(session.tower),
            "is_win": session.is_win,
            "terminated_reason": self._termination.reason,
        }
