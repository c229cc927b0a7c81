"""
Lifecycle Controller — sequences a Water Saver run.

States:
  PRE_GAME → ACTIVE → TERMINAL → (replay) PRE_GAME
  PRE_GAME | TERMINAL → (exit) EXITED

Behavioral Contract:
- Owns the only SimulationState; every mutation happens under one lock
- The clock runs only while ACTIVE and is cancelled on the transition out
- on_game_complete(success, score) fires exactly once per run, only on a
  terminal outcome, never on exit
- on_exit() fires on an explicit exit from the instructions or result screen
- Ticks or signals that arrive for a superseded run are absorbed as no-ops
"""

import logging
import math
import threading
from typing import Callable, Optional

from water_saver.clock.ticker import SimulationClock
from water_saver.models.config import GameConfig
from water_saver.models.outcome import GameResult
from water_saver.models.simulation import SimulationState
from water_saver.models.view import (
    ChoiceView,
    GamePhase,
    GameView,
    ResultView,
    TankStatus,
)
from water_saver.notifications.queue import NotificationQueue
from water_saver.outcome.evaluator import OutcomeEvaluator
from water_saver.resource import model
from water_saver.resource.model import UnknownIdentifierError

logger = logging.getLogger(__name__)

LOW_TANK_LEVEL = 30
FILLING_TANK_LEVEL = 80


class InvalidTransitionError(Exception):
    """Raised when a lifecycle signal is not valid in the current phase."""
    pass


class WaterSaverGame:
    """
    The Water Saver engine. The presentation layer raises signals into it
    (start, fix_leak, toggle_choice, replay, exit, toggle_fullscreen) and
    renders what view() returns.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        on_game_complete: Optional[Callable[[bool, int], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
        notifications: Optional[NotificationQueue] = None,
    ):
        self.config = config or GameConfig()
        self.on_game_complete = on_game_complete
        self.on_exit = on_exit

        self._lock = threading.RLock()
        self._phase = GamePhase.PRE_GAME
        self._state = model.initial_state(self.config)
        self._evaluator = OutcomeEvaluator(self.config)
        self._notifications = notifications or NotificationQueue(
            ttl_seconds=self.config.notification_ttl_seconds,
        )
        self._clock = SimulationClock(
            self.config.tick_interval_seconds, self._on_clock_tick
        )
        self._result: Optional[GameResult] = None
        self._fullscreen = False
        self._clock_generation = self._state.generation

    # --- Read access ---

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def state(self) -> SimulationState:
        """Current state. Records are replaced, never mutated, on each change."""
        return self._state

    @property
    def result(self) -> Optional[GameResult]:
        return self._result

    @property
    def notifications(self) -> NotificationQueue:
        return self._notifications

    @property
    def clock(self) -> SimulationClock:
        return self._clock

    @property
    def fullscreen(self) -> bool:
        return self._fullscreen

    # --- Lifecycle signals ---

    def start(self) -> None:
        """PRE_GAME → ACTIVE. The state is already fresh."""
        with self._lock:
            self._require(GamePhase.PRE_GAME, "start")
            if self.config.auto_tick:
                self._clock.start()
            self._clock_generation = self._state.generation
            self._phase = GamePhase.ACTIVE
            logger.info("Run %d started", self._state.generation)

    def replay(self) -> None:
        """TERMINAL → PRE_GAME with every field of the run reinitialized."""
        with self._lock:
            self._require(GamePhase.TERMINAL, "replay")
            self._clock.stop()
            self._state = model.initial_state(
                self.config, generation=self._state.generation + 1
            )
            self._evaluator.reset()
            self._notifications.clear()
            self._result = None
            self._phase = GamePhase.PRE_GAME
            logger.info("Run reset (generation %d)", self._state.generation)

    def exit(self) -> None:
        """Hand control back to the host from the instructions or result screen."""
        with self._lock:
            self._require((GamePhase.PRE_GAME, GamePhase.TERMINAL), "exit")
            self._clock.stop()
            self._phase = GamePhase.EXITED
            logger.info("Game exited")
        if self.on_exit:
            self.on_exit()

    def shutdown(self) -> None:
        """Stop the clock without changing phase (host teardown)."""
        with self._lock:
            self._clock.stop()

    def toggle_fullscreen(self) -> bool:
        """Presentational only; no effect on the simulation."""
        with self._lock:
            self._fullscreen = not self._fullscreen
            return self._fullscreen

    def reconfigure(self, config: GameConfig) -> None:
        """Swap configuration. Only allowed before a run starts."""
        with self._lock:
            self._require(GamePhase.PRE_GAME, "reconfigure")
            self.config = config
            self._evaluator = OutcomeEvaluator(config)
            self._notifications.ttl_seconds = config.notification_ttl_seconds
            self._clock = SimulationClock(
                config.tick_interval_seconds, self._on_clock_tick
            )
            self._state = model.initial_state(
                config, generation=self._state.generation + 1
            )

    # --- Player signals ---

    def fix_leak(self, source_id: str) -> bool:
        """
        Fix a leak source. Returns True if the signal was applied.
        Ignored outside ACTIVE. Unknown ids raise in strict mode.
        """
        completed = None
        with self._lock:
            if self._phase != GamePhase.ACTIVE:
                logger.debug("fix_leak(%s) ignored in %s", source_id, self._phase.value)
                return False
            try:
                self._state = model.fix_leak(self._state, source_id)
            except UnknownIdentifierError:
                return self._unknown("leak source", source_id)

            source = self._state.get_source(source_id)
            self._notifications.enqueue(f"✓ Fixed {source.name}!")
            completed = self._evaluate()
        self._report(completed)
        return True

    def toggle_choice(self, choice_id: str) -> bool:
        """Adopt or drop a water choice. Returns True if the signal was applied."""
        with self._lock:
            if self._phase != GamePhase.ACTIVE:
                logger.debug("toggle_choice(%s) ignored in %s", choice_id, self._phase.value)
                return False
            try:
                self._state = model.toggle_choice(self._state, choice_id)
            except UnknownIdentifierError:
                return self._unknown("choice", choice_id)

            spec = self.config.get_choice(choice_id)
            adopted = self._state.choices[choice_id]
            self._notifications.enqueue(
                spec.adopted_message if adopted else spec.dropped_message
            )
            return True

    # --- Ticking ---

    def tick(self, generation: Optional[int] = None) -> bool:
        """
        Run one tick: update the resource model, then evaluate.
        A tick outside ACTIVE or for another generation is a no-op.
        """
        completed = None
        with self._lock:
            if self._phase != GamePhase.ACTIVE:
                return False
            if generation is not None and generation != self._state.generation:
                return False

            self._state = model.advance(self._state, self.config)
            logger.debug(
                "Tick %d: level=%.1f saved=%.1f",
                self._state.elapsed_ticks,
                self._state.resource_level,
                self._state.resource_saved_estimate,
            )
            completed = self._evaluate()
        self._report(completed)
        return True

    def _on_clock_tick(self) -> None:
        self.tick(generation=self._clock_generation)

    def _evaluate(self) -> Optional[GameResult]:
        """Must hold the lock. Moves to TERMINAL on the first terminal outcome."""
        result = self._evaluator.evaluate(self._state)
        if result is None:
            return None

        self._clock.stop()
        self._phase = GamePhase.TERMINAL
        self._result = result
        return result

    def _report(self, result: Optional[GameResult]) -> None:
        if result is not None and self.on_game_complete:
            self.on_game_complete(result.success, result.score)

    def _unknown(self, kind: str, identifier: str) -> bool:
        if self.config.strict:
            raise UnknownIdentifierError(identifier)
        logger.warning("Ignoring unknown %s: %s", kind, identifier)
        return False

    def _require(self, allowed, signal: str) -> None:
        if not isinstance(allowed, tuple):
            allowed = (allowed,)
        if self._phase not in allowed:
            raise InvalidTransitionError(
                f"Cannot {signal} while {self._phase.value}"
            )

    # --- Presentation ---

    def view(self) -> GameView:
        """Snapshot for the presentation layer."""
        with self._lock:
            state = self._state
            won = self._result is not None and self._result.success

            if state.resource_level < LOW_TANK_LEVEL and not won:
                tank_status = TankStatus.LOW
            elif state.resource_level >= FILLING_TANK_LEVEL:
                tank_status = TankStatus.FILLING
            else:
                tank_status = TankStatus.NORMAL

            choices = []
            for spec in self.config.choices:
                adopted = state.choices.get(spec.id, False)
                choices.append(ChoiceView(
                    id=spec.id,
                    name=spec.name,
                    emoji=spec.emoji,
                    adopted=adopted,
                    label=spec.adopted_label if adopted else spec.prompt,
                ))

            result = None
            if self._result is not None:
                result = ResultView(
                    outcome=self._result.outcome,
                    success=self._result.success,
                    score=self._result.score,
                    reward=self._result.reward,
                    message=self._result.message,
                    elapsed_ticks=self._result.elapsed_ticks,
                )

            return GameView(
                phase=self._phase,
                tank_percent=math.floor(state.resource_level),
                resource_level=state.resource_level,
                tank_status=tank_status,
                leaks_fixed=model.leaks_fixed(state),
                total_sources=len(state.sources),
                elapsed_ticks=state.elapsed_ticks,
                drain_rate=model.total_drain(state, self.config),
                resource_saved_estimate=state.resource_saved_estimate,
                sources=[s.model_copy() for s in state.sources],
                choices=choices,
                messages=self._notifications.texts(),
                fullscreen=self._fullscreen,
                result=result,
            )
