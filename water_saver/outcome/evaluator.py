"""
Outcome Evaluator — decides win, lose or continue after every state change.

Behavioral Contract:
- Won: tank at or above the win level and every source resolved
- Lost: tank at or below the lose level while any source still leaks
- Won is checked before Lost
- One-shot: after a terminal outcome, evaluate() returns None until reset()
"""

import logging
from typing import Optional

from water_saver.models.config import GameConfig
from water_saver.models.outcome import GameResult, RunOutcome
from water_saver.models.simulation import SimulationState

logger = logging.getLogger(__name__)

WON_MESSAGE = "You saved water for your village! 💧"
LOST_MESSAGE = "Tank emptied. Your village needs more water!"


def classify(state: SimulationState, config: GameConfig) -> RunOutcome:
    """Pure classification of a state, without the one-shot latch."""
    all_fixed = state.all_sources_resolved

    if state.resource_level >= config.win_level and all_fixed:
        return RunOutcome.WON

    if state.resource_level <= config.lose_level and not all_fixed:
        return RunOutcome.LOST

    return RunOutcome.IN_PROGRESS


class OutcomeEvaluator:
    """Latches the first terminal outcome of a run."""

    def __init__(self, config: GameConfig):
        self.config = config
        self._outcome = RunOutcome.IN_PROGRESS

    @property
    def outcome(self) -> RunOutcome:
        return self._outcome

    def evaluate(self, state: SimulationState) -> Optional[GameResult]:
        """
        Check the state against the thresholds.
        Returns a GameResult exactly once per run, on the transition to a
        terminal outcome; None otherwise.
        """
        if self._outcome.terminal:
            return None

        outcome = classify(state, self.config)
        if not outcome.terminal:
            return None

        self._outcome = outcome
        if outcome == RunOutcome.WON:
            reward, message = self.config.won_reward, WON_MESSAGE
        else:
            reward, message = self.config.lost_reward, LOST_MESSAGE

        logger.info(
            "Run %s at tick %d (level=%.1f)",
            outcome.value, state.elapsed_ticks, state.resource_level,
        )
        return GameResult(
            outcome=outcome,
            reward=reward.model_copy(),
            elapsed_ticks=state.elapsed_ticks,
            message=message,
        )

    def reset(self) -> None:
        """Re-arm for the next run."""
        self._outcome = RunOutcome.IN_PROGRESS
