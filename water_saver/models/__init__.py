"""Water Saver data models."""

from water_saver.models.config import (
    ChoiceSpec,
    GameConfig,
    LeakSourceSpec,
    default_choices,
    default_sources,
)
from water_saver.models.notification import Notification
from water_saver.models.outcome import GameResult, Reward, RunOutcome
from water_saver.models.simulation import LeakSource, Position, SimulationState
from water_saver.models.view import (
    ChoiceView,
    GamePhase,
    GameView,
    Instructions,
    ResultView,
    TankStatus,
)

__all__ = [
    "ChoiceSpec",
    "ChoiceView",
    "GameConfig",
    "GamePhase",
    "GameResult",
    "GameView",
    "Instructions",
    "LeakSource",
    "LeakSourceSpec",
    "Notification",
    "Position",
    "ResultView",
    "Reward",
    "RunOutcome",
    "SimulationState",
    "TankStatus",
    "default_choices",
    "default_sources",
]
