"""Game View — the snapshot handed to the presentation layer."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from water_saver.models.outcome import Reward, RunOutcome
from water_saver.models.simulation import LeakSource


class GamePhase(str, Enum):
    PRE_GAME = "pre_game"       # Instructions shown, clock inactive
    ACTIVE = "active"           # Clock running, evaluator live
    TERMINAL = "terminal"       # Clock stopped, result shown
    EXITED = "exited"           # Control handed back to the host


class TankStatus(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    FILLING = "filling"


class Instructions(BaseModel):
    """Copy for the start popup and the how-to-play panel."""

    title: str = "Water Saver Mission"
    tagline: str = "Fix leaks and save water for your village"
    discover: str = "Where water is wasted in your home and how to stop it"
    challenge: str = "Fix leaks and make smart water choices to fill the tank"
    success: str = "Fill the tank and fix all leaks to save your village"
    how_to_play: List[str] = [
        "Click on leaks to fix them",
        "Make smart water choices",
        "Fill the tank to 90%",
        "Fix all leaks to win!",
    ]
    lesson: str = (
        "Saving water saves life. Small actions like fixing leaks and taking "
        "short showers have a big impact on your village."
    )


class ChoiceView(BaseModel):
    id: str
    name: str
    emoji: str
    adopted: bool
    label: str


class ResultView(BaseModel):
    outcome: RunOutcome
    success: bool
    score: int
    reward: Reward
    message: str
    elapsed_ticks: int


class GameView(BaseModel):
    phase: GamePhase
    tank_percent: int                       # Floored for display
    resource_level: float
    tank_status: TankStatus
    leaks_fixed: int
    total_sources: int
    elapsed_ticks: int
    drain_rate: float
    resource_saved_estimate: float
    sources: List[LeakSource]
    choices: List[ChoiceView]
    messages: List[str]
    fullscreen: bool
    result: Optional[ResultView] = None
    instructions: Instructions = Instructions()
