"""Run outcomes and the reward payloads attached to them."""

from enum import Enum

from pydantic import BaseModel, Field


class RunOutcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self is not RunOutcome.IN_PROGRESS


class Reward(BaseModel):
    """Fixed payload granted on a terminal outcome."""

    coins: int = Field(ge=0)
    xp: int = Field(ge=0)


class GameResult(BaseModel):
    """What the Lifecycle Controller reports when a run ends."""

    outcome: RunOutcome
    reward: Reward
    elapsed_ticks: int
    message: str

    @property
    def success(self) -> bool:
        return self.outcome == RunOutcome.WON

    @property
    def score(self) -> int:
        """Score passed to the completion callback: the xp of the reward."""
        return self.reward.xp
