"""Game configuration and the static catalogue of sources and choices."""

from typing import List

from pydantic import BaseModel, Field, model_validator

from water_saver.models.outcome import Reward
from water_saver.models.simulation import Position


class LeakSourceSpec(BaseModel):
    """Catalogue entry a LeakSource is built from at start/reset."""

    id: str
    name: str
    emoji: str
    position: Position
    leak_amount: float = Field(ge=0)
    is_leaking: bool = True


class ChoiceSpec(BaseModel):
    """A reusable, toggleable mitigation with a fixed drain offset."""

    id: str
    name: str
    emoji: str
    offset: float = Field(ge=0)             # Subtracted from drain while adopted
    prompt: str                             # Button text while not adopted
    adopted_label: str                      # Button text while adopted
    adopted_message: str                    # Notification when adopted
    dropped_message: str                    # Notification when un-adopted


def default_sources() -> List[LeakSourceSpec]:
    return [
        LeakSourceSpec(
            id="tap",
            name="Kitchen Tap",
            emoji="🚰",
            position=Position(x=20, y=30),
            leak_amount=5,
        ),
        LeakSourceSpec(
            id="shower",
            name="Bathroom Shower",
            emoji="🚿",
            position=Position(x=50, y=25),
            leak_amount=8,
        ),
        LeakSourceSpec(
            id="toilet",
            name="Toilet Leak",
            emoji="🚽",
            position=Position(x=80, y=35),
            leak_amount=6,
        ),
    ]


def default_choices() -> List[ChoiceSpec]:
    return [
        ChoiceSpec(
            id="bucket",
            name="Use a Bucket",
            emoji="💧",
            offset=8,
            prompt="Click to use bucket for washing",
            adopted_label="✓ Saving 8L per day",
            adopted_message="💧 Using bucket instead of tap - water saved!",
            dropped_message="💧 Back to the running tap",
        ),
        ChoiceSpec(
            id="shower",
            name="Short Showers",
            emoji="⏰",
            offset=6,
            prompt="Click for quick 5-minute showers",
            adopted_label="✓ Saving 6L per day",
            adopted_message="⏰ Short showers - saving water!",
            dropped_message="⏰ Back to long showers",
        ),
    ]


class GameConfig(BaseModel):
    """Tunables for one Water Saver game instance."""

    tick_interval_seconds: float = Field(gt=0, default=0.8)
    notification_ttl_seconds: float = Field(gt=0, default=2.0)
    base_drain_rate: float = Field(ge=0, default=15)
    initial_level: float = Field(ge=0, default=0)
    inflow_per_tick: float = Field(ge=0, default=0)
    win_level: float = 90
    lose_level: float = 0
    saved_estimate_factor: float = 0.5
    won_reward: Reward = Reward(coins=50, xp=100)
    lost_reward: Reward = Reward(coins=10, xp=30)
    sources: List[LeakSourceSpec] = Field(default_factory=default_sources)
    choices: List[ChoiceSpec] = Field(default_factory=default_choices)
    auto_tick: bool = True                  # Off: ticks are driven by tick()
    strict: bool = True                     # Raise on unknown ids instead of ignoring

    @model_validator(mode="after")
    def _unique_ids(self) -> "GameConfig":
        source_ids = [s.id for s in self.sources]
        if len(source_ids) != len(set(source_ids)):
            raise ValueError("leak source ids must be unique")
        choice_ids = [c.id for c in self.choices]
        if len(choice_ids) != len(set(choice_ids)):
            raise ValueError("choice ids must be unique")
        return self

    def get_choice(self, choice_id: str):
        return next((c for c in self.choices if c.id == choice_id), None)
