"""Simulation State — the single record a Water Saver run mutates."""

from typing import Dict, List

from pydantic import BaseModel, Field


class Position(BaseModel):
    """Placement hint for the renderer, in percent of the house panel."""

    x: float
    y: float


class LeakSource(BaseModel):
    """A named leak point that can be independently fixed."""

    id: str                                 # e.g., "tap", "toilet"
    name: str
    emoji: str
    position: Position
    leak_amount: float = Field(ge=0)        # Drain per tick while active
    is_leaking: bool = True
    fixed: bool = False

    @property
    def draining(self) -> bool:
        """A source drains the tank iff it leaks and has not been fixed."""
        return self.is_leaking and not self.fixed

    @property
    def resolved(self) -> bool:
        return not self.is_leaking or self.fixed


class SimulationState(BaseModel):
    """
    Aggregate state of one run. Owned exclusively by the Lifecycle Controller
    and rebuilt from configuration on replay.
    """

    resource_level: float = 0.0             # Floored at 0, not clamped at 100
    elapsed_ticks: int = 0
    base_drain_rate: float = 15.0
    sources: List[LeakSource] = []
    choices: Dict[str, bool] = {}           # choice id -> adopted
    resource_saved_estimate: float = 0.0    # Reporting only
    generation: int = 0                     # Bumped on every reset

    def get_source(self, source_id: str):
        return next((s for s in self.sources if s.id == source_id), None)

    @property
    def all_sources_resolved(self) -> bool:
        return all(s.resolved for s in self.sources)
