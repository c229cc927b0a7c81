"""
Resource Model — the tank, its leak sources and the player's water choices.

Every operation takes the current SimulationState and returns the next one.
The caller owns the state; nothing here keeps a reference to it.

Behavioral Contract:
- The tank level is floored at 0 and never clamped above
- A source drains iff it is leaking and not fixed
- Each adopted choice subtracts its offset once, however often it was toggled
- The saved-water estimate is reporting only and never feeds back into drain
"""

from water_saver.models.config import GameConfig
from water_saver.models.simulation import LeakSource, SimulationState


class UnknownIdentifierError(KeyError):
    """Raised when a signal names a source or choice the game does not have."""
    pass


def initial_state(config: GameConfig, generation: int = 0) -> SimulationState:
    """Build a fresh run from the configured catalogue."""
    return SimulationState(
        resource_level=config.initial_level,
        elapsed_ticks=0,
        base_drain_rate=config.base_drain_rate,
        sources=[
            LeakSource(
                id=spec.id,
                name=spec.name,
                emoji=spec.emoji,
                position=spec.position.model_copy(),
                leak_amount=spec.leak_amount,
                is_leaking=spec.is_leaking,
                fixed=False,
            )
            for spec in config.sources
        ],
        choices={c.id: False for c in config.choices},
        resource_saved_estimate=0.0,
        generation=generation,
    )


def total_drain(state: SimulationState, config: GameConfig) -> float:
    """Base rate plus active leaks, minus the offsets of adopted choices."""
    drain = state.base_drain_rate
    for source in state.sources:
        if source.draining:
            drain += source.leak_amount

    for choice in config.choices:
        if state.choices.get(choice.id):
            drain -= choice.offset

    return drain


def advance(state: SimulationState, config: GameConfig) -> SimulationState:
    """Apply one tick and return the next state."""
    drain = total_drain(state, config)
    level = max(0.0, state.resource_level + config.inflow_per_tick - drain)

    saved = state.resource_saved_estimate
    if drain < state.base_drain_rate:
        saved += (state.base_drain_rate - drain) * config.saved_estimate_factor

    return state.model_copy(update={
        "resource_level": level,
        "resource_saved_estimate": saved,
        "elapsed_ticks": state.elapsed_ticks + 1,
    })


def fix_leak(state: SimulationState, source_id: str) -> SimulationState:
    """Neutralize a source. Fixing an already fixed source changes nothing."""
    source = state.get_source(source_id)
    if source is None:
        raise UnknownIdentifierError(source_id)

    if source.fixed:
        return state

    sources = [
        s.model_copy(update={"fixed": True, "is_leaking": False})
        if s.id == source_id else s
        for s in state.sources
    ]
    return state.model_copy(update={"sources": sources})


def toggle_choice(state: SimulationState, choice_id: str) -> SimulationState:
    """Flip the adopted flag of a choice."""
    if choice_id not in state.choices:
        raise UnknownIdentifierError(choice_id)

    choices = dict(state.choices)
    choices[choice_id] = not choices[choice_id]
    return state.model_copy(update={"choices": choices})


def leaks_fixed(state: SimulationState) -> int:
    """Number of sources that no longer leak."""
    return sum(1 for s in state.sources if s.resolved)

