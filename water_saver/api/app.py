"""
Water Saver API — FastAPI endpoints for the presentation layer.

Exposes the engine's signals over HTTP:
- Game view inspection
- Lifecycle control (start, replay, exit)
- Player actions (fix leak, toggle choice)
- Presentation toggles (fullscreen)
- Manual ticking (for testing)

Game endpoints are async so they run on the event loop thread that also
drives the simulation clock.
"""

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException

from water_saver.lifecycle.controller import InvalidTransitionError, WaterSaverGame
from water_saver.models.config import GameConfig
from water_saver.resource.model import UnknownIdentifierError


# --- Application Factory ---

def create_app(
    config: Optional[GameConfig] = None,
    on_game_complete: Optional[Callable[[bool, int], None]] = None,
    on_exit: Optional[Callable[[], None]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    game = WaterSaverGame(
        config=config,
        on_game_complete=on_game_complete,
        on_exit=on_exit,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        game.shutdown()

    app = FastAPI(
        title="Water Saver API",
        description="Water Saver Mission — simulation engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store the engine on app state for access in endpoints
    app.state.game = game

    def _view():
        return game.view().model_dump(mode="json")

    def _transition(signal: Callable[[], None]):
        try:
            signal()
        except InvalidTransitionError as e:
            raise HTTPException(409, str(e))
        return _view()

    # === VIEW ===

    @app.get("/game")
    async def get_game():
        """Current game view."""
        return _view()

    @app.get("/game/config")
    async def get_config():
        """Active game configuration."""
        return game.config.model_dump(mode="json")

    @app.put("/game/config")
    async def update_config(new_config: GameConfig):
        """Replace the configuration (instructions screen only)."""
        return _transition(lambda: game.reconfigure(new_config))

    # === LIFECYCLE ===

    @app.post("/game/start")
    async def start_game():
        """Dismiss the instructions and start ticking."""
        return _transition(game.start)

    @app.post("/game/replay")
    async def replay_game():
        """Reset the run and show the instructions again."""
        return _transition(game.replay)

    @app.post("/game/exit")
    async def exit_game():
        """Leave the game from the instructions or result screen."""
        return _transition(game.exit)

    @app.post("/game/tick")
    async def force_tick():
        """Force a single tick (for testing)."""
        applied = game.tick()
        return {"applied": applied, "game": _view()}

    # === PLAYER ACTIONS ===

    @app.post("/game/leaks/{source_id}/fix")
    async def fix_leak(source_id: str):
        """Fix a leak source."""
        try:
            applied = game.fix_leak(source_id)
        except UnknownIdentifierError:
            raise HTTPException(404, "Leak source not found")
        return {"applied": applied, "game": _view()}

    @app.post("/game/choices/{choice_id}/toggle")
    async def toggle_choice(choice_id: str):
        """Adopt or drop a water choice."""
        try:
            applied = game.toggle_choice(choice_id)
        except UnknownIdentifierError:
            raise HTTPException(404, "Choice not found")
        return {"applied": applied, "game": _view()}

    @app.post("/game/fullscreen")
    async def toggle_fullscreen():
        """Toggle fullscreen display (no effect on the simulation)."""
        return {"fullscreen": game.toggle_fullscreen()}

    return app


# Default application instance
app = create_app()
