"""Scoreboard endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException

from ..models import ScoreboardView

if TYPE_CHECKING:
    from glade.scoreboard import Scoreboard

router = APIRouter(prefix="/api", tags=["scoreboard"])

# Module-level state set by init_scoreboard_routes
_scoreboards: dict[str, Scoreboard] | None = None


def init_scoreboard_routes(scoreboards: dict[str, Scoreboard]) -> None:
    """Initialize routes with the live scoreboards, keyed by agent id."""
    global _scoreboards
    _scoreboards = scoreboards


def _view(agent_id: str, board: Scoreboard) -> ScoreboardView:
    return ScoreboardView(agent_id=agent_id, **board.snapshot())


@router.get("/scoreboards")
def list_scoreboards() -> list[ScoreboardView]:
    if _scoreboards is None:
        raise HTTPException(503, "Scoreboards not initialized")
    return [_view(aid, board) for aid, board in sorted(_scoreboards.items())]


@router.get("/scoreboards/{agent_id}")
def get_scoreboard(agent_id: str) -> ScoreboardView:
    """Get one agent's score and timer."""
    if _scoreboards is None:
        raise HTTPException(503, "Scoreboards not initialized")

    board = _scoreboards.get(agent_id)
    if board is None:
        raise HTTPException(404, f"Agent '{agent_id}' not found")
    return _view(agent_id, board)
