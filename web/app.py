"""
FastAPI web application for playing against the chess engine.

Exposes a small REST API around GameEngine: create a game, submit moves
(the computer replies in the same request), undo, reset, and read the
accessible text renderings of the board and move history.

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  so two requests for the same game can arrive concurrently. GameEngine is
  not synchronized, so every game carries its own lock and every handler
  that touches an engine holds it for the whole call.
- Stateful per game: games live in an in-memory dict keyed by id and are
  lost on restart. There is no persistence.
- Configuration comes from environment variables, read once at import:
    CHESS_DEFAULT_DIFFICULTY  tier used when a request names none
    CHESS_LICHESS_SUGGESTIONS "1" to let Hard games consult Lichess
    CHESS_LICHESS_URL         Lichess API base URL
    CHESS_LICHESS_TIMEOUT     seconds to wait for a suggestion
"""

import logging
import os
import threading
import uuid
from dataclasses import dataclass, field

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from engine.constants import DEFAULT_DIFFICULTY, LICHESS_API_URL, SUGGESTION_TIMEOUT
from engine.describe import describe_move
from engine.errors import GameOver, InternalConsistencyError, InvalidMove, NoLegalMoves, NothingToUndo
from engine.game import GameEngine
from engine.strategy import Difficulty
from engine.suggest import LichessSuggester, MoveSuggester

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)


def _read_default_difficulty() -> str:
    """Canonical tier name from CHESS_DEFAULT_DIFFICULTY; ValueError if unknown."""
    return Difficulty.parse(os.getenv("CHESS_DEFAULT_DIFFICULTY", DEFAULT_DIFFICULTY)).value


_DEFAULT_DIFFICULTY = _read_default_difficulty()
_SUGGESTIONS_ENABLED = os.getenv("CHESS_LICHESS_SUGGESTIONS", "0") == "1"
_LICHESS_URL = os.getenv("CHESS_LICHESS_URL", LICHESS_API_URL)
_LICHESS_TIMEOUT = float(os.getenv("CHESS_LICHESS_TIMEOUT", str(SUGGESTION_TIMEOUT)))

app = FastAPI(title="Access Chess", version="1.0.0")


@dataclass
class GameSession:
    engine: GameEngine
    lock: threading.Lock = field(default_factory=threading.Lock)


_sessions: dict[str, GameSession] = {}
_sessions_lock = threading.Lock()


def _make_suggester() -> MoveSuggester | None:
    if not _SUGGESTIONS_ENABLED:
        return None
    return LichessSuggester(base_url=_LICHESS_URL, timeout=_LICHESS_TIMEOUT)


def _get_session(game_id: str) -> GameSession:
    with _sessions_lock:
        session = _sessions.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Game not found: {game_id}")
    return session


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class NewGameRequest(BaseModel):
    """
    Client request to start a game.

    Fields:
        difficulty: "easy", "medium", "hard" or "beginner" (plays as easy).
        fen: Optional starting position; the standard one when omitted.
    """

    difficulty: str = _DEFAULT_DIFFICULTY
    fen: str | None = None

    @field_validator("difficulty")
    @classmethod
    def parse_difficulty(cls, v: str) -> str:
        """Normalise to a canonical tier name; rejects unknown tiers."""
        return Difficulty.parse(v).value


class MoveRequest(BaseModel):
    """Human move in SAN ("Nf3") or coordinate notation ("g1f3")."""

    move: str

    @field_validator("move")
    @classmethod
    def strip_move(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a move.")
        return v


class LastMoveModel(BaseModel):
    origin: str
    destination: str


class StatusModel(BaseModel):
    side_to_move: str
    in_check: bool
    is_checkmate: bool
    is_stalemate: bool
    is_insufficient_material: bool
    is_draw: bool
    game_over: bool
    fen: str
    last_move: LastMoveModel | None = None


class GameResponse(BaseModel):
    """
    Full game state.

    Fields:
        legal_moves: Moves available to the side to move, in SAN.
        history: SAN of every ply played so far, oldest first.
    """

    game_id: str
    difficulty: str
    status: StatusModel
    legal_moves: list[str]
    history: list[str]


class MoveResponse(BaseModel):
    """
    Result of a human move.

    Fields:
        move: The human move in canonical SAN.
        reply: The computer's reply, or None if the human move ended the game.
    """

    move: str
    reply: str | None
    game: GameResponse


class ComputerMoveResponse(BaseModel):
    move: str
    game: GameResponse


class TextResponse(BaseModel):
    text: str


class HintResponse(BaseModel):
    move: str | None
    description: str | None


def _game_response(game_id: str, engine: GameEngine) -> GameResponse:
    status = engine.status()
    last_move = None
    if status.last_move is not None:
        last_move = LastMoveModel(
            origin=status.last_move.origin,
            destination=status.last_move.destination,
        )
    return GameResponse(
        game_id=game_id,
        difficulty=engine.difficulty.value,
        status=StatusModel(
            side_to_move=status.side_to_move.value,
            in_check=status.in_check,
            is_checkmate=status.is_checkmate,
            is_stalemate=status.is_stalemate,
            is_insufficient_material=status.is_insufficient_material,
            is_draw=status.is_draw,
            game_over=status.game_over,
            fen=status.fen,
            last_move=last_move,
        ),
        legal_moves=engine.legal_moves(),
        history=[record.notation for record in engine.history],
    )


def _computer_move(game_id: str, engine: GameEngine) -> str:
    """Run computer_move() and translate its failures into HTTP errors."""
    try:
        return engine.computer_move()
    except (NoLegalMoves, GameOver) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InternalConsistencyError as exc:
        _log.exception("Engine chose an illegal move in game %s", game_id)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/games", response_model=GameResponse, status_code=201)
def create_game(request: NewGameRequest) -> GameResponse:
    """
    Start a new game.

    Raises:
        HTTPException 400: Malformed FEN.
    """
    try:
        engine = GameEngine(
            difficulty=Difficulty(request.difficulty),
            fen=request.fen,
            suggester=_make_suggester(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc

    game_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[game_id] = GameSession(engine=engine)

    _log.info("Created game %s difficulty=%s", game_id, request.difficulty)
    return _game_response(game_id, engine)


@app.get("/api/games/{game_id}", response_model=GameResponse)
def get_game(game_id: str) -> GameResponse:
    session = _get_session(game_id)
    with session.lock:
        return _game_response(game_id, session.engine)


@app.delete("/api/games/{game_id}", status_code=204)
def delete_game(game_id: str) -> None:
    with _sessions_lock:
        if _sessions.pop(game_id, None) is None:
            raise HTTPException(status_code=404, detail=f"Game not found: {game_id}")
    _log.info("Deleted game %s", game_id)


@app.post("/api/games/{game_id}/moves", response_model=MoveResponse)
def submit_move(game_id: str, request: MoveRequest) -> MoveResponse:
    """
    Apply the human move, then let the computer reply unless the game is over.

    Raises:
        HTTPException 400: Move text is malformed or illegal. No state changes.
        HTTPException 409: The game is already over.
        HTTPException 500: The engine produced an illegal reply (a bug).
    """
    session = _get_session(game_id)
    with session.lock:
        engine = session.engine
        try:
            move = engine.submit_move(request.move)
        except GameOver as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except InvalidMove as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        reply = None
        if not engine.status().game_over:
            reply = _computer_move(game_id, engine)

        _log.info("Game %s: %s, reply %s", game_id, move, reply)
        return MoveResponse(move=move, reply=reply, game=_game_response(game_id, engine))


@app.post("/api/games/{game_id}/computer-move", response_model=ComputerMoveResponse)
def computer_move(game_id: str) -> ComputerMoveResponse:
    """
    Let the computer move for the side to move (e.g. when the human plays Black).

    Raises:
        HTTPException 409: No legal moves, or the game is already over.
    """
    session = _get_session(game_id)
    with session.lock:
        move = _computer_move(game_id, session.engine)
        return ComputerMoveResponse(move=move, game=_game_response(game_id, session.engine))


@app.post("/api/games/{game_id}/undo", response_model=GameResponse)
def undo(game_id: str) -> GameResponse:
    """
    Take back the last human move and the computer's reply.

    Raises:
        HTTPException 409: Fewer than two plies have been played, or the game
                           is over.
    """
    session = _get_session(game_id)
    with session.lock:
        try:
            session.engine.undo()
        except (NothingToUndo, GameOver) as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _game_response(game_id, session.engine)


@app.post("/api/games/{game_id}/reset", response_model=GameResponse)
def reset(game_id: str) -> GameResponse:
    """Start over from the standard position at the same difficulty."""
    session = _get_session(game_id)
    with session.lock:
        session.engine.reset()
        return _game_response(game_id, session.engine)


@app.get("/api/games/{game_id}/board", response_model=TextResponse)
def board(game_id: str) -> TextResponse:
    session = _get_session(game_id)
    with session.lock:
        return TextResponse(text=session.engine.board_description())


@app.get("/api/games/{game_id}/history", response_model=TextResponse)
def history(game_id: str) -> TextResponse:
    session = _get_session(game_id)
    with session.lock:
        return TextResponse(text=session.engine.move_history_text())


@app.get("/api/games/{game_id}/hint", response_model=HintResponse)
def hint(game_id: str) -> HintResponse:
    """Suggest a move for the side to move, with a spoken description."""
    session = _get_session(game_id)
    with session.lock:
        move = session.engine.best_move()
    return HintResponse(
        move=move,
        description=describe_move(move) if move is not None else None,
    )
