from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from game import (
    Board,
    Direction,
    GameOverError,
    GameSession,
    LedgerForwarder,
    LoggingLedgerClient,
    SessionRegistry,
    Tile,
    UnknownSessionError,
    seeded_source,
    slide,
)

logger = logging.getLogger(__name__)

LEDGER_MODE = os.getenv("MONAD2048_LEDGER", "log").lower()
MAX_SESSIONS = int(os.getenv("MONAD2048_MAX_SESSIONS", "1000"))

app = Flask(__name__)
registry = SessionRegistry(max_sessions=MAX_SESSIONS)
ledger: Optional[LedgerForwarder] = LedgerForwarder(LoggingLedgerClient()) if LEDGER_MODE != "off" else None


def board_to_json(b: Board) -> Dict[str, Any]:
    return {"rows": b.rows()}


def _cell(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"cell values must be integers, got {v!r}")
    return v


def board_from_json(obj: Dict[str, Any]) -> Board:
    """Accepts {"rows": [[...], ...]} or {"grid": [16 values]}; raises ValueError if malformed."""
    if not isinstance(obj, dict):
        raise ValueError("board must be an object")
    if "rows" in obj:
        rows = obj["rows"]
        if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            raise ValueError("rows must be a list of lists")
        return Board.from_rows([[_cell(v) for v in r] for r in rows])
    if "grid" in obj:
        grid = obj["grid"]
        if not isinstance(grid, list):
            raise ValueError("grid must be a list")
        return Board(grid=tuple(_cell(v) for v in grid))
    raise ValueError("board requires rows or grid")


def tile_to_json(t: Optional[Tile]) -> Optional[Dict[str, int]]:
    if t is None:
        return None
    return {"row": t.row, "col": t.col, "value": t.value}


def session_to_json(s: GameSession) -> Dict[str, Any]:
    return {
        "board": board_to_json(s.board),
        "score": s.score,
        "status": s.status.value,
        "moves": s.move_count,
        "bestTile": s.best_tile,
        "available": [d.value for d in s.available_directions()],
    }


def _new_session(seed: Optional[int]) -> GameSession:
    session = GameSession(rng=seeded_source(seed) if seed is not None else None)
    if ledger is not None:
        session.add_listener(ledger)
    session.start()
    return session


def _json_body() -> Optional[Dict[str, Any]]:
    # Anything other than a JSON object (or an empty body) is rejected by the caller.
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _bad_body() -> Any:
    return jsonify({"ok": False, "error": "request body must be a JSON object"}), 400


def _session_id(body: Dict[str, Any]) -> Optional[str]:
    sid = body.get("sessionId")
    return sid if isinstance(sid, str) and sid else None


@app.get("/api/health")
def api_health() -> Any:
    return jsonify({"ok": True, "sessions": len(registry)})


@app.post("/api/new")
def api_new() -> Any:
    body = _json_body()
    if body is None:
        return _bad_body()
    seed = body.get("seed", None)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        return jsonify({"ok": False, "error": "seed must be an integer"}), 400
    session_id = registry.create(lambda: _new_session(seed))
    logger.info("Created session %s", session_id)
    return jsonify({"ok": True, "sessionId": session_id, "state": session_to_json(registry.get(session_id))})


@app.get("/api/session/<session_id>")
def api_session(session_id: str) -> Any:
    session = registry.find(session_id)
    if session is None:
        return jsonify({"ok": False, "error": "unknown session"}), 404
    return jsonify({"ok": True, "state": session_to_json(session)})


@app.post("/api/move")
def api_move() -> Any:
    body = _json_body()
    if body is None:
        return _bad_body()
    session_id = _session_id(body)
    if session_id is None:
        return jsonify({"ok": False, "error": "sessionId required"}), 400
    try:
        direction = Direction.parse(body.get("direction"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    try:
        with registry.locked(session_id) as session:
            outcome = session.apply_move(direction)
            state = session_to_json(session)
    except UnknownSessionError:
        return jsonify({"ok": False, "error": "unknown session"}), 404
    except GameOverError as e:
        logger.debug("Move rejected for finished session %s", session_id)
        return jsonify({"ok": False, "error": str(e), "gameOver": True}), 409
    return jsonify({
        "ok": True,
        "committed": outcome.committed,
        "scoreDelta": outcome.score_delta,
        "isTerminal": outcome.is_terminal,
        "spawned": tile_to_json(outcome.spawned),
        "state": state,
    })


@app.post("/api/legal")
def api_legal() -> Any:
    body = _json_body()
    if body is None:
        return _bad_body()
    session_id = _session_id(body)
    session = registry.find(session_id) if session_id else None
    if session is None:
        return jsonify({"ok": False, "error": "unknown session"}), 404
    return jsonify({"ok": True, "directions": [d.value for d in session.available_directions()]})


@app.post("/api/slide")
def api_slide() -> Any:
    # Stateless dry run: no spawn, no session.
    body = _json_body()
    if body is None:
        return _bad_body()
    try:
        board = board_from_json(body.get("board"))
        direction = Direction.parse(body.get("direction"))
    except (ValueError, TypeError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    res = slide(board, direction)
    return jsonify({
        "ok": True,
        "board": board_to_json(res.board),
        "scoreDelta": res.score_delta,
        "changed": res.changed,
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    verbose = os.getenv("MONAD2048_DEBUG", "0").lower() in ("1", "true", "yes", "on")
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")), debug=debug)
