from __future__ import annotations

import logging
import os
from typing import Any, Optional, Tuple

from flask import Flask, jsonify, request

from match_core.cli import MAX_SIZE, MIN_SIZE, configure_logging
from game import GameStore, Outcome

logger = logging.getLogger(__name__)

app = Flask(__name__)
store = GameStore()

ENDPOINTS = [
    "POST /api/game/new",
    "GET  /api/game/<id>/state",
    "POST /api/game/<id>/flip",
    "POST /api/game/<id>/flipback",
    "POST /api/game/<id>/undo",
    "GET  /api/game/<id>/hint",
    "GET  /api/game/<id>/analysis",
    "GET  /api/game/<id>/path?from=r,c&to=r,c",
    "GET  /api/game/<id>/highscores?limit=N",
]


def _not_found(game_id: str) -> Any:
    return jsonify({"ok": False, "error": "GameNotFound", "message": f"Game {game_id} not found"}), 404


def _bad_request(message: str) -> Any:
    logger.debug("bad request: %s", message)
    return jsonify({"ok": False, "error": "BadRequest", "message": message}), 400


def _outcome_response(outcome: Outcome) -> Any:
    return jsonify(outcome.to_dict()), (200 if outcome.ok else 400)


def _parse_cell(text: Optional[str]) -> Optional[Tuple[int, int]]:
    if not text:
        return None
    try:
        r_s, c_s = [t for t in text.replace(" ", ",").split(",") if t != ""]
        return int(r_s), int(c_s)
    except ValueError:
        return None


def _int_field(body: dict, name: str, default: Optional[int] = None) -> Optional[int]:
    value = body.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


@app.get("/")
def index() -> Any:
    return jsonify({"ok": True, "service": "Match Grid", "endpoints": ENDPOINTS})


# ---------- Game API ----------

@app.post("/api/game/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    rows = _int_field(body, "rows", 4)
    cols = _int_field(body, "cols", 4)
    if rows is None or cols is None:
        return _bad_request("rows and cols must be integers")
    if not (MIN_SIZE <= rows <= MAX_SIZE and MIN_SIZE <= cols <= MAX_SIZE):
        return _bad_request(f"rows and cols must be between {MIN_SIZE} and {MAX_SIZE}")
    seed = body.get("seed", None)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        return _bad_request("seed must be an integer")
    outcome, game_id = store.create(rows, cols, seed=seed)
    if game_id is None:
        return _outcome_response(outcome)
    return jsonify({
        "ok": True,
        "gameId": game_id,
        "message": outcome.message,
        "state": outcome.snapshot,
        "rows": rows,
        "cols": cols,
    })


@app.get("/api/game/<game_id>/state")
def api_state(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    with slot as game:
        return jsonify({"ok": True, "state": game.get_state()})


@app.post("/api/game/<game_id>/flip")
def api_flip(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    body = request.get_json(force=True, silent=True) or {}
    row = _int_field(body, "row")
    col = _int_field(body, "col")
    if row is None or col is None:
        return _bad_request("row and col required")
    with slot as game:
        return _outcome_response(game.flip(row, col))


@app.post("/api/game/<game_id>/flipback")
def api_flip_back(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    with slot as game:
        return _outcome_response(game.flip_back())


@app.post("/api/game/<game_id>/undo")
def api_undo(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    with slot as game:
        return _outcome_response(game.undo())


@app.get("/api/game/<game_id>/hint")
def api_hint(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    with slot as game:
        return jsonify({"ok": True, "hint": game.hint().to_dict()})


@app.get("/api/game/<game_id>/analysis")
def api_analysis(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    with slot as game:
        analysis = game.get_analysis()
        analysis["connectivity"] = game.connectivity_analysis()
        return jsonify({"ok": True, "analysis": analysis})


@app.get("/api/game/<game_id>/path")
def api_path(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    start = _parse_cell(request.args.get("from"))
    end = _parse_cell(request.args.get("to"))
    if start is None or end is None:
        return _bad_request("from and to must look like r,c")
    with slot as game:
        result = game.path_analysis(start, end)
    if result is None:
        return jsonify({"ok": False, "error": "NoPath", "message": "No path between those cells"}), 404
    return jsonify({
        "ok": True,
        "ids": result["ids"],
        "steps": result["steps"],
        "path": [{"row": p.row, "col": p.col} for p in result["positions"]],
    })


@app.get("/api/game/<game_id>/highscores")
def api_high_scores(game_id: str) -> Any:
    slot = store.get(game_id)
    if slot is None:
        return _not_found(game_id)
    try:
        limit = int(request.args.get("limit", "10"))
    except ValueError:
        return _bad_request("limit must be an integer")
    with slot as game:
        return jsonify({"ok": True, "highScores": game.get_high_scores(limit)})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging()
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
