"""FastAPI REST interface for playing against the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from gomoku import __version__
from gomoku.config import CONFIG, Difficulty
from gomoku.core.board import BOARD_SIZE, Cell, Move
from gomoku.core.utils import setup_logging
from gomoku.game import GameService, GameState

setup_logging(CONFIG.log_level)

app = FastAPI(title=CONFIG.ui.engine_name, version=__version__)

# Shared game instance.
game = GameService.from_config()
_game_lock = threading.Lock()


class NewGameRequest(BaseModel):
    difficulty: Optional[str] = None
    human_side: Optional[str] = None  # "black" or "white"


class MoveRequest(BaseModel):
    row: int = Field(ge=0, lt=BOARD_SIZE)
    col: int = Field(ge=0, lt=BOARD_SIZE)


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1)


class DifficultyRequest(BaseModel):
    difficulty: str


def _move_json(move: Optional[Move]):
    if move is None:
        return None
    return {"row": move.row, "col": move.col, "side": move.side.name.lower(),
            "number": move.sequence_number}


def _state_json():
    board = game.board
    winner = game.winner
    return {
        "cells": ["".join(board.get_cell(r, c).symbol for c in range(BOARD_SIZE))
                  for r in range(BOARD_SIZE)],
        "current": game.current_side.name.lower(),
        "human_side": game.human.side.name.lower(),
        "state": game.state.value,
        "winner": winner.name.lower() if winner else None,
        "move_count": board.move_count,
        "last_move": _move_json(board.last_move()),
        "history": [_move_json(m) for m in board.move_history()],
        "difficulty": game.difficulty.label,
    }


def _parse_side(name: str) -> Cell:
    try:
        side = Cell[name.strip().upper()]
    except KeyError:
        side = Cell.EMPTY
    if side == Cell.EMPTY:
        raise HTTPException(status_code=400, detail=f"Invalid side: {name}")
    return side


def _parse_difficulty(name: str) -> Difficulty:
    try:
        return Difficulty.from_name(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/board")
def get_board():
    with _game_lock:
        return _state_json()


@app.post("/new")
def new_game(req: NewGameRequest = NewGameRequest()):
    with _game_lock:
        difficulty = _parse_difficulty(req.difficulty) if req.difficulty else None
        side = _parse_side(req.human_side) if req.human_side else None
        if difficulty is not None:
            game.set_difficulty(difficulty)
        if side is not None:
            game.set_human_side(side)
        game.start_new_game()
        return _state_json()


@app.post("/move")
def make_move(req: MoveRequest):
    with _game_lock:
        if game.state != GameState.PLAYING:
            raise HTTPException(status_code=400, detail="No game in progress")
        if not game.player_move(req.row, req.col):
            raise HTTPException(status_code=400, detail=f"Illegal move: ({req.row}, {req.col})")
        return _state_json()


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _game_lock:
        if game.state in (GameState.BLACK_WIN, GameState.WHITE_WIN, GameState.DRAW):
            raise HTTPException(status_code=400, detail="Game is already over")
        depth = req.depth or game.difficulty.depth
        best = game.engine.get_best_move(game.board, game.current_side, depth)
        return {
            "best_move": _move_json(best),
            "score": game.engine.last_score,
            "nodes": game.engine.nodes,
            "depth": depth,
        }


@app.post("/undo")
def undo():
    with _game_lock:
        if not game.undo():
            raise HTTPException(status_code=400, detail="Nothing to undo")
        return _state_json()


@app.post("/redo")
def redo():
    with _game_lock:
        if not game.redo():
            raise HTTPException(status_code=400, detail="Nothing to redo")
        return _state_json()


@app.post("/difficulty")
def set_difficulty(req: DifficultyRequest):
    with _game_lock:
        game.set_difficulty(_parse_difficulty(req.difficulty))
        return {"difficulty": game.difficulty.label, "depth": game.difficulty.depth}


@app.post("/reset")
def reset_board():
    with _game_lock:
        game.reset()
        return _state_json()
