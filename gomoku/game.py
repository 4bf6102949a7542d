"""Human-vs-engine game flow on top of the core board and search."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from gomoku.config import CONFIG, Difficulty
from gomoku.core.board import Board, Cell, Move
from gomoku.core.line_scanner import check_win, scan_board_for_winner
from gomoku.core.search import SearchEngine

logger = logging.getLogger(__name__)


class GameState(Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    BLACK_WIN = "black_win"
    WHITE_WIN = "white_win"
    DRAW = "draw"


@dataclass
class Player:
    side: Cell
    name: str
    is_ai: bool = False

    @classmethod
    def human(cls, side: Cell) -> "Player":
        return cls(side, "Player", False)

    @classmethod
    def ai(cls, side: Cell) -> "Player":
        return cls(side, "AI", True)


class GameListener:
    """Override what you need; every hook is a no-op by default."""

    def on_board_updated(self):
        pass

    def on_message(self, text: str):
        pass

    def on_state_changed(self, state: GameState):
        pass


class GameService:
    def __init__(self, difficulty: Difficulty = Difficulty.MEDIUM, human_side: Cell = Cell.BLACK,
                 engine: Optional[SearchEngine] = None):
        self._board = Board()
        self.engine = engine or SearchEngine()
        self.difficulty = Difficulty(difficulty)
        self.human = Player.human(Cell(human_side))
        self.ai = Player.ai(self.human.side.opponent)
        self.current_side = Cell.BLACK
        self._next_human_side: Optional[Cell] = None
        self.state = GameState.NOT_STARTED
        self._listeners: List[GameListener] = []

    @classmethod
    def from_config(cls, cfg=None) -> "GameService":
        cfg = cfg or CONFIG.game
        side = Cell.WHITE if cfg.human_side.lower() == "white" else Cell.BLACK
        return cls(Difficulty.from_name(cfg.difficulty), side)

    # -- listeners -----------------------------------------------------------

    def add_listener(self, listener: GameListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: GameListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _board_updated(self):
        for listener in self._listeners:
            listener.on_board_updated()

    def _message(self, text: str):
        logger.debug(text)
        for listener in self._listeners:
            listener.on_message(text)

    def _set_state(self, state: GameState):
        self.state = state
        logger.info("Game state: %s", state.value)
        for listener in self._listeners:
            listener.on_state_changed(state)

    # -- game flow -----------------------------------------------------------

    @property
    def board(self) -> Board:
        return self._board

    @property
    def winner(self) -> Optional[Cell]:
        if self.state == GameState.BLACK_WIN:
            return Cell.BLACK
        if self.state == GameState.WHITE_WIN:
            return Cell.WHITE
        return None

    def set_difficulty(self, difficulty: Difficulty):
        self.difficulty = Difficulty(difficulty)
        self._message(f"Difficulty set to {self.difficulty.label} ({self.difficulty.description})")

    def set_human_side(self, side: Cell):
        """Takes effect from the next start_new_game() or reset()."""
        self._next_human_side = Cell(side)

    def _apply_next_side(self):
        if self._next_human_side is not None:
            self.human = Player.human(self._next_human_side)
            self.ai = Player.ai(self._next_human_side.opponent)
            self._next_human_side = None

    def reset(self):
        self._apply_next_side()
        self._board.reset()
        self.current_side = Cell.BLACK
        self._set_state(GameState.NOT_STARTED)
        self._board_updated()

    def start_new_game(self):
        self._apply_next_side()
        self._board.reset()
        self.current_side = Cell.BLACK
        self._set_state(GameState.PLAYING)
        self._board_updated()
        if self.ai.side == Cell.BLACK:
            self._message("Game started! AI (Black) moves first.")
            self.ai_move()
        else:
            self._message("Game started! Black (You) moves first.")

    def player_move(self, row: int, col: int) -> bool:
        """Play the human move at (row, col) and let the AI answer."""
        if self.state != GameState.PLAYING:
            self._message("Game not started or already ended!")
            return False
        if self.current_side != self.human.side:
            self._message("It's AI's turn, please wait...")
            return False
        if not self._board.place(row, col, self.human.side):
            logger.warning("Rejected move (%s, %s)", row, col)
            self._message("Invalid position or already occupied!")
            return False

        self._board_updated()
        if self._check_game_over(row, col, self.human.side):
            return True

        self.current_side = self.ai.side
        self._message("AI is thinking...")
        self.ai_move()
        return True

    def ai_move(self) -> Optional[Move]:
        if self.state != GameState.PLAYING or self.current_side != self.ai.side:
            return None

        move = self.engine.get_best_move(self._board, self.ai.side, self.difficulty.depth)
        if not self._board.place(move.row, move.col, move.side):
            self._message("AI cannot find a valid move")
            return None
        move = self._board.last_move()
        logger.info("AI played %s", move)

        self._board_updated()
        if self._check_game_over(move.row, move.col, self.ai.side):
            return move

        self.current_side = self.human.side
        self._message(f"AI played ({move.row}, {move.col}). Your turn!")
        return move

    def hint(self) -> Optional[Move]:
        """The move the engine would play for the human right now."""
        if self.state != GameState.PLAYING or self.current_side != self.human.side:
            return None
        return self.engine.get_best_move(self._board, self.human.side, self.difficulty.depth)

    def undo(self) -> bool:
        """Take back the AI reply and the human move before it."""
        if self.state != GameState.PLAYING:
            self._message("Game is not in progress!")
            return False
        if self._board.move_count < 2:
            self._message("Not enough moves to undo!")
            return False

        self._board.undo()
        self._board.undo()
        self.current_side = self.human.side
        self._board_updated()
        self._message("Undo complete. Your turn.")
        return True

    def redo(self) -> bool:
        """Replay a human move and the AI reply that followed it."""
        if self.state != GameState.PLAYING or self.current_side != self.human.side:
            self._message("Nothing to redo right now!")
            return False
        if len(self._board.undone_moves()) < 2:
            self._message("Nothing to redo!")
            return False

        for _ in range(2):
            move = self._board.redo()
            self._board_updated()
            if self._check_game_over(move.row, move.col, move.side):
                return True
        self.current_side = self.human.side
        self._message("Redo complete. Your turn.")
        return True

    def _check_game_over(self, row: int, col: int, side: Cell) -> bool:
        winner = side if check_win(self._board, row, col, side) else None
        if winner is None:
            # full rescan in case the incremental check missed a run
            winner = scan_board_for_winner(self._board)

        if winner is not None:
            self._set_state(GameState.BLACK_WIN if winner == Cell.BLACK else GameState.WHITE_WIN)
            if winner == self.human.side:
                self._message("Congratulations! You win!")
            else:
                self._message("AI wins! Better luck next time!")
            return True

        if self._board.is_full():
            self._set_state(GameState.DRAW)
            self._message("It's a draw!")
            return True
        return False

    def move_history(self) -> List[Move]:
        return self._board.move_history()

    def last_move(self) -> Optional[Move]:
        return self._board.last_move()
