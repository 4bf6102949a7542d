import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from gomoku.config import CONFIG
from gomoku.core.board import Board, Cell, CENTER, Move
from gomoku.core.evaluator import Evaluator
from gomoku.core.line_scanner import check_win_at
from gomoku.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000000
WIN_SCORE = 100000

Grid = List[List[int]]
Position = Tuple[int, int]


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None,
                 search_width: Optional[int] = None, radius: Optional[int] = None):
        cfg = CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth or cfg.depth
        self.search_width = search_width or cfg.search_width
        self.radius = radius or cfg.neighbor_radius

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.nodes = 0
        self.last_score: Optional[int] = None

    def get_best_move(self, board: Board, ai_side: Cell, max_depth: Optional[int] = None) -> Move:
        """Pick the move for `ai_side`. Never fails; a full board yields the center."""
        self._stop_event.clear()
        return self._search(board.grid_copy(), board.move_count, ai_side, max_depth)

    def start_search(self, board: Board, ai_side: Cell, depth: Optional[int] = None,
                     callback: Optional[Callable[[Move, Optional[int]], None]] = None) -> bool:
        """Search on a daemon thread; `callback(move, score)` fires when it finishes."""
        if self._thread and self._thread.is_alive():
            return False
        self._stop_event.clear()
        # snapshot now so later board edits cannot race the worker
        grid = board.grid_copy()
        move_count = board.move_count

        def worker():
            move = self._search(grid, move_count, ai_side, depth)
            if callback:
                callback(move, self.last_score)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=0.2)

    def wait(self, timeout: Optional[float] = None):
        if self._thread:
            self._thread.join(timeout)

    @property
    def is_searching(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def _search(self, grid: Grid, move_count: int, ai_side: Cell, max_depth: Optional[int]) -> Move:
        depth = max(1, self.max_depth if max_depth is None else max_depth)
        ai_side = Cell(ai_side)
        opponent = ai_side.opponent
        self.nodes = 0
        self.last_score = None
        start_time = time.time()

        candidates = self.candidates(grid)
        if not candidates:
            return Move(CENTER[0], CENTER[1], ai_side, move_count + 1)

        best_pos: Optional[Position] = None
        best_score = -INF
        alpha = -INF
        beta = INF

        for row, col in self.order_candidates(grid, candidates, ai_side):
            if best_pos is not None and self._stop_event.is_set():
                break

            grid[row][col] = ai_side
            if check_win_at(grid, row, col, ai_side):
                grid[row][col] = Cell.EMPTY
                best_pos, best_score = (row, col), WIN_SCORE + depth
                break

            score = self._minimax(grid, depth - 1, alpha, beta, False, ai_side, opponent)
            grid[row][col] = Cell.EMPTY

            # strict: equal scores keep the earlier, better-ordered candidate
            if score > best_score:
                best_score = score
                best_pos = (row, col)

            alpha = max(alpha, score)

        self.last_score = best_score
        move = Move(best_pos[0], best_pos[1], ai_side, move_count + 1)
        logger.info(format_info(depth, best_score, self.nodes, time.time() - start_time, move, WIN_SCORE))
        return move

    def _minimax(self, grid: Grid, depth: int, alpha: int, beta: int, maximizing: bool,
                 ai_side: Cell, opponent: Cell) -> int:
        self.nodes += 1
        if depth == 0 or self._stop_event.is_set():
            return self.evaluator.evaluate_board(grid, ai_side, opponent)

        candidates = self.candidates(grid)
        if not candidates:
            return self.evaluator.evaluate_board(grid, ai_side, opponent)

        side = ai_side if maximizing else opponent
        moves = self.order_candidates(grid, candidates, side)[:self.search_width]

        if maximizing:
            max_eval = -INF
            for row, col in moves:
                grid[row][col] = side
                if check_win_at(grid, row, col, side):
                    grid[row][col] = Cell.EMPTY
                    return WIN_SCORE + depth  # sooner wins keep more depth

                score = self._minimax(grid, depth - 1, alpha, beta, False, ai_side, opponent)
                grid[row][col] = Cell.EMPTY

                max_eval = max(max_eval, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return max_eval
        else:
            min_eval = INF
            for row, col in moves:
                grid[row][col] = side
                if check_win_at(grid, row, col, side):
                    grid[row][col] = Cell.EMPTY
                    return -WIN_SCORE - depth

                score = self._minimax(grid, depth - 1, alpha, beta, True, ai_side, opponent)
                grid[row][col] = Cell.EMPTY

                min_eval = min(min_eval, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break
            return min_eval

    def candidates(self, grid: Grid) -> List[Position]:
        """Empty cells near any stone, row-major; the center on an empty grid."""
        size = len(grid)
        radius = self.radius
        near = set()
        has_stone = False
        for r in range(size):
            for c in range(size):
                if grid[r][c] == Cell.EMPTY:
                    continue
                has_stone = True
                for nr in range(max(0, r - radius), min(size, r + radius + 1)):
                    for nc in range(max(0, c - radius), min(size, c + radius + 1)):
                        if grid[nr][nc] == Cell.EMPTY:
                            near.add((nr, nc))
        if not has_stone:
            return [CENTER]
        return sorted(near)

    def order_candidates(self, grid: Grid, candidates: List[Position], side: Cell) -> List[Position]:
        # sorted() is stable, so ties stay in row-major order
        return sorted(candidates,
                      key=lambda p: self.evaluator.evaluate_position(grid, p[0], p[1], side),
                      reverse=True)
