"""
Integration test suite for the Gomoku engine.

Tests components working together end-to-end:
- Game service flow (human move, AI reply, wins, draws, undo/redo, hints)
- Listener notifications
- FastAPI REST API
- Engine vs engine self-play
"""

import pytest

from gomoku.config import Difficulty
from gomoku.core.board import BOARD_SIZE, CENTER, Cell
from gomoku.core.line_scanner import check_win, scan_board_for_winner
from gomoku.core.search import SearchEngine
from gomoku.game import GameListener, GameService, GameState


class RecordingListener(GameListener):
    def __init__(self):
        self.messages = []
        self.states = []
        self.updates = 0

    def on_board_updated(self):
        self.updates += 1

    def on_message(self, text):
        self.messages.append(text)

    def on_state_changed(self, state):
        self.states.append(state)


def no_five_side(row, col):
    """Fill pattern without any five in a row on any axis."""
    return Cell.BLACK if (col // 2 + row) % 2 == 0 else Cell.WHITE


@pytest.fixture
def game():
    g = GameService(Difficulty.EASY, Cell.BLACK)
    g.listener = RecordingListener()
    g.add_listener(g.listener)
    return g


# ════════════════════════════════════════════════════════════════════════════
#  GAME SERVICE FLOW
# ════════════════════════════════════════════════════════════════════════════


class TestGameFlow:
    def test_new_game_state(self, game):
        game.start_new_game()
        assert game.state == GameState.PLAYING
        assert game.current_side == Cell.BLACK
        assert game.board.move_count == 0
        assert game.listener.states == [GameState.PLAYING]

    def test_move_before_start_rejected(self, game):
        assert game.player_move(7, 7) is False
        assert game.board.move_count == 0
        assert "Game not started or already ended!" in game.listener.messages

    def test_player_move_gets_ai_reply(self, game):
        game.start_new_game()
        assert game.player_move(7, 7) is True
        history = game.move_history()
        assert len(history) == 2
        assert history[0].side == Cell.BLACK
        assert history[1].side == Cell.WHITE
        assert game.last_move() == history[1]
        assert game.current_side == Cell.BLACK
        assert game.state == GameState.PLAYING

    def test_occupied_cell_rejected(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        reply = game.last_move()
        assert game.player_move(reply.row, reply.col) is False
        assert game.board.move_count == 2
        assert "Invalid position or already occupied!" in game.listener.messages

    def test_out_of_range_rejected(self, game):
        game.start_new_game()
        assert game.player_move(15, 3) is False
        assert game.board.move_count == 0

    def test_ai_opens_when_human_is_white(self):
        g = GameService(Difficulty.EASY, Cell.WHITE)
        g.start_new_game()
        assert g.board.move_count == 1
        first = g.last_move()
        assert (first.row, first.col) == CENTER
        assert first.side == Cell.BLACK
        assert g.current_side == Cell.WHITE

    def test_side_change_waits_for_next_game(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        game.set_human_side(Cell.WHITE)
        assert game.human.side == Cell.BLACK
        assert game.ai.side == Cell.WHITE
        assert game.player_move(0, 0) is True
        assert game.board.move_count == 4

        game.start_new_game()
        assert game.human.side == Cell.WHITE
        assert game.ai.side == Cell.BLACK
        assert game.board.move_count == 1
        first = game.last_move()
        assert (first.row, first.col) == CENTER
        assert first.side == Cell.BLACK
        assert game.current_side == Cell.WHITE

    def test_side_change_applied_on_reset(self, game):
        game.set_human_side(Cell.WHITE)
        game.reset()
        assert game.human.side == Cell.WHITE
        assert game.ai.side == Cell.BLACK
        assert game.state == GameState.NOT_STARTED

    def test_human_win(self, game):
        game.start_new_game()
        for c in range(4):
            game.board.place(0, c, Cell.BLACK)
        assert game.player_move(0, 4)
        assert game.state == GameState.BLACK_WIN
        assert game.winner == Cell.BLACK
        assert game.board.move_count == 5
        assert "Congratulations! You win!" in game.listener.messages
        assert game.player_move(10, 10) is False

    def test_ai_completes_five(self, game):
        game.start_new_game()
        for c in range(4):
            game.board.place(14, c, Cell.WHITE)
        assert game.player_move(7, 7)
        last = game.last_move()
        assert (last.row, last.col) == (14, 4)
        assert game.state == GameState.WHITE_WIN
        assert game.winner == Cell.WHITE
        assert scan_board_for_winner(game.board) == Cell.WHITE

    def test_ai_blocks_four(self, game):
        game.start_new_game()
        for c in (3, 4, 5):
            game.board.place(7, c, Cell.BLACK)
        game.board.place(7, 2, Cell.WHITE)
        game.board.place(2, 12, Cell.WHITE)
        assert game.player_move(7, 6)
        last = game.last_move()
        assert (last.row, last.col) == (7, 7)
        assert game.state == GameState.PLAYING

    def test_draw_on_full_board(self, game):
        game.start_new_game()
        last_cell = (14, 13)
        assert no_five_side(*last_cell) == Cell.BLACK
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                if (r, c) != last_cell:
                    game.board.place(r, c, no_five_side(r, c))
        assert game.player_move(*last_cell)
        assert game.state == GameState.DRAW
        assert game.winner is None
        assert "It's a draw!" in game.listener.messages

    def test_undo_reverts_pair(self, game):
        game.start_new_game()
        assert game.player_move(7, 7)
        assert game.player_move(0, 0)
        assert game.undo() is True
        assert game.board.move_count == 2
        assert game.board.is_empty(0, 0)
        assert game.current_side == Cell.BLACK

    def test_undo_needs_two_moves(self, game):
        game.start_new_game()
        assert game.undo() is False
        assert "Not enough moves to undo!" in game.listener.messages

    def test_undo_after_game_over_rejected(self, game):
        game.start_new_game()
        for c in range(4):
            game.board.place(0, c, Cell.BLACK)
        game.player_move(0, 4)
        assert game.undo() is False

    def test_redo_replays_pair(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        history = game.move_history()
        game.undo()
        assert game.redo() is True
        assert game.move_history() == history
        assert game.current_side == Cell.BLACK

    def test_redo_invalidated_by_new_move(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        game.undo()
        game.player_move(3, 3)
        assert game.redo() is False

    def test_hint_is_legal(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        hint = game.hint()
        assert hint.side == Cell.BLACK
        assert game.board.is_empty(hint.row, hint.col)
        assert game.board.move_count == 2

    def test_set_difficulty(self, game):
        game.set_difficulty(Difficulty.HARD)
        assert game.difficulty.depth == 4
        assert any("Hard" in m for m in game.listener.messages)

    def test_reset(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        game.reset()
        assert game.state == GameState.NOT_STARTED
        assert game.board.move_count == 0

    def test_listener_removed(self, game):
        game.remove_listener(game.listener)
        game.start_new_game()
        assert game.listener.states == []

    def test_board_updates_notified(self, game):
        game.start_new_game()
        game.player_move(7, 7)
        # start, human placement, AI placement
        assert game.listener.updates == 3


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, game

        self.client = TestClient(app)
        self.game = game
        # Reset state before each test
        game.set_human_side(Cell.BLACK)
        self.client.post("/reset")
        self.client.post("/difficulty", json={"difficulty": "easy"})

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "not_started"
        assert data["move_count"] == 0
        assert len(data["cells"]) == BOARD_SIZE
        assert data["cells"][7] == "." * BOARD_SIZE

    def test_new_game(self):
        response = self.client.post("/new")
        assert response.status_code == 200
        assert response.json()["state"] == "playing"
        assert response.json()["current"] == "black"

    def test_move_before_new_game_returns_400(self):
        response = self.client.post("/move", json={"row": 7, "col": 7})
        assert response.status_code == 400

    def test_post_move_valid(self):
        self.client.post("/new")
        response = self.client.post("/move", json={"row": 7, "col": 7})
        assert response.status_code == 200
        data = response.json()
        assert data["move_count"] == 2
        assert data["cells"][7][7] == "X"
        assert data["history"][0] == {"row": 7, "col": 7, "side": "black", "number": 1}
        assert data["last_move"]["side"] == "white"

    def test_post_move_occupied(self):
        self.client.post("/new")
        self.client.post("/move", json={"row": 7, "col": 7})
        response = self.client.post("/move", json={"row": 7, "col": 7})
        assert response.status_code == 400

    def test_post_move_out_of_range(self):
        self.client.post("/new")
        response = self.client.post("/move", json={"row": 15, "col": 0})
        assert response.status_code == 422

    def test_search_empty_board(self):
        response = self.client.post("/search", json={"depth": 2})
        assert response.status_code == 200
        data = response.json()
        assert (data["best_move"]["row"], data["best_move"]["col"]) == CENTER
        assert data["depth"] == 2

    def test_search_does_not_move(self):
        self.client.post("/new")
        self.client.post("/move", json={"row": 7, "col": 7})
        response = self.client.post("/search")
        assert response.status_code == 200
        assert response.json()["best_move"]["side"] == "black"
        assert self.client.get("/board").json()["move_count"] == 2

    def test_search_game_over_returns_400(self):
        self.client.post("/new")
        for c in range(4):
            self.game.board.place(0, c, Cell.BLACK)
        self.client.post("/move", json={"row": 0, "col": 4})
        assert self.client.get("/board").json()["winner"] == "black"
        response = self.client.post("/search")
        assert response.status_code == 400

    def test_undo_redo(self):
        self.client.post("/new")
        self.client.post("/move", json={"row": 7, "col": 7})
        response = self.client.post("/undo")
        assert response.status_code == 200
        assert response.json()["move_count"] == 0
        response = self.client.post("/redo")
        assert response.status_code == 200
        assert response.json()["move_count"] == 2

    def test_undo_empty_returns_400(self):
        self.client.post("/new")
        assert self.client.post("/undo").status_code == 400
        assert self.client.post("/redo").status_code == 400

    def test_set_difficulty(self):
        response = self.client.post("/difficulty", json={"difficulty": "hard"})
        assert response.status_code == 200
        assert response.json() == {"difficulty": "Hard", "depth": 4}

    def test_set_difficulty_invalid(self):
        response = self.client.post("/difficulty", json={"difficulty": "grandmaster"})
        assert response.status_code == 400

    def test_new_game_as_white(self):
        response = self.client.post("/new", json={"human_side": "white"})
        assert response.status_code == 200
        data = response.json()
        assert data["human_side"] == "white"
        assert data["move_count"] == 1
        assert data["cells"][7][7] == "X"
        assert data["current"] == "white"

    def test_new_game_invalid_side(self):
        response = self.client.post("/new", json={"human_side": "empty"})
        assert response.status_code == 400

    def test_new_game_invalid_side_keeps_difficulty(self):
        response = self.client.post("/new", json={"difficulty": "hard", "human_side": "empty"})
        assert response.status_code == 400
        assert self.game.difficulty == Difficulty.EASY
        assert self.client.get("/board").json()["state"] == "not_started"

    def test_new_game_invalid_difficulty_keeps_side(self):
        response = self.client.post("/new", json={"difficulty": "grandmaster", "human_side": "white"})
        assert response.status_code == 400
        self.client.post("/new")
        assert self.client.get("/board").json()["human_side"] == "black"

    def test_reset_board(self):
        self.client.post("/new")
        self.client.post("/move", json={"row": 7, "col": 7})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["move_count"] == 0
        assert response.json()["state"] == "not_started"


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE
# ════════════════════════════════════════════════════════════════════════════


class TestSelfPlay:
    def test_engine_vs_engine_plays_legal_moves(self):
        """Short self-play game: every move is legal and win checks agree."""
        from gomoku.core.board import Board

        board = Board()
        black = SearchEngine(depth=1)
        white = SearchEngine(depth=2)
        side = Cell.BLACK
        for _ in range(12):
            engine = black if side == Cell.BLACK else white
            move = engine.get_best_move(board, side)
            assert board.place(move.row, move.col, side)
            won = check_win(board, move.row, move.col, side)
            assert (scan_board_for_winner(board) == side) == won
            if won:
                break
            side = side.opponent
        assert board.move_count >= 1
