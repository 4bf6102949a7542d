import argparse

from gomoku.config import CONFIG, Difficulty
from gomoku.core.board import Cell
from gomoku.core.utils import setup_logging
from gomoku.game import GameListener, GameService, GameState


class ConsoleListener(GameListener):
    def on_message(self, text: str):
        print(text)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play Gomoku against the engine.")
    parser.add_argument("--difficulty", choices=[d.name.lower() for d in Difficulty],
                        default=CONFIG.game.difficulty)
    parser.add_argument("--white", action="store_true", help="play White (the engine opens)")
    parser.add_argument("--log-level", default=CONFIG.log_level)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    game = GameService(Difficulty.from_name(args.difficulty),
                       Cell.WHITE if args.white else Cell.BLACK)
    game.add_listener(ConsoleListener())
    game.start_new_game()

    while game.state == GameState.PLAYING:
        print(game.board)
        print("----------------------------")

        command = input("Your move (row col | undo | redo | hint | quit): ").strip().lower()
        if command == "quit":
            break
        elif command == "undo":
            game.undo()
        elif command == "redo":
            game.redo()
        elif command == "hint":
            move = game.hint()
            if move:
                print(f"Engine suggests: ({move.row}, {move.col})")
        else:
            try:
                row, col = (int(x) for x in command.replace(",", " ").split())
            except ValueError:
                print("Enter a move as two numbers, e.g. 7 7")
                continue
            game.player_move(row, col)

    print(game.board)
    print("Game Over")
    print(f"Result: {game.state.value}")


if __name__ == "__main__":
    main()
