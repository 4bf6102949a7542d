import logging


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_info(depth, score, nodes, elapsed, move, WIN_SCORE):
    nps = int(nodes / elapsed) if elapsed > 0 else 0

    if WIN_SCORE <= abs(score) <= WIN_SCORE + depth:
        # win scores carry the remaining depth of the node that completed five
        win_in = depth - (abs(score) - WIN_SCORE) + 1
        score_str = f"win {win_in if score > 0 else -win_in}"
    else:
        score_str = f"cp {score}"

    move_str = f"{move.row},{move.col}" if move else "-"
    return f"info depth {depth} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)} move {move_str}"
