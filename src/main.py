"""Entry point for the Gem Rush match-three engine.

Plays a headless session by picking random productive swaps until the session
ends, printing the board after every move. Useful for eyeballing cascades
and tuning scores without a renderer.
"""
from __future__ import annotations

import argparse
import logging
import random

from gemrush.components.board import Board
from gemrush.components.tile_types import SpecialEffect
from gemrush.config import SessionConfig
from gemrush.session import GameSession

SPECIAL_GLYPHS = {
    SpecialEffect.LINE_CLEAR: "=",
    SpecialEffect.COLOR_CLEAR: "*",
    SpecialEffect.AREA_CLEAR: "#",
}


def render_board(board: Board) -> str:
    lines = []
    for row in board.cells:
        cells = []
        for tile in row:
            if tile is None:
                cells.append(" .")
            elif tile.is_special:
                cells.append(tile.kind.value[0].upper() + SPECIAL_GLYPHS[tile.special])
            else:
                cells.append(" " + tile.kind.value[0].upper())
        lines.append(" ".join(cells))
    return "\n".join(lines)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a headless Gem Rush session with random moves")
    parser.add_argument("--seed", type=int, default=None, help="Seed for board generation and move choice")
    parser.add_argument("--size", type=int, default=8, help="Board edge length")
    parser.add_argument("--kinds", type=int, default=7, help="Number of tile kinds")
    parser.add_argument("--target", type=int, default=5000, help="Score needed to complete the session")
    parser.add_argument("--moves", type=int, default=30, help="Move budget")
    parser.add_argument("--quiet", action="store_true", help="Only print the final summary")
    parser.add_argument("--verbose", action="store_true", help="Enable debug-level logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = SessionConfig(
        rows=args.size,
        cols=args.size,
        type_count=args.kinds,
        target_score=args.target,
        move_limit=args.moves,
        seed=args.seed,
    )
    session = GameSession(config, rng=random.Random(args.seed))
    session.start()
    if not args.quiet:
        print(render_board(session.board))

    while not session.state.is_over:
        # Power-ups are spent as soon as they appear.
        specials = [pos for pos in session.board.positions() if session.board.get(pos).is_special]
        if specials:
            cleared = session.activate(specials[0])
            label = f"activate {specials[0]} -> {len(cleared)} cleared"
        else:
            move = session.hint_system.random_swap()
            if move is None:
                break
            result = session.try_move(*move)
            label = f"swap {move[0]} <-> {move[1]} depth={result.outcome.cascade_depth}"
        if not args.quiet:
            print(f"\n{label} | score={session.score} moves_left={session.state.moves_remaining}")
            print(render_board(session.board))

    print(f"\n{session.status.name}: score {session.score}/{config.target_score}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
