from __future__ import annotations

import argparse
import logging
import random

from caro.ai.caro_ai import CaroAI
from caro.ai.config import AI_LEVELS
from caro.app.match import Match
from caro.core.board import MAX_DIMENSION, MIN_DIMENSION, Player


def run_selfplay(size: int, lvl_x: int, lvl_o: int, seed: int | None, multiprocessing: bool) -> None:
    rng = random.Random(seed)
    agents = {
        Player.X: CaroAI(Player.X, size, lvl=lvl_x, use_multiprocessing=multiprocessing, rng=rng),
        Player.O: CaroAI(Player.O, size, lvl=lvl_o, use_multiprocessing=multiprocessing, rng=rng),
    }
    result = Match(size, agents).run()
    last = result.moves[-1].position if result.moves else None
    print(result.board.to_ascii(last_move=last))
    if result.winner is None:
        print(f"Draw after {len(result.moves)} moves")
    else:
        print(f"{result.winner} wins after {len(result.moves)} moves")


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("-v", "--verbose", action="store_true", help="Log search details")
    sub = ap.add_subparsers(dest="mode", required=True)

    ap_self = sub.add_parser("selfplay", help="Computer vs computer")
    ap_self.add_argument(
        "--size",
        type=int,
        default=15,
        choices=range(MIN_DIMENSION, MAX_DIMENSION + 1),
        metavar=f"[{MIN_DIMENSION}-{MAX_DIMENSION}]",
        help="Board dimension (default: 15)",
    )
    for side in ("x", "o"):
        ap_self.add_argument(
            f"--lvl-{side}",
            type=int,
            default=2,
            choices=sorted(AI_LEVELS),
            help=f"Computer level for {side.upper()}",
        )
    ap_self.add_argument("--seed", type=int, default=None)
    ap_self.add_argument(
        "--multiprocessing",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Score root moves in worker processes",
    )

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.mode == "selfplay":
        run_selfplay(args.size, args.lvl_x, args.lvl_o, args.seed, args.multiprocessing)


if __name__ == "__main__":
    main()
