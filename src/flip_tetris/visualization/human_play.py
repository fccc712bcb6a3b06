from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional, Sequence

import pygame

from flip_tetris.game import Action, GameConfig, GamePhase, TetrisEngine
from flip_tetris.storage import HighScoreStore
from .renderer import THEMES, Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
    pygame.K_h: Action.HOLD,
    pygame.K_p: Action.PAUSE,
    pygame.K_ESCAPE: Action.PAUSE,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Flip Tetris")
    p.add_argument("--variant", choices=["classic", "flip"], default="classic")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--width", type=int, default=20)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--theme", choices=sorted(THEMES), default="dark")
    p.add_argument("--highscore-file", type=str, default=None)
    p.add_argument("--log-level", default="INFO")
    return p


def make_config(args: argparse.Namespace) -> GameConfig:
    factory = GameConfig.flip if args.variant == "flip" else GameConfig.classic
    return factory(width=args.width, height=args.height, random_seed=args.seed)


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(name)s] %(asctime)s - %(message)s")

    engine = TetrisEngine(make_config(args), store=HighScoreStore(args.highscore_file))
    renderer = Renderer(theme=args.theme)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        screen = pygame.display.set_mode(renderer.window_size(engine.grid.width, engine.grid.height))
        pygame.display.set_caption(f"Flip Tetris - {args.variant}")

        running = True
        while running:
            dt = clock.tick(60)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_RETURN:
                        if engine.phase is GamePhase.START:
                            engine.start()
                        elif engine.phase is GamePhase.GAME_OVER:
                            engine.restart()
                    elif event.key == pygame.K_r:
                        engine.restart()
                    elif event.key == pygame.K_q:
                        engine.go_home()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            engine.apply(action)

            engine.tick(dt)
            renderer.draw(screen, engine.snapshot())
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
