from __future__ import annotations

import argparse
import dataclasses
import logging
from typing import Callable, Dict

import pygame

from tetromino_rl.game import GameConfig, TetrisGame
from .renderer import Renderer

PERFECT_CLEAR_BANNER_MS = 1500


def key_bindings(game: TetrisGame) -> Dict[int, Callable[[], object]]:
    return {
        pygame.K_LEFT: game.move_left,
        pygame.K_RIGHT: game.move_right,
        pygame.K_DOWN: game.rotate_clockwise,
        pygame.K_UP: game.rotate_counter_clockwise,
        pygame.K_SPACE: game.hard_drop,
        pygame.K_d: game.soft_drop,
        pygame.K_p: game.toggle_pause,
        pygame.K_r: game.new_game,
        pygame.K_RETURN: game.new_game,
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(config: GameConfig, cell_size: int = 30) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = TetrisGame(config, clock=lambda: float(pygame.time.get_ticks()))
        renderer = Renderer(cell_size=cell_size)
        bindings = key_bindings(game)

        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Tetromino")

        last_fall = pygame.time.get_ticks()
        banner_until = 0

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                        continue
                    command = bindings.get(event.key)
                    if command is not None:
                        command()
                        if command == game.new_game:
                            last_fall = pygame.time.get_ticks()

            # Gravity; the interval is re-read every frame since clears change it
            now = pygame.time.get_ticks()
            if game.paused or game.game_over:
                last_fall = now
            elif now - last_fall >= game.tick_interval_ms:
                game.tick()
                last_fall = now

            status = game.status()
            if status.perfect_clear:
                banner_until = now + PERFECT_CLEAR_BANNER_MS
            elif now < banner_until:
                status = dataclasses.replace(status, perfect_clear=True)

            renderer.draw(screen, game.get_state(), status)
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    config = GameConfig(width=args.width, height=args.height, random_seed=args.seed)
    run(config, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
