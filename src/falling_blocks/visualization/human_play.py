from __future__ import annotations

import logging
from typing import Dict

import pygame

from falling_blocks.game import Command, GameSession, JsonHighScoreStore, ManualScheduler
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_ESCAPE: Command.TOGGLE_PAUSE,
    pygame.K_RETURN: Command.START_GAME,
    pygame.K_r: Command.RESET_GAME,
}


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="[FALLING_BLOCKS] %(asctime)s - %(message)s")
    pygame.init()
    try:
        clock = pygame.time.Clock()
        scheduler = ManualScheduler()
        session = GameSession(scheduler=scheduler, store=JsonHighScoreStore())
        renderer = Renderer(cell_size=28)
        font = pygame.font.SysFont(None, 28)

        screen = pygame.display.set_mode(renderer.window_size(session.snapshot()))
        pygame.display.set_caption("Falling Blocks")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    command = KEY_TO_COMMAND.get(event.key)
                    if command is not None:
                        session.dispatch(command)

            # Gravity and clear delays fire from here
            scheduler.advance(clock.tick(60))

            renderer.draw(screen, session.snapshot(), font)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
