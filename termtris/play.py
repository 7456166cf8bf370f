"""
Manual play mode.

Two producer threads feed a single queue of Actions:
  - a ticker that emits Action.TICK every ``tick_interval_ms``
  - a key reader that decodes terminal input into actions

The main thread is the only consumer and the only caller of the engine, so
the game state is never touched by two threads at once.
"""

from __future__ import annotations

import queue
import random
import sys
import threading
from typing import Any, TextIO

from termtris.game.tetris import Action, TetrisGame
from termtris.renderer import TetrisRenderer
from termtris.terminal import raw_mode, read_actions


def _tick_loop(events: queue.Queue, interval: float, stop: threading.Event) -> None:
    while not stop.wait(interval):
        events.put(Action.TICK)


def _input_loop(events: queue.Queue, fd: int) -> None:
    for action in read_actions(fd):
        events.put(action)
    # stdin closed: nothing more can be played
    events.put(Action.QUIT)


def run_events(
    game: TetrisGame,
    renderer: TetrisRenderer,
    events: queue.Queue,
) -> bool:
    """Consume actions one at a time until QUIT or game over.

    A frame is drawn before the first action and after each one.

    Args:
        game: The game to drive.
        renderer: Renderer bound to ``game``.
        events: Queue of Actions filled by the producers.

    Returns:
        True if the loop ended because the game is over, False on QUIT.
    """
    renderer.render()
    while True:
        action = events.get()
        if action == Action.QUIT:
            return False
        running = game.handle(action)
        renderer.render()
        if not running:
            renderer.render_game_over()
            return True


def play_manual(
    config: dict[str, Any],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> dict[str, Any]:
    """Run the game in manual (human) play mode in the terminal.

    The player uses keyboard controls:
      - Left/Right arrow or a/d: move piece
      - Up arrow or w: rotate clockwise
      - Down arrow or s: hard drop
      - z / Ctrl-C: quit

    Args:
        config: Config dict loaded from settings.yaml.
        stdin: Terminal input stream (default sys.stdin).
        stdout: Terminal output stream (default sys.stdout).

    Returns:
        The final game state dict.

    Raises:
        RuntimeError: If stdin is not a terminal.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    board_width = config.get("board_width", 10)
    board_height = config.get("board_height", 20)
    tick_interval_ms = config.get("tick_interval_ms", 500)
    style = config.get("style", "emoji")
    seed = config.get("seed")

    game = TetrisGame(board_width, board_height, rng=random.Random(seed))
    renderer = TetrisRenderer(game, style=style, stream=stdout)

    events: queue.Queue = queue.Queue()
    stop = threading.Event()

    with raw_mode(stdin) as fd:
        ticker = threading.Thread(
            target=_tick_loop,
            args=(events, tick_interval_ms / 1000.0, stop),
            daemon=True,
        )
        reader = threading.Thread(target=_input_loop, args=(events, fd), daemon=True)
        ticker.start()
        reader.start()
        try:
            run_events(game, renderer, events)
        finally:
            stop.set()
            renderer.close()

    state = game.get_state()
    print(
        ("Game over" if state["game_over"] else "Quit")
        + f" | Lines: {state['total_lines']}"
        + f" | Pieces: {state['pieces_locked']}",
        file=stdout,
    )
    return state
