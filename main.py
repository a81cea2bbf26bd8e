"""
Console host for TicTacToe.

Reads commands from the terminal, forwards them to a GameSession and
prints the board after every change. The opponent's move is a deferred
asyncio task, so the prompt waits for it the same way the GUI does.

Run this script to play TicTacToe in a terminal!
"""

import argparse
import asyncio
import logging
import random
import threading
from typing import Callable, Optional, Tuple

from tictactoe import AIPlayer, AsyncioScheduler, GameConfig, GameSession, Mark, Mode

logger = logging.getLogger(__name__)

MODE_CHOICES = {"pvp": Mode.PLAYER_VS_PLAYER, "ai": Mode.PLAYER_VS_OPPONENT}

HELP_TEXT = "Cells are 1-9 (left to right, top to bottom). r = reset, n = new game, q = quit"


def parse_command(text: str) -> Tuple[str, Optional[int]]:
    """
    Turn a line of input into a command.

    Returns:
        ("move", index 0-8), ("reset", None), ("new", None), ("quit", None)
        or ("unknown", None).
    """
    text = text.strip().lower()
    if text in ("q", "quit", "exit"):
        return "quit", None
    if text in ("r", "reset"):
        return "reset", None
    if text in ("n", "new"):
        return "new", None
    if text.isdigit() and 1 <= int(text) <= 9:
        return "move", int(text) - 1
    return "unknown", None


def parse_mode(text: str) -> Optional[Mode]:
    text = text.strip().lower()
    if text in ("1", "pvp"):
        return Mode.PLAYER_VS_PLAYER
    if text in ("2", "ai"):
        return Mode.PLAYER_VS_OPPONENT
    return None


class ConsoleGame:
    """
    Terminal front end for a GameSession.

    Game flow:
    1. Pick a mode (unless one was given on the command line)
    2. Type a cell number to play; against the AI, wait for its reply
    3. After a win or tie, reset (r), start over (n) or quit (q)
    """

    def __init__(
        self,
        config: GameConfig,
        mode: Optional[Mode] = None,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        seed: Optional[int] = None
    ):
        self.config = config
        self.initial_mode = mode
        self.input_func = input_func
        self.output = output

        rng = random.Random(seed)
        self.session = GameSession(
            config,
            ai=AIPlayer(config.OPPONENT_MARK, chooser=rng.choice),
            scheduler=AsyncioScheduler()
        )
        self.is_running = False
        self.last_winner: Optional[Mark] = None

    async def _read(self, prompt: str) -> str:
        """
        Wait for a line of input without blocking the loop.

        input() runs on a daemon thread, so a Ctrl-C or a finished game
        never waits on a pending read during shutdown.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def deliver(setter, value):
            if not future.done():
                setter(value)

        def worker():
            try:
                line = self.input_func(prompt)
            except Exception as e:
                outcome = (future.set_exception, e)
            else:
                outcome = (future.set_result, line)
            try:
                loop.call_soon_threadsafe(deliver, *outcome)
            except RuntimeError:
                # Loop already closed; nobody is waiting for this line
                logger.debug("Dropped input read after the loop closed")

        threading.Thread(target=worker, daemon=True).start()
        return await future

    def show(self) -> None:
        snapshot = self.session.snapshot()
        self.output("")
        self.output(self.session.state.render())
        self.output(snapshot.status_message)
        if snapshot.winner is not None:
            self.last_winner = snapshot.winner

    async def run(self) -> Optional[Mark]:
        """
        Play until the user quits or input runs out.

        Returns:
            The winner of the last finished game, if any.
        """
        self.is_running = True
        self.output(HELP_TEXT)

        while self.is_running:
            if self.session.state.mode == Mode.UNSELECTED:
                if not await self._choose_mode():
                    break
                self.show()

            if self.session.is_opponent_turn:
                await self._opponent_turn()
                continue

            try:
                line = await self._read("> ")
            except EOFError:
                break

            command, index = parse_command(line)
            if command == "quit":
                break
            elif command == "reset":
                self.session.reset()
            elif command == "new":
                self.session.new_game()
                continue
            elif command == "move":
                if not self.session.apply_move(index):
                    self.output("That move isn't allowed right now.")
                    continue
            else:
                self.output(HELP_TEXT)
                continue

            self.show()

        self.is_running = False
        return self.last_winner

    async def _choose_mode(self) -> bool:
        if self.initial_mode is not None:
            mode, self.initial_mode = self.initial_mode, None
            return self.session.select_mode(mode)

        while True:
            self.output("Pick a mode: 1 = Player vs Player, 2 = Player vs AI, q = quit")
            try:
                line = await self._read("mode> ")
            except EOFError:
                return False
            if line.strip().lower() in ("q", "quit"):
                return False
            mode = parse_mode(line)
            if mode is not None:
                return self.session.select_mode(mode)

    async def _opponent_turn(self) -> None:
        self.output("AI is thinking...")
        pending = self.session.request_opponent_move()
        logger.debug("Waiting on opponent move %s", pending)
        if pending is None:
            return
        await pending.handle
        self.show()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tictactoe", description="Play TicTacToe in the terminal")
    p.add_argument("--mode", choices=sorted(MODE_CHOICES), default=None,
                   help="Skip the mode prompt: pvp or ai")
    p.add_argument("--delay", type=float, default=None,
                   help="Seconds the AI waits before moving")
    p.add_argument("--opponent-mark", choices=["X", "O"], default=None,
                   help="Mark played by the AI")
    p.add_argument("--seed", type=int, default=None,
                   help="Seed for the AI's corner/side choices")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = GameConfig.from_env()
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    if args.delay is not None:
        if args.delay < 0:
            print("ERROR: --delay must not be negative")
            return 2
        config.OPPONENT_DELAY_SECONDS = args.delay
    if args.opponent_mark is not None:
        config.OPPONENT_MARK = Mark(args.opponent_mark)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT
    )

    mode = MODE_CHOICES.get(args.mode) if args.mode else None
    game = ConsoleGame(config, mode=mode, seed=args.seed)
    try:
        asyncio.run(game.run())
    except KeyboardInterrupt:
        print("\nGame quit by user.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
