"""
TicTacToe UI
A graphical interface for TicTacToe using Tkinter.

Shows:
- Mode selection (Player vs Player, Player vs AI)
- The 3x3 board, with the winning line highlighted
- Game status
- Reset and New Game controls
"""

import argparse
import logging
import random
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from tictactoe import AIPlayer, GameConfig, GameSession, Mark, Mode, SessionSnapshot, Status

logger = logging.getLogger(__name__)

COLORS = {
    "primary": "#3498db",
    "secondary": "#2ecc71",
    "accent": "#e67e22",
    "cell": "#f8f9fa",
    "background": "#ffffff",
}


class TkScheduler:
    """Runs deferred callbacks on the Tk event loop."""

    def __init__(self, root: tk.Tk):
        self.root = root

    def call_later(self, delay: float, callback: Callable[[], None]) -> str:
        return self.root.after(int(delay * 1000), callback)


class TicTacToeUI:
    """
    Main UI class for TicTacToe.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """Initialize the UI."""
        self.config = config or GameConfig()
        self.root = tk.Tk()

        rng = random.Random(seed)
        self.session = GameSession(
            self.config,
            ai=AIPlayer(self.config.OPPONENT_MARK, chooser=rng.choice),
            scheduler=TkScheduler(self.root)
        )
        self.session.add_listener(self._on_change)

        self._create_ui()
        self._on_change(self.session.snapshot())

    def _create_ui(self):
        """Create the Tkinter UI."""
        self.root.title("Tic Tac Toe")
        self.root.configure(bg=COLORS["background"])
        self.root.minsize(360, 480)

        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background=COLORS["background"])
        style.configure('TLabel', background=COLORS["background"], foreground='#333333',
                        font=('Segoe UI', 11))
        style.configure('Title.TLabel', font=('Segoe UI', 20, 'bold'), foreground=COLORS["primary"])
        style.configure('Status.TLabel', font=('Segoe UI', 13, 'bold'), foreground=COLORS["primary"])

        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=20, pady=20)

        ttk.Label(main_frame, text="Tic Tac Toe", style='Title.TLabel').pack(pady=(0, 5))
        self.description_label = ttk.Label(main_frame, text="")
        self.description_label.pack(pady=(0, 15))

        # Mode selector
        self.mode_frame = ttk.Frame(main_frame)
        for text, mode, color in (
            ("Player vs Player", Mode.PLAYER_VS_PLAYER, COLORS["primary"]),
            ("Player vs AI", Mode.PLAYER_VS_OPPONENT, COLORS["accent"]),
        ):
            tk.Button(
                self.mode_frame,
                text=text,
                font=('Segoe UI', 11, 'bold'),
                bg=color,
                fg='white',
                width=14,
                command=lambda m=mode: self._select_mode(m)
            ).pack(side=tk.LEFT, padx=5)

        # Game area (status, board, controls)
        self.game_frame = ttk.Frame(main_frame)

        self.status_label = ttk.Label(self.game_frame, text="", style='Status.TLabel')
        self.status_label.pack(pady=(0, 10))

        board_frame = ttk.Frame(self.game_frame)
        board_frame.pack()

        self.board_cells = []
        for index in range(9):
            cell = tk.Button(
                board_frame,
                text="",
                font=('Segoe UI', 28, 'bold'),
                width=3,
                height=1,
                bg=COLORS["cell"],
                relief='ridge',
                borderwidth=2,
                command=lambda i=index: self._cell_clicked(i)
            )
            cell.grid(row=index // 3, column=index % 3, padx=2, pady=2)
            self.board_cells.append(cell)

        control_frame = ttk.Frame(self.game_frame)
        control_frame.pack(pady=15)

        tk.Button(
            control_frame,
            text="Reset",
            font=('Segoe UI', 11, 'bold'),
            bg=COLORS["secondary"],
            fg='white',
            width=10,
            command=self._reset_game
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            control_frame,
            text="New Game",
            font=('Segoe UI', 11, 'bold'),
            bg=COLORS["accent"],
            fg='white',
            width=10,
            command=self.session.new_game
        ).pack(side=tk.LEFT, padx=5)

        self.root.protocol("WM_DELETE_WINDOW", self._quit)

    def _select_mode(self, mode: Mode):
        self.session.select_mode(mode)
        self._maybe_opponent_move()

    def _reset_game(self):
        """Reset the board, keeping the mode."""
        self.session.reset()
        self._maybe_opponent_move()

    def _cell_clicked(self, index: int):
        if self.session.apply_move(index):
            self._maybe_opponent_move()

    def _maybe_opponent_move(self):
        if self.session.is_opponent_turn:
            self.session.request_opponent_move()

    def _on_change(self, snapshot: SessionSnapshot):
        """Redraw everything from a session snapshot."""
        self.description_label.configure(text=snapshot.description)

        if snapshot.mode == Mode.UNSELECTED:
            self.game_frame.pack_forget()
            self.mode_frame.pack(pady=10)
            return

        self.mode_frame.pack_forget()
        self.game_frame.pack()

        if snapshot.status == Status.WON:
            color = COLORS["secondary"]
        elif snapshot.status == Status.TIED:
            color = COLORS["accent"]
        else:
            color = COLORS["primary"]
        self.status_label.configure(text=snapshot.status_message, foreground=color)

        highlighted = set(snapshot.highlighted_line or ())
        for index, cell in enumerate(self.board_cells):
            mark = snapshot.board[index]
            cell.configure(
                text=mark.value if mark is not None else "",
                fg=COLORS["primary"] if mark == Mark.X else COLORS["accent"],
                bg=COLORS["secondary"] if index in highlighted else COLORS["cell"],
                state='normal' if index in snapshot.playable_cells else 'disabled'
            )

    def _quit(self):
        """Quit the application."""
        logger.info("Quitting...")
        self.root.quit()
        self.root.destroy()

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="TicTacToe UI")
    parser.add_argument("--delay", type=float, default=None, help="Seconds the AI waits before moving")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the AI's corner/side choices")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        config = GameConfig.from_env()
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    if args.delay is not None:
        config.OPPONENT_DELAY_SECONDS = max(0.0, args.delay)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT
    )

    ui = TicTacToeUI(config, seed=args.seed)
    ui.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
