"""
TicTacToe
=========
Rules, outcome detection, a heuristic opponent and the session state
machine for a two-player 3x3 game. Rendering and input live in the hosts
(main.py for the console, ui.py for Tkinter).
"""

from .game_state import GameState, Mark, Mode, Move, SessionSnapshot, Status, WINNING_LINES
from .win_checker import Outcome, OutcomeKind, WinChecker, evaluate
from .move_validator import MoveValidator, ValidationResult
from .ai_player import AIPlayer, choose_move, immediate_winning_moves
from .scheduler import AsyncioScheduler, ManualScheduler
from .config import GameConfig
from .session import GameSession, PendingMove

__version__ = "1.0.0"
