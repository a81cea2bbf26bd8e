"""
Win checker for TicTacToe.
Classifies a board as in progress, won (with the winning line) or tied.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .game_state import GameState, Mark, Status, WINNING_LINES

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    TIE = "tie"


@dataclass(frozen=True)
class Outcome:
    """
    Result of evaluating a board.

    winner and line are only set when kind is WIN.
    """
    kind: OutcomeKind
    winner: Optional[Mark] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls(OutcomeKind.IN_PROGRESS)

    @classmethod
    def win(cls, mark: Mark, line: Tuple[int, int, int]) -> "Outcome":
        return cls(OutcomeKind.WIN, winner=mark, line=line)

    @classmethod
    def tie(cls) -> "Outcome":
        return cls(OutcomeKind.TIE)

    @property
    def is_win(self) -> bool:
        return self.kind is OutcomeKind.WIN

    @property
    def is_tie(self) -> bool:
        return self.kind is OutcomeKind.TIE

    @property
    def is_in_progress(self) -> bool:
        return self.kind is OutcomeKind.IN_PROGRESS


def evaluate(board: Sequence[Optional[Mark]]) -> Outcome:
    """
    Evaluate a board.

    Lines are checked in WINNING_LINES order and the first complete one wins.
    A full board with no complete line is a tie.

    Args:
        board: 9 cells, None for empty.

    Returns:
        The Outcome.
    """
    for line in WINNING_LINES:
        a, b, c = line
        mark = board[a]
        if mark is not None and mark == board[b] == board[c]:
            return Outcome.win(mark, line)

    if all(cell is not None for cell in board):
        return Outcome.tie()

    return Outcome.in_progress()


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 of the same mark in a row
    (horizontally, vertically, or diagonally)
    """

    WINNING_LINES = WINNING_LINES

    def evaluate(self, game_state: GameState) -> Outcome:
        return evaluate(game_state.board)

    def check_winner(self, game_state: GameState) -> Optional[Mark]:
        """
        Check if there's a winner.

        Returns:
            The winning Mark, or None if no winner yet.
        """
        return self.evaluate(game_state).winner

    def check_draw(self, game_state: GameState) -> bool:
        """True when the board is full and nobody has won."""
        return self.evaluate(game_state).is_tie

    def get_winning_line(self, game_state: GameState) -> Optional[Tuple[int, int, int]]:
        return self.evaluate(game_state).line

    def update_game_state(self, game_state: GameState) -> Outcome:
        """
        Update the game state with winner/tie information.

        Args:
            game_state: The game state to update.

        Returns:
            The outcome that was applied.
        """
        outcome = self.evaluate(game_state)

        if outcome.is_win:
            game_state.status = Status.WON
            game_state.winner = outcome.winner
            game_state.winning_line = outcome.line
            logger.info("Player %s wins on line %s", outcome.winner.value, outcome.line)
        elif outcome.is_tie:
            game_state.status = Status.TIED
            game_state.winner = None
            game_state.winning_line = None
            logger.info("Game tied after %d moves", len(game_state.moves))
        else:
            game_state.status = Status.PLAYING
            game_state.winner = None
            game_state.winning_line = None

        return outcome
