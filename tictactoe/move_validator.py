"""
Move validator for TicTacToe.
Validates that moves follow the rules.
"""

from typing import Optional, List
from dataclasses import dataclass

from .game_state import BOARD_CELLS, GameState, Mark, Mode, Status


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. The game must be in progress
    2. Can only place on empty cells inside the board
    3. Against the automated opponent, outside input may only move the human mark
    """

    def __init__(self, opponent_mark: Mark = Mark.O):
        self.opponent_mark = opponent_mark

    def validate_move(self, game_state: GameState, index: int) -> ValidationResult:
        """
        Validate a move coming from outside input.

        Args:
            game_state: Current game state.
            index: Cell to place a mark on (0-8).

        Returns:
            ValidationResult with is_valid and error_message.
        """
        result = self._validate_placement(game_state, index)
        if not result.is_valid:
            return result

        if (game_state.mode == Mode.PLAYER_VS_OPPONENT
                and game_state.current_player == self.opponent_mark):
            return ValidationResult(
                is_valid=False,
                error_message=f"It's the opponent's turn ({self.opponent_mark.value})"
            )

        return ValidationResult(is_valid=True)

    def validate_opponent_move(self, game_state: GameState, index: int) -> ValidationResult:
        """Validate a move the automated opponent wants to make."""
        if game_state.mode != Mode.PLAYER_VS_OPPONENT:
            return ValidationResult(
                is_valid=False,
                error_message="No automated opponent in this mode"
            )

        if game_state.current_player != self.opponent_mark:
            return ValidationResult(
                is_valid=False,
                error_message=f"It's not {self.opponent_mark.value}'s turn"
            )

        return self._validate_placement(game_state, index)

    def _validate_placement(self, game_state: GameState, index: int) -> ValidationResult:
        if game_state.status != Status.PLAYING:
            return ValidationResult(
                is_valid=False,
                error_message=f"Game is not in progress ({game_state.status.value})"
            )

        # bool is an int subclass, but True is not a cell
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < BOARD_CELLS:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {index!r}. Must be 0-8."
            )

        if game_state.board[index] is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {game_state.board[index].value}"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, game_state: GameState) -> List[int]:
        """
        Get the cells outside input may currently play.

        Empty during the automated opponent's turn and once the game is over.
        """
        return [
            index for index in range(BOARD_CELLS)
            if self.validate_move(game_state, index).is_valid
        ]
