"""
AI player for TicTacToe.
Picks a move with a fixed priority list: win, block, center, corner, side.
"""

import logging
import random
from typing import Callable, List, Optional, Sequence

from .game_state import CENTER, CORNERS, SIDES, Board, Mark, empty_cells
from .win_checker import evaluate

logger = logging.getLogger(__name__)

# Picks one index out of a non-empty list
Chooser = Callable[[Sequence[int]], int]


def immediate_winning_moves(board: Board, mark: Mark) -> List[int]:
    """Empty cells where placing mark wins at once, scanning 0 to 8."""
    wins: List[int] = []
    for i in empty_cells(board):
        b = list(board)
        b[i] = mark
        if evaluate(b).winner == mark:
            wins.append(i)
    return wins


def choose_move(
    board: Board,
    player: Mark,
    opponent: Optional[Mark] = None,
    chooser: Chooser = random.choice
) -> int:
    """
    Choose a cell for player.

    Args:
        board: 9 cells, None for empty. Must have at least one empty cell.
        player: The mark being played.
        opponent: The mark to block (default: player's opposite).
        chooser: Picks among equally good corners or sides.

    Returns:
        Cell index (0-8).

    Raises:
        ValueError: If the board is full.
    """
    free = empty_cells(board)
    if not free:
        raise ValueError("No empty cell to choose from")

    if opponent is None:
        opponent = player.opposite()

    wins = immediate_winning_moves(board, player)
    if wins:
        logger.debug("%s takes the win at %d", player.value, wins[0])
        return wins[0]

    blocks = immediate_winning_moves(board, opponent)
    if blocks:
        logger.debug("%s blocks %s at %d", player.value, opponent.value, blocks[0])
        return blocks[0]

    if board[CENTER] is None:
        return CENTER

    corners = [i for i in CORNERS if board[i] is None]
    if corners:
        return chooser(corners)

    sides = [i for i in SIDES if board[i] is None]
    if sides:
        return chooser(sides)

    return free[0]


class AIPlayer:
    """
    An AI that plays TicTacToe from a fixed priority list.

    It takes a win when one is available, blocks the opponent's immediate
    win, then prefers the center, a corner and a side. It does not search
    ahead and can be beaten by forks.
    """

    def __init__(self, player: Mark = Mark.O, chooser: Optional[Chooser] = None):
        """
        Initialize the AI player.

        Args:
            player: Which mark the AI controls (default: O)
            chooser: Picks among equally good cells (default: random.choice)
        """
        self.player = player
        self.chooser = chooser or random.choice

    def get_best_move(self, board: Board) -> int:
        move = choose_move(board, self.player, self.player.opposite(), self.chooser)
        logger.debug("AI (%s) picks cell %d", self.player.value, move)
        return move
