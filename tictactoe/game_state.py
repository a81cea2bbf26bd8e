"""
Game state for TicTacToe.
Tracks the board, the selected mode, whose turn it is, and the game status.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field


class Mark(Enum):
    """The two marks a player can place."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the opposite mark."""
        return Mark.O if self == Mark.X else Mark.X


class Mode(Enum):
    """How the two marks are controlled."""
    UNSELECTED = "unselected"
    PLAYER_VS_PLAYER = "pvp"
    PLAYER_VS_OPPONENT = "ai"


class Status(Enum):
    """Where the session is in its lifecycle."""
    MODE_SELECT = "mode_select"
    PLAYING = "playing"
    WON = "won"
    TIED = "tied"


# Cell indices run 0-8, row = index // 3, col = index % 3
BOARD_CELLS = 9

# All winning lines, checked in this order
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)

CORNERS = (0, 2, 6, 8)
SIDES = (1, 3, 5, 7)
CENTER = 4

Board = List[Optional[Mark]]


def new_board() -> Board:
    """An empty board."""
    return [None] * BOARD_CELLS


def empty_cells(board: Board) -> List[int]:
    """Indices of the empty cells, in ascending order."""
    return [i for i, cell in enumerate(board) if cell is None]


@dataclass
class Move:
    """
    A move in the game.
    """
    mark: Mark              # Who made the move
    index: int              # Cell (0-8)
    move_number: int        # 1 for the first move of a game


@dataclass
class GameState:
    """
    The complete state of one game session.

    Tracks:
    - The 3x3 board as 9 cells (None means empty)
    - The selected mode
    - Current player's turn
    - Game status, winner and the winning line
    - Move history
    - A generation counter bumped on every new game
    """

    board: Board = field(default_factory=new_board)
    mode: Mode = Mode.UNSELECTED
    status: Status = Status.MODE_SELECT
    current_player: Mark = Mark.X

    winner: Optional[Mark] = None
    winning_line: Optional[Tuple[int, int, int]] = None

    generation: int = 0
    moves: List[Move] = field(default_factory=list)

    @property
    def is_game_over(self) -> bool:
        return self.status in (Status.WON, Status.TIED)

    def place(self, index: int) -> Move:
        """
        Write the current player's mark and pass the turn.

        No checks here; callers validate first (see MoveValidator).

        Args:
            index: Cell index (0-8).

        Returns:
            The recorded move.
        """
        move = Move(
            mark=self.current_player,
            index=index,
            move_number=len(self.moves) + 1
        )
        self.board[index] = move.mark
        self.moves.append(move)
        self.current_player = self.current_player.opposite()
        return move

    def clear(self, first_player: Mark) -> None:
        """Empty the board and forget the result of the last game."""
        self.board = new_board()
        self.current_player = first_player
        self.winner = None
        self.winning_line = None
        self.moves = []

    def get_empty_cells(self) -> List[int]:
        return empty_cells(self.board)

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            board=list(self.board),
            mode=self.mode,
            status=self.status,
            current_player=self.current_player,
            winner=self.winner,
            winning_line=self.winning_line,
            generation=self.generation,
            moves=list(self.moves)
        )

    def render(self) -> str:
        """Plain text board, winning cells in brackets."""
        highlighted = set(self.winning_line or ())
        rows = []
        for row in range(3):
            cells = []
            for col in range(3):
                index = row * 3 + col
                mark = self.board[index]
                text = mark.value if mark is not None else str(index + 1)
                cells.append(f"[{text}]" if index in highlighted else f" {text} ")
            rows.append("|".join(cells))
        return "\n---+---+---\n".join(rows)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session handed to hosts after every command."""
    board: Tuple[Optional[Mark], ...]
    mode: Mode
    status: Status
    current_player: Mark
    winner: Optional[Mark]
    highlighted_line: Optional[Tuple[int, int, int]]
    status_message: str
    description: str
    playable_cells: Tuple[int, ...]
    generation: int
    move_count: int
