"""
Session state machine for TicTacToe.

Owns one GameState and applies the host's commands to it:
select_mode, apply_move, request_opponent_move, reset and new_game.
Invalid commands are no-ops that return False.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .ai_player import AIPlayer
from .config import GameConfig
from .game_state import GameState, Mark, Mode, SessionSnapshot, Status
from .move_validator import MoveValidator
from .scheduler import ManualScheduler
from .win_checker import WinChecker

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


@dataclass
class PendingMove:
    """An opponent move waiting for its delay to pass."""
    index: int
    mark: Mark
    generation: int
    board_round: int = 0  # which board it was chosen on
    handle: Any = None    # whatever the scheduler returned


class GameSession:
    """
    Drives one game from mode selection to a win or a tie.

    Game flow:
    1. Host picks a mode (player vs player, or player vs opponent)
    2. Host forwards cell clicks to apply_move
    3. Against the opponent, the host calls request_opponent_move when
       it's the opponent's turn; the move lands after the configured delay
    4. reset starts over in the same mode, new_game goes back to mode select
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        ai: Optional[AIPlayer] = None,
        scheduler=None
    ):
        """
        Args:
            config: Settings (default: GameConfig()).
            ai: Opponent strategy (default: AIPlayer for config.OPPONENT_MARK).
            scheduler: Anything with call_later(delay, callback)
                (default: ManualScheduler).

        Raises:
            ValueError: If ai plays a different mark than config.OPPONENT_MARK.
        """
        self.config = config or GameConfig()
        self.ai = ai or AIPlayer(self.config.OPPONENT_MARK)
        if self.ai.player != self.config.OPPONENT_MARK:
            raise ValueError(
                f"AI plays {self.ai.player.value} but config says {self.config.OPPONENT_MARK.value}"
            )
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()

        self.validator = MoveValidator(self.ai.player)
        self.win_checker = WinChecker()
        self.state = GameState(current_player=self.config.FIRST_PLAYER)

        self._listeners: List[Listener] = []
        # Bumped whenever the board is cleared
        self._board_round = 0

    # ==================== COMMANDS ====================

    def select_mode(self, mode: Mode) -> bool:
        """Pick a mode and start playing. Ignored once a mode is set."""
        if self.state.mode != Mode.UNSELECTED:
            logger.debug("Mode already selected (%s), ignoring", self.state.mode.value)
            return False
        if mode == Mode.UNSELECTED:
            return False

        self.state.mode = mode
        self._restart()
        logger.info("Mode selected: %s", mode.value)
        self._notify()
        return True

    def apply_move(self, index: int) -> bool:
        """
        Place the current player's mark from outside input.

        Returns:
            True if the move was applied, False if it was ignored.
        """
        result = self.validator.validate_move(self.state, index)
        if not result.is_valid:
            logger.debug("Move %r ignored: %s", index, result.error_message)
            return False

        self._place(index)
        return True

    def request_opponent_move(self) -> Optional[PendingMove]:
        """
        Pick the opponent's move and schedule it.

        Only acts in player-vs-opponent mode, while playing, on the
        opponent's turn.

        Returns:
            The scheduled PendingMove, or None if nothing was scheduled.
        """
        state = self.state
        if (state.mode != Mode.PLAYER_VS_OPPONENT
                or state.status != Status.PLAYING
                or state.current_player != self.ai.player):
            return None

        index = self.ai.get_best_move(state.board)
        pending = PendingMove(
            index=index,
            mark=self.ai.player,
            generation=state.generation,
            board_round=self._board_round
        )
        pending.handle = self.scheduler.call_later(
            self.config.OPPONENT_DELAY_SECONDS,
            lambda: self.resolve_opponent_move(pending)
        )
        logger.debug("Opponent will play %d after %.2fs", index, self.config.OPPONENT_DELAY_SECONDS)
        return pending

    def resolve_opponent_move(self, pending: PendingMove) -> bool:
        """
        Apply a scheduled opponent move, or drop it if it went stale.

        A move from an earlier game or an earlier board, or one whose cell
        got filled in the meantime, is discarded and not replaced.
        """
        if pending.generation != self.state.generation:
            logger.debug("Dropping opponent move %d from game %d", pending.index, pending.generation)
            return False

        if pending.board_round != self._board_round:
            logger.debug("Dropping opponent move %d chosen before a reset", pending.index)
            return False

        result = self.validator.validate_opponent_move(self.state, pending.index)
        if not result.is_valid:
            logger.debug("Dropping opponent move %d: %s", pending.index, result.error_message)
            return False

        self._place(pending.index)
        return True

    def reset(self) -> bool:
        """Clear the board and play again in the same mode."""
        if self.state.mode == Mode.UNSELECTED:
            return False

        self._restart()
        logger.info("Board reset")
        self._notify()
        return True

    def new_game(self) -> bool:
        """Go back to mode select. Pending opponent moves become stale."""
        self.state.mode = Mode.UNSELECTED
        self.state.generation += 1
        self._restart()
        logger.info("New game (generation %d)", self.state.generation)
        self._notify()
        return True

    # ==================== OBSERVERS ====================

    def add_listener(self, listener: Listener) -> None:
        """Call listener with a fresh snapshot after every applied command."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    @property
    def is_opponent_turn(self) -> bool:
        return (self.state.mode == Mode.PLAYER_VS_OPPONENT
                and self.state.status == Status.PLAYING
                and self.state.current_player == self.ai.player)

    def status_message(self) -> str:
        state = self.state
        if state.status == Status.MODE_SELECT:
            return "Pick a mode to start playing"
        if state.status == Status.WON:
            return f"Player {state.winner.value} wins!"
        if state.status == Status.TIED:
            return "It's a tie!"

        mark = state.current_player.value
        if state.mode == Mode.PLAYER_VS_OPPONENT:
            if state.current_player == self.ai.player:
                return f"AI's turn ({mark})"
            return f"Your turn ({mark})"
        return f"Player {mark}'s turn"

    def snapshot(self) -> SessionSnapshot:
        state = self.state
        if state.mode == Mode.UNSELECTED:
            description = "Pick a mode to start playing"
        else:
            description = "Enjoy a classic game of strategy"

        return SessionSnapshot(
            board=tuple(state.board),
            mode=state.mode,
            status=state.status,
            current_player=state.current_player,
            winner=state.winner,
            highlighted_line=state.winning_line,
            status_message=self.status_message(),
            description=description,
            playable_cells=tuple(self.validator.get_valid_moves(state)),
            generation=state.generation,
            move_count=len(state.moves)
        )

    # ==================== INTERNALS ====================

    def _place(self, index: int) -> None:
        # Board and status change together before anyone is notified
        move = self.state.place(index)
        self.win_checker.update_game_state(self.state)
        logger.debug("Move %d: %s at %d", move.move_number, move.mark.value, move.index)
        self._notify()

    def _restart(self) -> None:
        self._board_round += 1
        self.state.clear(self.config.FIRST_PLAYER)
        if self.state.mode == Mode.UNSELECTED:
            self.state.status = Status.MODE_SELECT
        else:
            self.state.status = Status.PLAYING

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
