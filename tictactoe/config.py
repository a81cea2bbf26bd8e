"""
Game configuration for TicTacToe.
Marks, opponent timing and logging settings.
"""

import os

from .game_state import Mark


class GameConfig:
    """
    Configuration for a game session.
    Override attributes on an instance, or read them from the environment
    with GameConfig.from_env().
    """

    # ==================== MARKS ====================
    FIRST_PLAYER = Mark.X        # Who moves first after mode select / reset
    OPPONENT_MARK = Mark.O       # Mark played by the automated opponent

    # ==================== OPPONENT ====================
    # Pause before the opponent's move shows up, in seconds
    OPPONENT_DELAY_SECONDS = 0.35

    # ==================== LOGGING ====================
    LOG_LEVEL = "WARNING"
    LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    @property
    def human_mark(self) -> Mark:
        return self.OPPONENT_MARK.opposite()

    @classmethod
    def from_env(cls) -> "GameConfig":
        """
        Build a config with overrides from TTT_OPPONENT_DELAY,
        TTT_OPPONENT_MARK and TTT_LOG_LEVEL.
        """
        config = cls()

        delay = os.getenv("TTT_OPPONENT_DELAY")
        if delay:
            try:
                config.OPPONENT_DELAY_SECONDS = float(delay)
            except ValueError:
                raise ValueError(f"TTT_OPPONENT_DELAY must be a number, got {delay!r}") from None
            if config.OPPONENT_DELAY_SECONDS < 0:
                raise ValueError("TTT_OPPONENT_DELAY must not be negative")

        mark = os.getenv("TTT_OPPONENT_MARK")
        if mark:
            try:
                config.OPPONENT_MARK = Mark(mark.upper())
            except ValueError:
                raise ValueError(f"TTT_OPPONENT_MARK must be X or O, got {mark!r}") from None

        level = os.getenv("TTT_LOG_LEVEL")
        if level:
            config.LOG_LEVEL = level.upper()

        return config
