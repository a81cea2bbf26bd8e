"""
Tests for the session state machine, the schedulers and the config.
"""

import asyncio

import pytest

from tictactoe import (
    AIPlayer,
    AsyncioScheduler,
    GameConfig,
    GameSession,
    ManualScheduler,
    Mark,
    Mode,
    Status,
)

X, O, _ = Mark.X, Mark.O, None


def first(options):
    return options[0]


def make_session(config=None, scheduler=None):
    config = config or GameConfig()
    config.OPPONENT_DELAY_SECONDS = 0
    return GameSession(
        config,
        ai=AIPlayer(config.OPPONENT_MARK, chooser=first),
        scheduler=scheduler or ManualScheduler()
    )


def play(session, *moves):
    for index in moves:
        assert session.apply_move(index), f"move {index} was rejected"


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def pvp(session):
    session.select_mode(Mode.PLAYER_VS_PLAYER)
    return session


@pytest.fixture
def pvo(session):
    session.select_mode(Mode.PLAYER_VS_OPPONENT)
    return session


class TestModeSelect:

    def test_starts_in_mode_select(self, session):
        snap = session.snapshot()
        assert snap.status == Status.MODE_SELECT
        assert snap.mode == Mode.UNSELECTED
        assert snap.status_message == "Pick a mode to start playing"
        assert snap.description == "Pick a mode to start playing"
        assert snap.playable_cells == ()

    def test_moves_ignored_before_mode(self, session):
        assert not session.apply_move(4)
        assert session.state.board == [None] * 9

    def test_reset_needs_a_mode(self, session):
        assert not session.reset()
        assert session.state.status == Status.MODE_SELECT

    def test_select_mode_starts_playing(self, session):
        assert session.select_mode(Mode.PLAYER_VS_PLAYER)
        snap = session.snapshot()
        assert snap.status == Status.PLAYING
        assert snap.current_player == X
        assert snap.status_message == "Player X's turn"
        assert snap.description == "Enjoy a classic game of strategy"
        assert snap.playable_cells == tuple(range(9))

    def test_mode_is_fixed_until_new_game(self, pvp):
        play(pvp, 4)
        assert not pvp.select_mode(Mode.PLAYER_VS_OPPONENT)
        assert pvp.state.mode == Mode.PLAYER_VS_PLAYER
        assert pvp.state.board[4] == X

    def test_unselected_is_not_a_mode(self, session):
        assert not session.select_mode(Mode.UNSELECTED)
        assert session.state.status == Status.MODE_SELECT


class TestApplyMove:

    def test_turn_alternates(self, pvp):
        seen = []
        for index in (0, 4, 8, 2, 6):
            seen.append(pvp.state.current_player)
            play(pvp, index)
        assert seen == [X, O, X, O, X]
        assert [m.move_number for m in pvp.state.moves] == [1, 2, 3, 4, 5]

    def test_occupied_cell_is_a_noop(self, pvp):
        play(pvp, 4)
        before = pvp.state.copy()

        assert not pvp.apply_move(4)
        assert pvp.state.board == before.board
        assert pvp.state.current_player == O
        assert len(pvp.state.moves) == 1

    @pytest.mark.parametrize("index", [-1, 9, 100, True, "3", None])
    def test_bad_index_is_a_noop(self, pvp, index):
        assert not pvp.apply_move(index)
        assert pvp.state.board == [None] * 9
        assert pvp.state.current_player == X

    def test_row_win(self, pvp):
        play(pvp, 0, 4, 1, 5, 2)
        snap = pvp.snapshot()
        assert snap.status == Status.WON
        assert snap.winner == X
        assert snap.highlighted_line == (0, 1, 2)
        assert snap.status_message == "Player X wins!"
        assert snap.playable_cells == ()

    def test_no_moves_after_win(self, pvp):
        play(pvp, 0, 4, 1, 5, 2)
        assert not pvp.apply_move(8)
        assert pvp.state.board[8] is None

    def test_tie(self, pvp):
        # X O X / X O O / O X X
        play(pvp, 0, 1, 2, 4, 3, 5, 7, 6, 8)
        snap = pvp.snapshot()
        assert snap.status == Status.TIED
        assert snap.winner is None
        assert snap.highlighted_line is None
        assert snap.status_message == "It's a tie!"

    def test_tie_with_o_first(self):
        config = GameConfig()
        config.FIRST_PLAYER = O
        session = make_session(config)
        session.select_mode(Mode.PLAYER_VS_PLAYER)

        # X O X / O X O / O X O
        play(session, 1, 0, 3, 2, 5, 4, 6, 7, 8)
        assert session.state.board == [X, O, X,
                                       O, X, O,
                                       O, X, O]
        assert session.state.status == Status.TIED


class TestResetAndNewGame:

    def test_reset_keeps_mode(self, pvp):
        play(pvp, 0, 4, 1, 5, 2)
        assert pvp.reset()

        state = pvp.state
        assert state.mode == Mode.PLAYER_VS_PLAYER
        assert state.status == Status.PLAYING
        assert state.board == [None] * 9
        assert state.current_player == X
        assert state.winner is None
        assert state.winning_line is None
        assert state.moves == []

    def test_new_game_goes_back_to_mode_select(self, pvp):
        play(pvp, 0, 4)
        generation = pvp.state.generation

        assert pvp.new_game()
        assert pvp.state.mode == Mode.UNSELECTED
        assert pvp.state.status == Status.MODE_SELECT
        assert pvp.state.board == [None] * 9
        assert pvp.state.generation == generation + 1

        assert pvp.select_mode(Mode.PLAYER_VS_OPPONENT)
        assert pvp.state.mode == Mode.PLAYER_VS_OPPONENT


class TestOpponent:

    def test_human_cannot_move_for_the_ai(self, pvo):
        play(pvo, 4)
        assert pvo.is_opponent_turn
        assert not pvo.apply_move(0)
        snap = pvo.snapshot()
        assert snap.status_message == "AI's turn (O)"
        assert snap.playable_cells == ()

    def test_opponent_move_waits_for_scheduler(self, pvo):
        play(pvo, 4)
        pending = pvo.request_opponent_move()

        assert pending is not None
        assert pending.index == 0
        assert pending.mark == O
        assert pvo.state.board[0] is None

        assert pvo.scheduler.run_pending() == 1
        assert pvo.state.board[0] == O
        assert pvo.state.current_player == X
        assert pvo.snapshot().status_message == "Your turn (X)"

    def test_no_request_on_human_turn(self, pvo):
        assert pvo.request_opponent_move() is None
        assert pvo.scheduler.pending == []

    def test_no_request_in_pvp(self, pvp):
        play(pvp, 4)
        assert pvp.request_opponent_move() is None

    def test_no_request_after_game_over(self, pvo):
        play(pvo, 4)
        pvo.state.status = Status.TIED
        assert pvo.request_opponent_move() is None

    def test_ai_wins_after_blunder(self, pvo):
        play(pvo, 0)
        pvo.request_opponent_move()
        pvo.scheduler.run_pending()
        assert pvo.state.board[4] == O

        play(pvo, 8)
        pvo.request_opponent_move()
        pvo.scheduler.run_pending()
        assert pvo.state.board[2] == O

        play(pvo, 1)
        pvo.request_opponent_move()
        pvo.scheduler.run_pending()

        snap = pvo.snapshot()
        assert snap.status == Status.WON
        assert snap.winner == O
        assert snap.highlighted_line == (2, 4, 6)
        assert snap.status_message == "Player O wins!"

    def test_stale_move_dropped_after_new_game(self, pvo):
        play(pvo, 4)
        pending = pvo.request_opponent_move()

        pvo.new_game()
        pvo.select_mode(Mode.PLAYER_VS_OPPONENT)
        pvo.scheduler.run_pending()

        assert pvo.state.board == [None] * 9
        assert pvo.state.current_player == X
        assert not pvo.resolve_opponent_move(pending)

    def test_filled_cell_drops_move_without_retry(self, pvo):
        play(pvo, 4)
        pending = pvo.request_opponent_move()
        pvo.state.board[pending.index] = X

        pvo.scheduler.run_pending()

        assert pvo.state.board[pending.index] == X
        assert pvo.state.board.count(O) == 0
        assert pvo.state.current_player == O
        assert pvo.scheduler.pending == []

    def test_reset_drops_pending_move(self, pvo):
        play(pvo, 4)
        pvo.request_opponent_move()
        pvo.reset()

        pvo.scheduler.run_pending()
        assert pvo.state.board == [None] * 9
        assert pvo.state.current_player == X

    def test_reset_drops_move_chosen_on_old_board(self, pvo):
        play(pvo, 4)
        old = pvo.request_opponent_move()
        assert old.index == 0
        pvo.reset()

        play(pvo, 8)
        pvo.request_opponent_move()
        assert pvo.scheduler.run_pending() == 2

        assert pvo.state.board[0] is None
        assert pvo.state.board[4] == O
        assert pvo.state.board.count(O) == 1
        assert not pvo.resolve_opponent_move(old)

    def test_reset_drops_move_chosen_on_old_board_when_ai_starts(self):
        config = GameConfig()
        config.OPPONENT_MARK = X
        session = make_session(config)
        session.select_mode(Mode.PLAYER_VS_OPPONENT)
        session.request_opponent_move()
        session.scheduler.run_pending()
        play(session, 0)

        old = session.request_opponent_move()
        assert old.index == 2
        session.reset()
        session.request_opponent_move()
        session.scheduler.run_pending()

        assert session.state.board == [_, _, _,
                                       _, X, _,
                                       _, _, _]
        assert session.state.current_player == O

    def test_ai_must_play_the_configured_mark(self):
        with pytest.raises(ValueError):
            GameSession(GameConfig(), ai=AIPlayer(X))

    def test_opponent_can_move_first(self):
        config = GameConfig()
        config.OPPONENT_MARK = X
        session = make_session(config)
        session.select_mode(Mode.PLAYER_VS_OPPONENT)

        assert session.is_opponent_turn
        assert session.snapshot().status_message == "AI's turn (X)"
        assert not session.apply_move(0)

        session.request_opponent_move()
        session.scheduler.run_pending()
        assert session.state.board[4] == X
        assert session.snapshot().status_message == "Your turn (O)"


class TestListeners:

    def test_notified_after_applied_commands_only(self, session):
        snapshots = []
        session.add_listener(snapshots.append)

        session.select_mode(Mode.PLAYER_VS_PLAYER)
        session.apply_move(0)
        session.apply_move(0)
        session.select_mode(Mode.PLAYER_VS_OPPONENT)

        assert len(snapshots) == 2
        assert snapshots[-1].board[0] == X

    def test_board_and_status_change_together(self, pvp):
        snapshots = []
        pvp.add_listener(snapshots.append)
        play(pvp, 0, 4, 1, 5, 2)

        last = snapshots[-1]
        assert last.board[2] == X
        assert last.status == Status.WON
        assert all(s.status == Status.PLAYING for s in snapshots[:-1])

    def test_deferred_move_notifies(self, pvo):
        play(pvo, 4)
        snapshots = []
        pvo.add_listener(snapshots.append)

        pvo.request_opponent_move()
        assert snapshots == []
        pvo.scheduler.run_pending()
        assert len(snapshots) == 1
        assert snapshots[0].move_count == 2

    def test_remove_listener(self, session):
        snapshots = []
        session.add_listener(snapshots.append)
        session.remove_listener(snapshots.append)
        session.select_mode(Mode.PLAYER_VS_PLAYER)
        assert snapshots == []


class TestAsyncioScheduler:

    def test_deferred_move_lands_after_await(self):
        async def scenario():
            session = make_session(scheduler=AsyncioScheduler())
            session.select_mode(Mode.PLAYER_VS_OPPONENT)
            play(session, 4)

            pending = session.request_opponent_move()
            assert session.state.board[pending.index] is None
            await pending.handle
            return session

        session = asyncio.run(scenario())
        assert session.state.board[0] == O
        assert session.state.current_player == X

    def test_new_game_cancels_in_flight_move(self):
        async def scenario():
            session = make_session(scheduler=AsyncioScheduler())
            session.select_mode(Mode.PLAYER_VS_OPPONENT)
            play(session, 4)

            pending = session.request_opponent_move()
            session.new_game()
            await pending.handle
            return session

        session = asyncio.run(scenario())
        assert session.state.board == [None] * 9
        assert session.state.status == Status.MODE_SELECT


class TestGameConfig:

    def test_defaults(self):
        config = GameConfig()
        assert config.FIRST_PLAYER == X
        assert config.OPPONENT_MARK == O
        assert config.human_mark == X
        assert config.OPPONENT_DELAY_SECONDS == pytest.approx(0.35)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TTT_OPPONENT_DELAY", "1.5")
        monkeypatch.setenv("TTT_OPPONENT_MARK", "x")
        monkeypatch.setenv("TTT_LOG_LEVEL", "debug")

        config = GameConfig.from_env()
        assert config.OPPONENT_DELAY_SECONDS == 1.5
        assert config.OPPONENT_MARK == X
        assert config.LOG_LEVEL == "DEBUG"
        # class defaults stay untouched
        assert GameConfig.OPPONENT_MARK == O

    @pytest.mark.parametrize("name,value", [
        ("TTT_OPPONENT_DELAY", "soon"),
        ("TTT_OPPONENT_DELAY", "-1"),
        ("TTT_OPPONENT_MARK", "Z"),
    ])
    def test_from_env_rejects_bad_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=name):
            GameConfig.from_env()
