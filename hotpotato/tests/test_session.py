"""
Tests for sessions, the game loop and pass policies.
"""

import random

import pytest

from ..bots import HoardingPolicy, HolderView, LastMomentPolicy, RandomPassPolicy, POLICIES
from ..engine_core import EventKind, IntervalClock
from ..session import GameLoop, GameSessionManager, LoopState, SessionState


class TestSessionManager:
    """Tests for GameSessionManager."""

    def test_create_game_defaults(self, manager):
        session = manager.create_game()

        assert session.engine.get_deadline_window() == 10
        assert not session.token_backed
        assert session.state == SessionState.WAITING
        assert manager.get_game(session.game_id) is session

    def test_create_token_backed_game(self, manager):
        session = manager.create_game(deadline_window=3, token_backed=True)

        assert session.token_backed
        assert session.engine.token_backed
        session.engine.start("alice", "bob").raise_for_error()
        assert session.ledger.owner_of(0) == "bob"

    def test_games_share_clock(self, manager, clock):
        first = manager.create_game()
        second = manager.create_game()
        assert first.engine.clock is clock
        assert second.engine.clock is clock

    def test_explicit_game_id(self, manager):
        manager.create_game(game_id="lobby")
        with pytest.raises(ValueError):
            manager.create_game(game_id="lobby")

    def test_invalid_window(self, manager):
        with pytest.raises(ValueError):
            manager.create_game(deadline_window=-1)

    def test_session_state_follows_engine(self, manager):
        session = manager.create_game()
        session.engine.start("alice", "bob")
        assert session.state == SessionState.PLAYING
        assert manager.list_active_games() == [session.game_id]

    def test_remove_game(self, manager):
        session = manager.create_game()

        assert manager.remove_game(session.game_id)
        assert session.state == SessionState.CLOSED
        assert manager.get_game(session.game_id) is None
        assert not manager.remove_game(session.game_id)

    def test_list_games(self, manager):
        ids = [manager.create_game().game_id for _ in range(3)]
        assert sorted(manager.list_games()) == sorted(ids)

    def test_cleanup_keeps_playing_games(self, manager):
        idle = manager.create_game()
        playing = manager.create_game()
        playing.engine.start("alice", "bob")

        removed = manager.cleanup_stale_games(max_age_seconds=-1)

        assert removed == [idle.game_id]
        assert manager.list_games() == [playing.game_id]

    def test_invalid_default_window(self):
        with pytest.raises(ValueError):
            GameSessionManager(default_deadline_window=-1)

    def test_default_clock(self):
        manager = GameSessionManager(default_deadline_window=4)
        assert manager.clock.now() == 0
        assert manager.create_game().engine.get_deadline_window() == 4


class TestPolicies:
    """Tests for pass policies."""

    @pytest.fixture
    def view(self):
        return HolderView(holder="bob", players=("alice", "bob", "carol"), tick=3, remaining_ticks=4)

    def test_others_excludes_holder(self, view):
        assert view.others == ["alice", "carol"]

    def test_random_always(self, view):
        decision = RandomPassPolicy(pass_probability=1.0).decide(view, random.Random(0))
        assert decision.passes
        assert decision.recipient in ("alice", "carol")

    def test_random_never(self, view):
        assert not RandomPassPolicy(pass_probability=0.0).decide(view, random.Random(0)).passes

    def test_random_probability_bounds(self):
        with pytest.raises(ValueError):
            RandomPassPolicy(pass_probability=1.5)

    def test_last_moment(self, view):
        policy = LastMomentPolicy()
        assert not policy.decide(view, random.Random(0)).passes

        at_deadline = HolderView(holder="bob", players=("alice", "bob"), tick=10, remaining_ticks=0)
        assert policy.decide(at_deadline, random.Random(0)).recipient == "alice"

    def test_solo_player_passes_to_self(self):
        view = HolderView(holder="bob", players=("bob",), tick=0, remaining_ticks=0)
        assert LastMomentPolicy().decide(view, random.Random(0)).recipient == "bob"

    def test_registry(self):
        assert set(POLICIES) == {"random", "last_moment", "hoarding"}


class TestGameLoop:
    """Tests for the simulation driver."""

    def test_hoarder_forfeits(self, manager):
        session = manager.create_game(deadline_window=10)
        loop = GameLoop(session, {"alice": HoardingPolicy(), "bob": HoardingPolicy()})

        result = loop.run(starter="alice", first_holder="bob")

        assert result.loop_state == LoopState.FORFEITED
        assert result.ticks == 11
        assert result.passes == 0
        assert result.forfeited_by == "bob"
        assert [e.kind for e in result.events] == [EventKind.STARTED, EventKind.FORFEITED]
        assert not session.engine.is_active()

    def test_last_moment_players_never_forfeit(self, manager):
        session = manager.create_game(deadline_window=10)
        loop = GameLoop(session, {"alice": LastMomentPolicy(), "bob": LastMomentPolicy()})

        result = loop.run(starter="alice", first_holder="bob", max_ticks=25)

        assert result.loop_state == LoopState.TICK_LIMIT
        assert result.passes == 2
        assert session.engine.get_holder() == "bob"
        assert [e.tick for e in result.events if e.kind == EventKind.PASSED] == [10, 20]

    def test_seeded_runs_repeat(self):
        def play(seed):
            session = GameSessionManager().create_game(deadline_window=2, token_backed=True)
            policies = {p: RandomPassPolicy(0.3) for p in ("a", "b", "c")}
            return GameLoop(session, policies, seed=seed).run("a", "b", max_ticks=200)

        first, second = play(11), play(11)
        assert [e.to_dict() for e in first.events] == [e.to_dict() for e in second.events]

    def test_token_backed_forfeit_burns(self, manager):
        session = manager.create_game(deadline_window=1, token_backed=True)
        GameLoop(session, {"bob": HoardingPolicy()}).run("alice", "bob")
        assert session.ledger.live_tokens == {}

    def test_needs_manual_clock(self):
        manager = GameSessionManager(clock=IntervalClock(time_source=lambda: 0.0))
        session = manager.create_game()
        with pytest.raises(TypeError):
            GameLoop(session, {"bob": HoardingPolicy()})

    def test_needs_players(self, manager):
        with pytest.raises(ValueError):
            GameLoop(manager.create_game(), {})
