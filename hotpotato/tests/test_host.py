"""
Tests for the contract host (message-style surface).

Mirrors how a deployed game is called: the caller comes from the
environment and failures raise.
"""

import pytest

from ..engine_core import (
    DeadlinePassed,
    GameAlreadyActive,
    GameNotActive,
    NotCurrentHolder,
    NotGameStarter,
)


class TestContractHost:
    """Tests for ContractHost."""

    def test_new(self, host):
        assert host.get_deadline_blocks() == 10
        assert not host.is_active()
        assert host.get_holder() is None

    def test_start_records_caller_as_starter(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")

        assert host.is_active()
        assert host.get_holder() == "bob"
        assert host.get_game_starter() == "alice"

    def test_start_twice(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")
            with pytest.raises(GameAlreadyActive, match="Game already active"):
                host.start_game("charlie")

    def test_pass(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")
        with callers.as_caller("bob"):
            host.pass_potato("charlie")
        assert host.get_holder() == "charlie"

    def test_pass_wrong_holder(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")
        with callers.as_caller("charlie"):
            with pytest.raises(NotCurrentHolder, match="Not current holder"):
                host.pass_potato("alice")

    def test_pass_after_deadline(self, host, callers, clock):
        with callers.as_caller("alice"):
            host.start_game("bob")
        clock.set(11)
        with callers.as_caller("bob"):
            with pytest.raises(DeadlinePassed):
                host.pass_potato("charlie")

    def test_blocks_queries(self, host, callers, clock):
        clock.set(3)
        with callers.as_caller("alice"):
            host.start_game("bob")
        clock.set(7)

        assert host.get_last_passed_block() == 3
        assert host.get_remaining_blocks() == 6

    def test_end_game(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")
            host.end_game()

        assert not host.is_active()
        assert host.get_holder() is None

    def test_end_game_not_starter(self, host, callers):
        with callers.as_caller("alice"):
            host.start_game("bob")
        with callers.as_caller("bob"):
            with pytest.raises(NotGameStarter, match="Only starter can end"):
                host.end_game()

    def test_end_game_inactive(self, host, callers):
        with callers.as_caller("alice"):
            with pytest.raises(GameNotActive):
                host.end_game()

    def test_check_deadline_needs_no_caller(self, host, callers, clock):
        assert host.check_deadline() is False
        with callers.as_caller("alice"):
            host.start_game("bob")
        clock.set(11)
        assert host.check_deadline() is True
        assert host.check_deadline() is False

    def test_unsigned_check_records_no_actor(self, host, callers, clock):
        with callers.as_caller("alice"):
            host.start_game("bob")
        clock.set(11)
        host.check_deadline()
        assert host.engine.events[-1].actor is None

    def test_signed_check_records_actor(self, host, callers, clock):
        with callers.as_caller("alice"):
            host.start_game("bob")
        clock.set(11)
        with callers.as_caller("zed"):
            assert host.check_deadline() is True
        assert host.engine.events[-1].actor == "zed"
        assert host.engine.events[-1].holder == "bob"
