"""
Tests for token-backed games.

Tests:
- Mint on start, transfer on pass, burn on forfeit and end
- Fresh token id per game
- Ledger failures are reported and commit nothing
"""

import pytest

from ..engine_core import (
    GameErrorCode,
    InMemoryTokenLedger,
    LedgerError,
)


class TestTokenLifecycle:
    """Tests for the happy path."""

    def test_start_mints_to_recipient(self, token_engine, ledger):
        token_engine.start("alice", "bob").raise_for_error()

        assert token_engine.token_backed
        assert token_engine.get_token_id() == 0
        assert ledger.owner_of(0) == "bob"
        assert token_engine.get_state().next_token_sequence == 1

    def test_pass_transfers(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        token_engine.pass_token("bob", "carol").raise_for_error()

        assert ledger.owner_of(0) == "carol"
        assert ledger.balance_of("bob") == 0

    def test_self_pass_keeps_token(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        assert token_engine.pass_token("bob", "bob").success
        assert ledger.owner_of(0) == "bob"

    def test_forfeit_burns(self, token_engine, ledger, clock):
        token_engine.start("alice", "bob")
        clock.set(11)

        assert token_engine.check_deadline().value is True
        assert not ledger.exists(0)
        assert ledger.burned == 1
        assert token_engine.get_token_id() is None

    def test_end_burns(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        token_engine.end("alice").raise_for_error()

        assert ledger.live_tokens == {}

    def test_each_game_mints_a_fresh_token(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        token_engine.end("alice")
        token_engine.start("alice", "carol")

        assert token_engine.get_token_id() == 1
        assert ledger.live_tokens == {1: "carol"}
        assert ledger.minted == 2

    def test_rejected_pass_does_not_touch_ledger(self, token_engine, ledger, clock):
        token_engine.start("alice", "bob")
        token_engine.pass_token("carol", "dave")
        clock.set(11)
        token_engine.pass_token("bob", "dave")

        assert ledger.owner_of(0) == "bob"

    def test_events_carry_token_id(self, token_engine):
        token_engine.start("alice", "bob")
        token_engine.pass_token("bob", "carol")
        assert [e.token_id for e in token_engine.events] == [0, 0]


class TestLedgerFailures:
    """A ledger failure leaves the game exactly as it was."""

    def test_mint_failure(self, token_engine, ledger):
        ledger.mint("mallory", 0)
        before = token_engine.get_state()

        result = token_engine.start("alice", "bob")

        assert result.error_code == GameErrorCode.LEDGER_ERROR
        assert "already minted" in result.error
        assert token_engine.get_state() == before
        assert not token_engine.is_active()
        assert list(token_engine.events) == []

    def test_transfer_failure(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        ledger.burn("bob", 0)
        before = token_engine.get_state()

        result = token_engine.pass_token("bob", "carol")

        assert result.error_code == GameErrorCode.LEDGER_ERROR
        assert token_engine.get_state() == before
        assert token_engine.get_holder() == "bob"

    def test_burn_failure_blocks_reset(self, token_engine, ledger, clock):
        token_engine.start("alice", "bob")
        ledger.transfer("bob", "mallory", 0)
        clock.set(11)
        before = token_engine.get_state()

        result = token_engine.check_deadline()

        assert not result.success
        assert result.error_code == GameErrorCode.LEDGER_ERROR
        assert token_engine.get_state() == before
        assert token_engine.is_active()

    def test_burn_failure_on_end(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        ledger.burn("bob", 0)

        result = token_engine.end("alice")

        assert result.error_code == GameErrorCode.LEDGER_ERROR
        assert token_engine.is_active()

    def test_engine_usable_after_failure(self, token_engine, ledger):
        ledger.mint("mallory", 0)
        assert not token_engine.start("alice", "bob").success

        ledger.burn("mallory", 0)
        assert token_engine.start("alice", "bob").success

    def test_raise_for_error_gives_ledger_error(self, token_engine, ledger):
        ledger.mint("mallory", 0)
        with pytest.raises(LedgerError):
            token_engine.start("alice", "bob").raise_for_error()


class TestInvalidIdentities:
    """Missing identities are rejected before the ledger is touched."""

    def test_pass_to_nobody(self, token_engine, ledger):
        token_engine.start("alice", "bob")
        before = token_engine.get_state()

        with pytest.raises(ValueError, match="recipient"):
            token_engine.pass_token("bob", None)

        assert ledger.live_tokens == {0: "bob"}
        assert token_engine.get_state() == before

    def test_start_without_initiator(self, token_engine, ledger):
        with pytest.raises(ValueError, match="initiator"):
            token_engine.start(None, "bob")

        assert ledger.live_tokens == {}
        assert not token_engine.is_active()
        assert token_engine.start("alice", "bob").success
        assert ledger.live_tokens == {0: "bob"}

    def test_start_with_blank_recipient(self, token_engine, ledger):
        with pytest.raises(ValueError, match="recipient"):
            token_engine.start("alice", "")

        assert ledger.minted == 0
        assert token_engine.get_state().next_token_sequence == 0

    def test_rejected_pass_checks_holder_first(self, token_engine):
        """A non-holder passing to nobody is still told they are not the holder."""
        token_engine.start("alice", "bob")
        result = token_engine.pass_token("carol", None)
        assert result.error_code == GameErrorCode.NOT_CURRENT_HOLDER


class TestInMemoryTokenLedger:
    """Tests for the reference ledger."""

    def test_double_mint(self):
        ledger = InMemoryTokenLedger()
        ledger.mint("bob", 1)
        with pytest.raises(LedgerError, match="already minted"):
            ledger.mint("carol", 1)

    def test_transfer_unknown_token(self):
        with pytest.raises(LedgerError, match="does not exist"):
            InMemoryTokenLedger().transfer("bob", "carol", 7)

    def test_transfer_by_non_owner(self):
        ledger = InMemoryTokenLedger()
        ledger.mint("bob", 1)
        with pytest.raises(LedgerError, match="does not own"):
            ledger.transfer("carol", "dave", 1)
        assert ledger.owner_of(1) == "bob"

    def test_burn(self):
        ledger = InMemoryTokenLedger()
        ledger.mint("bob", 1)
        ledger.burn("bob", 1)
        assert not ledger.exists(1)
        assert ledger.balance_of("bob") == 0
