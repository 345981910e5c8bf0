"""Tests for token storage and expiry."""

import pytest

from appnexus.api.services.token_state import TOKEN_LIFETIME, Token, TokenState


class TestTokenState:
    """Test TokenState expiry rules."""

    @pytest.fixture
    def state(self, clock):
        return TokenState(clock=clock)

    def test_lifetime_is_one_hour(self):
        assert TOKEN_LIFETIME == 3600

    def test_expired_without_token(self, state):
        """Test that a client that never authenticated reports expired."""
        assert state.token is None
        assert state.is_expired() is True

    def test_reference_time_used_without_token(self, state, clock):
        """Test the fallback issuance time when no token exists."""
        assert state.is_expired(reference_time=clock.now) is False
        assert state.is_expired(reference_time=clock.now - TOKEN_LIFETIME) is True

    def test_fresh_token_not_expired(self, state):
        state.set("authn:abc")

        assert state.value == "authn:abc"
        assert state.is_expired() is False

    def test_expires_after_lifetime(self, state, clock):
        """Test the boundary: expired once issued_at + lifetime <= now."""
        state.set("authn:abc")

        clock.advance(TOKEN_LIFETIME - 1)
        assert state.is_expired() is False

        clock.advance(1)
        assert state.is_expired() is True

    def test_token_ignores_reference_time(self, state, clock):
        """Test that an existing token's timestamp wins over reference_time."""
        state.set("authn:abc")

        assert state.is_expired(reference_time=0) is False

    def test_set_replaces_whole_token(self, state, clock):
        first = state.set("authn:one")
        clock.advance(10)
        second = state.set("authn:two")

        assert first is not second
        assert first.value == "authn:one"
        assert state.token == Token(value="authn:two", issued_at=clock.now)

    def test_clear(self, state):
        state.set("authn:abc")
        state.clear()

        assert state.token is None
        assert state.value is None
        assert state.is_expired() is True

    def test_age(self, state, clock):
        assert state.age() is None

        state.set("authn:abc")
        clock.advance(42)

        assert state.age() == pytest.approx(42)

    def test_repr_hides_value(self):
        token = Token(value="authn:secret", issued_at=1.0)

        assert "secret" not in repr(token)
