"""Tests for pymelview exceptions."""

from __future__ import annotations

from pymelview.exceptions import (
    AuthenticationError,
    AuthError,
    MelviewConnectionError,
    MelviewError,
    MelviewProtocolError,
    MelviewTimeoutError,
    NetworkError,
    ProtocolError,
)


class TestMelviewError:
    """Test MelviewError base exception."""

    def test_base_exception_inherits_from_exception(self) -> None:
        """Test that MelviewError inherits from Exception."""
        assert issubclass(MelviewError, Exception)

    def test_base_exception_message(self) -> None:
        """Test that MelviewError can be created with a message."""
        error = MelviewError("Test error message")
        assert str(error) == "Test error message"


class TestErrorTaxonomy:
    """Test the three error kinds and their aliases."""

    def test_all_inherit_from_base_error(self) -> None:
        """Test every error kind can be caught as MelviewError."""
        for error_type in (AuthenticationError, MelviewConnectionError, MelviewProtocolError, MelviewTimeoutError):
            assert issubclass(error_type, MelviewError)

    def test_timeout_is_a_network_error(self) -> None:
        """Test timeouts are reported as transport failures."""
        assert issubclass(MelviewTimeoutError, MelviewConnectionError)

    def test_kinds_are_distinct(self) -> None:
        """Test the three kinds do not overlap."""
        assert not issubclass(AuthenticationError, MelviewConnectionError)
        assert not issubclass(MelviewProtocolError, MelviewConnectionError)
        assert not issubclass(MelviewProtocolError, AuthenticationError)

    def test_aliases(self) -> None:
        """Test the short names refer to the same classes."""
        assert AuthError is AuthenticationError
        assert NetworkError is MelviewConnectionError
        assert ProtocolError is MelviewProtocolError
