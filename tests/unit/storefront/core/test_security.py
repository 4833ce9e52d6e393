"""Tests for security utilities."""

import pytest

from src.storefront.core.security import (
    PASSWORD_ALGORITHM,
    hash_password,
    token_matches,
    verify_password,
)


class TestTokenMatches:
    """Test the static bearer token check."""

    def test_exact_bearer_token(self):
        assert token_matches("Bearer secret", "secret")

    @pytest.mark.parametrize(
        "header",
        [None, "", "secret", "Bearer", "Bearer other", "bearer secret", "Bearer secret "],
    )
    def test_rejects_anything_else(self, header):
        assert not token_matches(header, "secret")

    def test_empty_configured_token_never_matches(self):
        assert not token_matches("Bearer ", "")


class TestPasswords:
    """Test customer password hashing."""

    def test_hash_format(self):
        encoded = hash_password("529982", salt="abc")

        algorithm, iterations, salt, digest = encoded.split("$")
        assert algorithm == PASSWORD_ALGORITHM
        assert int(iterations) > 0
        assert salt == "abc"
        assert digest

    def test_random_salt(self):
        assert hash_password("529982") != hash_password("529982")

    def test_verify(self):
        encoded = hash_password("529982")

        assert verify_password("529982", encoded)
        assert not verify_password("529983", encoded)

    @pytest.mark.parametrize("encoded", [None, "", "plain", "md5$1$salt$hash", "x$y$z$w"])
    def test_verify_rejects_foreign_values(self, encoded):
        assert not verify_password("529982", encoded)
