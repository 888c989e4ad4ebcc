"""Unit tests for the token service (no database)."""

import base64
import json
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from bookshelf.auth.tokens import TokenService
from bookshelf.errors import InvalidTokenError


@pytest.fixture
def secret_key():
    return "test-secret-key-for-testing-only"


@pytest.fixture
def token_service(secret_key):
    return TokenService(
        secret_key=secret_key,
        algorithm="HS256",
        issuer="test-bookshelf",
        audience="test-api",
    )


class TestTokenService:
    """Test issuing and verifying tokens."""

    def test_issue_and_verify(self, token_service):
        """Test that an issued token verifies and carries the identity claims."""
        token = token_service.issue({"username": "reader", "id": "1234"})

        claims = token_service.verify(token)
        assert claims["username"] == "reader"
        assert claims["id"] == "1234"
        assert claims["iss"] == "test-bookshelf"
        assert claims["aud"] == "test-api"

    def test_registered_claims_cannot_be_overridden(self, token_service):
        """Test that caller claims never replace issuer, audience or issue time."""
        token = token_service.issue(
            {"username": "reader", "id": "1234", "iss": "elsewhere", "aud": "other-api", "iat": 0}
        )

        claims = token_service.verify(token)
        assert claims["iss"] == "test-bookshelf"
        assert claims["aud"] == "test-api"
        assert claims["iat"] > 0
        assert "exp" not in claims

    def test_no_expiry_by_default(self, token_service):
        """Test that tokens are not time-limited unless configured."""
        token = token_service.issue({"username": "reader", "id": "1234"})
        payload = jwt.decode(token, options={"verify_signature": False})
        assert "exp" not in payload

    def test_expiry_when_configured(self, secret_key):
        """Test that a configured expiry is written into the token."""
        service = TokenService(secret_key=secret_key, token_expiry_hours=2)
        token = service.issue({"username": "reader", "id": "1234"})

        payload = jwt.decode(token, options={"verify_signature": False})
        assert "exp" in payload
        assert service.verify(token)["username"] == "reader"

    def test_expired_token_rejected(self, token_service, secret_key):
        """Test verifying an expired token fails."""
        past = datetime.now(UTC) - timedelta(hours=2)
        payload = {
            "iss": "test-bookshelf",
            "aud": "test-api",
            "username": "reader",
            "id": "1234",
            "iat": past,
            "exp": past + timedelta(minutes=30),
        }
        expired = jwt.encode(payload, secret_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="Invalid token"):
            token_service.verify(expired)

    def test_wrong_secret_rejected(self, token_service):
        """Test that a token signed with another secret fails."""
        other = TokenService(
            secret_key="another-secret", issuer="test-bookshelf", audience="test-api"
        )
        token = other.issue({"username": "reader", "id": "1234"})

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_tampered_token_rejected(self, token_service):
        """Test that modifying the payload breaks the signature."""
        token = token_service.issue({"username": "reader", "id": "1234"})
        header, _, signature = token.split(".")
        forged = json.dumps({"username": "admin", "id": "1234"}).encode()
        forged_payload = base64.urlsafe_b64encode(forged).rstrip(b"=").decode()
        tampered = ".".join([header, forged_payload, signature])

        with pytest.raises(InvalidTokenError):
            token_service.verify(tampered)

    def test_garbage_rejected(self, token_service):
        with pytest.raises(InvalidTokenError):
            token_service.verify("not-a-jwt")

    def test_missing_identity_claim_rejected(self, token_service, secret_key):
        """Test that a correctly signed token without an id is refused."""
        token = jwt.encode(
            {"iss": "test-bookshelf", "aud": "test-api", "username": "reader"},
            secret_key,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_wrong_audience_rejected(self, token_service, secret_key):
        token = jwt.encode(
            {"iss": "test-bookshelf", "aud": "someone-else", "username": "r", "id": "1"},
            secret_key,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_error_code(self, token_service):
        with pytest.raises(InvalidTokenError) as exc_info:
            token_service.verify("not-a-jwt")
        assert exc_info.value.extensions == {"code": "INVALID_TOKEN"}
