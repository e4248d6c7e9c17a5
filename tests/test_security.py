"""
Tests for Webhook Security

Tests the handshake and signature helpers directly.
"""

import hashlib
import hmac

import pytest

from workplace_relay.config import Settings, SignatureMode
from workplace_relay.webhook.security import (
    HandshakeRejectedError,
    SignatureVerificationError,
    compute_signature,
    is_verification_request,
    verify_handshake,
    verify_signature,
)


class TestHandshake:
    """Test suite for the verification handshake helpers."""

    def test_subscribe_mode_is_verification(self):
        assert is_verification_request({"hub.mode": "subscribe"})

    def test_other_modes_fall_through(self):
        assert not is_verification_request({})
        assert not is_verification_request({"hub.mode": "unsubscribe"})

    def test_matching_token_returns_challenge(self):
        query = {"hub.mode": "subscribe", "hub.verify_token": "t0k", "hub.challenge": "c-123"}

        assert verify_handshake(query, "t0k") == "c-123"

    def test_missing_challenge_returns_empty(self):
        query = {"hub.mode": "subscribe", "hub.verify_token": "t0k"}

        assert verify_handshake(query, "t0k") == ""

    def test_wrong_token(self):
        query = {"hub.mode": "subscribe", "hub.verify_token": "nope", "hub.challenge": "c"}

        with pytest.raises(HandshakeRejectedError):
            verify_handshake(query, "t0k")

    def test_unconfigured_token_rejects_everything(self):
        query = {"hub.mode": "subscribe", "hub.verify_token": "", "hub.challenge": "c"}

        with pytest.raises(HandshakeRejectedError):
            verify_handshake(query, None)
        with pytest.raises(HandshakeRejectedError):
            verify_handshake(query, "")


class TestSignature:
    """Test suite for HMAC-SHA256 payload signatures."""

    BODY = b'{"object": "group", "entry": []}'

    def test_compute_signature_matches_hmac(self):
        expected = hmac.new(b"secret", self.BODY, hashlib.sha256).hexdigest()

        signature = compute_signature("secret", self.BODY)

        assert signature == expected
        assert len(signature) == 64
        assert signature == signature.lower()

    def test_valid_signature(self):
        header = "sha256=" + compute_signature("secret", self.BODY)

        verify_signature("secret", self.BODY, header)

    def test_missing_header(self):
        with pytest.raises(SignatureVerificationError):
            verify_signature("secret", self.BODY, None)

    def test_wrong_secret(self):
        header = "sha256=" + compute_signature("other", self.BODY)

        with pytest.raises(SignatureVerificationError):
            verify_signature("secret", self.BODY, header)

    def test_uppercase_digest_is_rejected(self):
        header = "sha256=" + compute_signature("secret", self.BODY).upper()

        with pytest.raises(SignatureVerificationError):
            verify_signature("secret", self.BODY, header)

    def test_sha1_prefix_is_rejected(self):
        header = "sha1=" + compute_signature("secret", self.BODY)

        with pytest.raises(SignatureVerificationError):
            verify_signature("secret", self.BODY, header)

    def test_non_ascii_header_is_rejected(self):
        with pytest.raises(SignatureVerificationError):
            verify_signature("secret", self.BODY, "sha256=éé")

    @pytest.mark.parametrize("secret", [None, ""])
    def test_disabled_when_no_secret(self, secret):
        verify_signature(secret, self.BODY, None)
        verify_signature(secret, self.BODY, "sha256=garbage")


class TestSignatureMode:
    """Test suite for the configured signature mode."""

    def test_enabled_with_secret(self):
        assert Settings(app_secret="s").signature_mode is SignatureMode.ENABLED

    @pytest.mark.parametrize("secret", [None, ""])
    def test_disabled_without_secret(self, secret):
        assert Settings(app_secret=secret).signature_mode is SignatureMode.DISABLED

    def test_workplace_setting_names(self, monkeypatch):
        monkeypatch.setenv("AppSecret", "from-env")
        monkeypatch.setenv("SlackWebhookUri", "https://hooks.slack.test/x")

        settings = Settings()

        assert settings.app_secret == "from-env"
        assert settings.slack_webhook_uri == "https://hooks.slack.test/x"
