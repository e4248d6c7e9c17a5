"""
Webhook Security Module

This module handles the two checks Workplace webhooks rely on:
the subscription verification handshake and HMAC-SHA256 payload signatures.

Design Decisions:
- Pure functions over query parameters, bytes and header values, so the
  HTTP layer decides how failures become responses
- Use constant-time comparison to prevent timing attacks
- Verify the signature over the exact raw body bytes before any parsing
- Signature checking is skipped only when no app secret is configured
"""

import hashlib
import hmac
from typing import Mapping, Optional

from workplace_relay.logging_config import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


class HandshakeRejectedError(Exception):
    """Exception raised when a verification handshake carries a bad token."""
    pass


class SignatureVerificationError(Exception):
    """Exception raised when a payload signature is missing or invalid."""
    pass


def is_verification_request(query: Mapping[str, str]) -> bool:
    """Check whether the query parameters describe a subscription handshake."""
    return query.get("hub.mode") == "subscribe"


def verify_handshake(
    query: Mapping[str, str],
    verification_token: Optional[str]
) -> str:
    """
    Answer a subscription verification handshake.

    Args:
        query: Request query parameters
        verification_token: Configured verification token

    Returns:
        The hub.challenge value, to be echoed back verbatim

    Raises:
        HandshakeRejectedError: If the token is missing or does not match
    """
    supplied_token = query.get("hub.verify_token")

    if not verification_token or supplied_token is None:
        logger.warning("Rejected handshake without a usable verify token")
        raise HandshakeRejectedError("Missing verification token")

    if not hmac.compare_digest(supplied_token.encode(), verification_token.encode()):
        logger.warning("Rejected handshake with wrong verify token")
        raise HandshakeRejectedError("Verification token mismatch")

    logger.info("Webhook subscription verified")
    return query.get("hub.challenge", "")


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Compute the lowercase hex HMAC-SHA256 of a body."""
    return hmac.new(secret.encode(), raw_body, hashlib.sha256).hexdigest()


def verify_signature(
    secret: Optional[str],
    raw_body: bytes,
    signature_header: Optional[str]
) -> None:
    """
    Verify the X-Hub-Signature-256 header of a webhook payload.

    Args:
        secret: Configured app secret; None or empty skips the check
        raw_body: Raw request body bytes
        signature_header: Value of the X-Hub-Signature-256 header

    Raises:
        SignatureVerificationError: If the signature is missing or invalid
    """
    if not secret:
        logger.debug("Signature verification disabled, accepting payload")
        return

    if not signature_header:
        logger.warning("Missing webhook signature header")
        raise SignatureVerificationError("Missing webhook signature")

    logger.debug("Received webhook signature", signature=signature_header)

    if not signature_header.startswith(SIGNATURE_PREFIX):
        logger.warning(
            "Invalid signature format",
            prefix=signature_header.split("=", 1)[0][:20]
        )
        raise SignatureVerificationError("Invalid signature format")

    signature = signature_header[len(SIGNATURE_PREFIX):]
    expected_signature = compute_signature(secret, raw_body)

    if not hmac.compare_digest(signature.encode(), expected_signature.encode()):
        logger.warning("Webhook signature mismatch", body_bytes=len(raw_body))
        raise SignatureVerificationError("Invalid webhook signature")

    logger.debug("Webhook signature verified successfully")
