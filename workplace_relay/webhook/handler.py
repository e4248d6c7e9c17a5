"""
Webhook Handler Module

This module defines the FastAPI endpoint that receives Workplace webhooks.
A single route answers subscription handshakes and relays notifications.

Design Decisions:
- Validation failures (handshake, signature, payload) become 4xx responses here
- Downstream and configuration failures propagate to the application's
  exception handlers
- The response is sent only after every entry has been forwarded
"""

from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from workplace_relay.config import Settings
from workplace_relay.logging_config import get_logger
from workplace_relay.services.graph_client import GraphClient
from workplace_relay.services.message_formatter import MalformedPayloadError
from workplace_relay.services.slack_client import SlackForwarder
from workplace_relay.webhook.processor import WorkplaceRelay, decode_payload
from workplace_relay.webhook.security import (
    SIGNATURE_HEADER,
    HandshakeRejectedError,
    SignatureVerificationError,
    is_verification_request,
    verify_handshake,
    verify_signature,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the HTTP client shared across requests."""
    return request.app.state.http_client


def get_relay(
    settings: Settings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> WorkplaceRelay:
    """Build the relay for a request from settings and the shared client."""
    return WorkplaceRelay(
        GraphClient(http_client, settings),
        SlackForwarder(http_client, settings.slack_webhook_uri)
    )


@router.api_route("/workplace", methods=["GET", "POST"], response_model=None)
async def workplace_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    relay: WorkplaceRelay = Depends(get_relay)
) -> Any:
    """
    Workplace webhook endpoint.

    Subscription handshakes (hub.mode=subscribe) are answered with the
    challenge. Any other request is treated as a group-posts notification:
    its signature is verified, the payload decoded and every entry
    forwarded to Slack.

    Args:
        request: FastAPI request object
        settings: Application settings
        relay: Relay used to forward entries

    Returns:
        Plain text challenge for handshakes, JSON status otherwise

    Raises:
        HTTPException: On handshake, signature or payload failures
    """
    query = request.query_params

    if is_verification_request(query):
        try:
            challenge = verify_handshake(query, settings.verification_token)
        except HandshakeRejectedError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )
        return PlainTextResponse(challenge)

    raw_body = await request.body()

    logger.info(
        "Received Workplace webhook",
        method=request.method,
        body_bytes=len(raw_body),
        remote_addr=request.client.host if request.client else "unknown"
    )
    logger.debug("Webhook payload", payload=raw_body.decode("utf-8", errors="replace"))

    try:
        verify_signature(settings.app_secret, raw_body, request.headers.get(SIGNATURE_HEADER))
    except SignatureVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )

    if not raw_body:
        logger.warning("Empty webhook payload")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty payload"
        )

    try:
        envelope = decode_payload(raw_body)
        forwarded = await relay.relay(envelope)
    except MalformedPayloadError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"status": "ok", "forwarded": forwarded}


@router.get("/health")
async def webhook_health() -> Dict[str, str]:
    """
    Health check endpoint for the webhook service.

    Returns:
        Simple health status
    """
    return {"status": "healthy", "service": "webhook"}
