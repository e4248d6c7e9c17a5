"""
Webhook Package

This package contains webhook handling components:
- handler: FastAPI route handlers
- security: Handshake and signature verification
- processor: Payload decoding and relaying
"""

from workplace_relay.webhook.handler import router

__all__ = ["router"]
