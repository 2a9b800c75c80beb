"""Async client for the Tropipay payments API.

The package root re-exports the client, its configuration and the error
taxonomy. Resource operations live in ``tropipay_client.operations`` and their
payload models in ``tropipay_client.models``.
"""

from .client.tropipay_client import TropipayClient, open_client
from .config import Environment, TropipayConfig
from .errors import APIError, AuthError, CancellationError, DecodeError, NetworkError, TropipayError

__all__ = [
    "APIError",
    "AuthError",
    "CancellationError",
    "DecodeError",
    "Environment",
    "NetworkError",
    "TropipayClient",
    "TropipayConfig",
    "TropipayError",
    "open_client",
]
