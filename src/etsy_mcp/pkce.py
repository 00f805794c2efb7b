"""PKCE (Proof Key for Code Exchange) helpers for the Etsy authorization-code flow."""

import base64
import hashlib
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import urlencode

from .constants import AUTHORIZATION_URL, DEFAULT_SCOPES

CODE_CHALLENGE_METHOD = "S256"


@dataclass(frozen=True)
class PkcePair:
    verifier: str
    challenge: str


def _base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def compute_code_challenge(verifier: str) -> str:
    """Return base64url(SHA-256(verifier)) without padding."""
    return _base64url(hashlib.sha256(verifier.encode("ascii")).digest())


def generate_pkce_pair() -> PkcePair:
    """Generate a code verifier (43 characters) and its S256 challenge."""
    verifier = _base64url(secrets.token_bytes(32))
    return PkcePair(verifier=verifier, challenge=compute_code_challenge(verifier))


def generate_state() -> str:
    """Opaque value sent with the authorization request."""
    return secrets.token_urlsafe(16)


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    state: str,
    code_challenge: str,
    scopes: Optional[Sequence[str]] = None,
) -> str:
    """Compose the Etsy consent URL for the authorization-code grant with PKCE.

    Args:
        client_id: Etsy app keystring
        redirect_uri: Callback URL registered for the app
        state: Value echoed back on the redirect
        code_challenge: S256 challenge derived from the verifier
        scopes: Scopes to request (defaults to DEFAULT_SCOPES)

    Returns:
        The full authorization URL
    """
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes if scopes is not None else DEFAULT_SCOPES),
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": CODE_CHALLENGE_METHOD,
    }
    return f"{AUTHORIZATION_URL}?{urlencode(params)}"
