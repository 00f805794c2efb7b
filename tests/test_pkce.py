"""Tests for PKCE generation and the authorization URL."""

import base64
import hashlib
from urllib.parse import parse_qs, urlparse

from etsy_mcp.pkce import build_authorization_url, compute_code_challenge, generate_pkce_pair, generate_state


def test_challenge_is_sha256_of_verifier():
    for _ in range(50):
        pair = generate_pkce_pair()
        expected = base64.urlsafe_b64encode(hashlib.sha256(pair.verifier.encode("ascii")).digest()).rstrip(b"=")
        assert pair.challenge == expected.decode("ascii")
        assert 43 <= len(pair.verifier) <= 128
        assert "=" not in pair.verifier


def test_compute_code_challenge_known_vector():
    # RFC 7636 appendix B
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
    assert compute_code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


def test_pairs_and_states_are_unique():
    assert generate_pkce_pair().verifier != generate_pkce_pair().verifier
    assert generate_state() != generate_state()


def test_build_authorization_url():
    url = build_authorization_url(
        client_id="test-key",
        redirect_uri="http://localhost:3030/oauth/redirect",
        state="test-state",
        code_challenge="test-challenge",
    )
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://www.etsy.com/oauth/connect"
    assert query["response_type"] == ["code"]
    assert query["client_id"] == ["test-key"]
    assert query["redirect_uri"] == ["http://localhost:3030/oauth/redirect"]
    assert query["scope"] == ["listings_r listings_w shops_r shops_w transactions_r transactions_w"]
    assert query["state"] == ["test-state"]
    assert query["code_challenge"] == ["test-challenge"]
    assert query["code_challenge_method"] == ["S256"]


def test_build_authorization_url_custom_scopes():
    url = build_authorization_url("k", "http://localhost:1/cb", "s", "c", scopes=["shops_r"])
    assert parse_qs(urlparse(url).query)["scope"] == ["shops_r"]
