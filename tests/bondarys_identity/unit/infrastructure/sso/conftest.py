"""Fixtures for SSO strategy tests: an RSA signing key and its JWKS."""

import json
import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

KID = "test-key-1"


@pytest.fixture(scope="module")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def jwks(rsa_private_key) -> dict:
    """JWKS document publishing the public half of ``rsa_private_key``."""
    jwk = json.loads(RSAAlgorithm.to_jwk(rsa_private_key.public_key()))
    jwk.update(kid=KID, alg="RS256", use="sig")
    return {"keys": [jwk]}


@pytest.fixture
def sign_id_token(rsa_private_key):
    """Return a function that signs ID token claims with the test key."""

    def _sign(kid: str = KID, **claims) -> str:
        now = int(time.time())
        payload = {"iat": now, "exp": now + 3600, **claims}
        return jwt.encode(
            payload,
            rsa_private_key,
            algorithm="RS256",
            headers={"kid": kid},
        )

    return _sign
