"""
Tests for stateless session tokens.
"""

import base64
import json
import os
from datetime import timedelta

import jwt
import pytest

from snapshare.auth.tokens import (
    TOKEN_LIFETIME, SessionClaim, TokenAuthority, generate_verification_token
)
from snapshare.errors import (
    ErrorKind, ExpiredCredential, InvalidCredential, MalformedCredential,
    MissingCredential, SigningError
)

from .helpers import OTHER_SECRET_KEY, TEST_SECRET_KEY


class TestIssueAndVerify:
    """Issued tokens verify back to the same claim."""

    @pytest.mark.parametrize("subject_id,subject_name", [
        (1, "alice"),
        (42, "Bob Smith"),
        (2**31, "ünïcödé"),
        (7, ""),
    ])
    def test_round_trip(self, authority, clock, subject_id, subject_name):
        token = authority.issue(subject_id, subject_name)
        claim = authority.verify(token)

        assert claim.subject_id == subject_id
        assert claim.subject_name == subject_name
        assert claim.expires_at > clock.now
        assert claim.expires_at - clock.now <= TOKEN_LIFETIME

    def test_token_is_header_safe(self, authority):
        token = authority.issue(1, "alice smith")
        assert token.isascii()
        assert not any(ch.isspace() for ch in token)

    def test_payload_uses_hs256(self, authority):
        token = authority.issue(5, "carol")
        header = jwt.get_unverified_header(token)
        assert header['alg'] == 'HS256'

        payload = jwt.decode(token, TEST_SECRET_KEY, algorithms=['HS256'],
                             options={'verify_exp': False})
        assert payload['userid'] == 5
        assert payload['username'] == 'carol'

    def test_resolve_subject_name(self, authority):
        token = authority.issue(3, "dave")
        assert authority.resolve_subject_name(token) == "dave"

    def test_valid_just_before_expiry(self, authority, clock):
        token = authority.issue(1, "alice")
        clock.advance(minutes=59, seconds=59)
        assert authority.verify(token).subject_id == 1


class TestExpiry:
    """Expired tokens are reported distinctly."""

    def test_expired_at_exact_instant(self, authority, clock):
        token = authority.issue(1, "alice")
        clock.advance(hours=1)

        with pytest.raises(ExpiredCredential) as exc_info:
            authority.verify(token)
        assert exc_info.value.kind is ErrorKind.EXPIRED_CREDENTIAL

    def test_expired_is_not_invalid(self, authority, clock):
        token = authority.issue(1, "alice")
        clock.advance(days=30)

        with pytest.raises(ExpiredCredential) as exc_info:
            authority.verify(token)
        assert not isinstance(exc_info.value, InvalidCredential)

    def test_token_from_the_past(self, clock):
        issuer = TokenAuthority(TEST_SECRET_KEY, clock=lambda: clock.now - timedelta(hours=2))
        token = issuer.issue(9, "eve")

        verifier = TokenAuthority(TEST_SECRET_KEY, clock=clock)
        with pytest.raises(ExpiredCredential):
            verifier.verify(token)

    def test_claim_is_expired(self, clock):
        claim = SessionClaim(1, "alice", expires_at=clock.now)
        assert claim.is_expired(clock.now)
        assert not claim.is_expired(clock.now - timedelta(seconds=1))


class TestInvalidTokens:
    """Anything that is not a token signed with our key is rejected."""

    @pytest.mark.parametrize("token", [
        "",
        "not-a-token",
        "a.b.c",
        "....",
        base64.urlsafe_b64encode(os.urandom(48)).decode('ascii'),
    ])
    def test_garbage(self, authority, token):
        with pytest.raises(InvalidCredential):
            authority.verify(token)

    def test_truncated(self, authority):
        token = authority.issue(1, "alice")
        with pytest.raises(InvalidCredential):
            authority.verify(token[:-5])

    def test_other_key(self, authority, clock):
        foreign = TokenAuthority(OTHER_SECRET_KEY, clock=clock).issue(1, "alice")
        with pytest.raises(InvalidCredential):
            authority.verify(foreign)

    def test_other_key_even_when_expired(self, authority, clock):
        foreign = TokenAuthority(OTHER_SECRET_KEY, clock=clock).issue(1, "alice")
        clock.advance(hours=2)
        with pytest.raises(InvalidCredential):
            authority.verify(foreign)

    def test_tampered_payload(self, authority):
        header, payload, signature = authority.issue(1, "alice").split('.')
        claims = json.loads(base64.urlsafe_b64decode(payload + '=' * (-len(payload) % 4)))
        claims['userid'] = 2
        forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip('=')

        with pytest.raises(InvalidCredential):
            authority.verify(f"{header}.{forged}.{signature}")

    def test_unsigned_token_rejected(self, authority, clock):
        unsigned = jwt.encode(
            {'userid': 1, 'username': 'alice', 'exp': int((clock.now + timedelta(hours=1)).timestamp())},
            key=None, algorithm='none'
        )
        with pytest.raises(InvalidCredential):
            authority.verify(unsigned)

    @pytest.mark.parametrize("payload", [
        {'username': 'alice'},
        {'userid': '1', 'username': 'alice'},
        {'userid': True, 'username': 'alice'},
        {'userid': 1, 'username': 7},
    ])
    def test_ill_typed_claims(self, authority, clock, payload):
        payload = dict(payload, exp=int((clock.now + timedelta(hours=1)).timestamp()))
        token = jwt.encode(payload, TEST_SECRET_KEY, algorithm='HS256')
        with pytest.raises(InvalidCredential):
            authority.verify(token)

    def test_missing_expiry(self, authority):
        token = jwt.encode({'userid': 1, 'username': 'alice'}, TEST_SECRET_KEY, algorithm='HS256')
        with pytest.raises(InvalidCredential):
            authority.verify(token)


class TestCarrier:
    """Authorization header handling."""

    def test_bearer_prefix(self, authority):
        token = authority.issue(12, "frank")
        assert authority.resolve_from_carrier(f"Bearer {token}") == 12

    def test_bare_token_is_malformed(self, authority):
        token = authority.issue(12, "frank")
        with pytest.raises(MalformedCredential):
            authority.resolve_from_carrier(token)

    @pytest.mark.parametrize("header", ["bearer abc", "Basic abc", "Bearer:abc", " Bearer abc"])
    def test_wrong_scheme(self, authority, header):
        with pytest.raises(MalformedCredential):
            authority.resolve_from_carrier(header)

    @pytest.mark.parametrize("header", ["", None])
    def test_missing(self, authority, header):
        with pytest.raises(MissingCredential):
            authority.resolve_from_carrier(header)

    def test_prefix_only(self, authority):
        with pytest.raises(InvalidCredential):
            authority.resolve_from_carrier("Bearer ")

    def test_expired_through_carrier(self, authority, clock):
        token = authority.issue(12, "frank")
        clock.advance(hours=3)
        with pytest.raises(ExpiredCredential):
            authority.resolve_from_carrier(f"Bearer {token}")


class TestConstruction:

    @pytest.mark.parametrize("key", ["", None])
    def test_empty_key_rejected(self, key):
        with pytest.raises(ValueError):
            TokenAuthority(key)

    def test_signing_failure(self, authority):
        # A non-serializable subject name makes the primitive fail
        with pytest.raises(SigningError):
            authority.issue(1, object())


def test_verification_tokens_are_random_hex():
    first = generate_verification_token()
    second = generate_verification_token()

    assert len(first) == 32
    int(first, 16)
    assert first != second
