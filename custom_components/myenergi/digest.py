"""HTTP Digest authentication (RFC 2617) for the myenergi API.

The myenergi servers answer every unauthenticated request with a 401 and a
``WWW-Authenticate: Digest ...`` challenge. The helpers below parse that
challenge and build the matching ``Authorization`` header.
"""
import hashlib
import logging
import re
import secrets

from .exceptions import MyEnergiAuthError

_LOGGER = logging.getLogger(__name__)

_CHALLENGE_PARAM = re.compile(r'(\w+)\s*=\s*(?:"((?:[^"\\]|\\.)*)"|([^,\s]*))')


def _md5_hex(value):
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def parse_challenge(header):
    """Parse a Digest challenge header into a dict of lower-cased keys."""
    scheme, _, params = header.strip().partition(" ")
    if scheme.lower() != "digest":
        raise MyEnergiAuthError(f"Unsupported authentication scheme: {scheme}")

    challenge = {}
    for match in _CHALLENGE_PARAM.finditer(params):
        key = match.group(1).lower()
        if match.group(2) is not None:
            value = match.group(2).replace('\\"', '"')
        else:
            value = match.group(3)
        challenge[key] = value

    if "nonce" not in challenge or "realm" not in challenge:
        raise MyEnergiAuthError("Digest challenge without realm or nonce")
    return challenge


def calculate_response(
    method, username, password, realm, qop, uri, nonce, nonce_count, client_nonce
):
    """Compute the request digest.

    With ``qop`` set this is the RFC 2617 form
    ``MD5(HA1:nonce:nc:cnonce:qop:HA2)``; without it the RFC 2069 form
    ``MD5(HA1:nonce:HA2)``.
    """
    ha1 = _md5_hex(f"{username}:{realm}:{password}")
    ha2 = _md5_hex(f"{method}:{uri}")
    if qop:
        return _md5_hex(f"{ha1}:{nonce}:{nonce_count}:{client_nonce}:{qop}:{ha2}")
    return _md5_hex(f"{ha1}:{nonce}:{ha2}")


def _select_qop(offered):
    if not offered:
        return None
    options = [option.strip() for option in offered.split(",")]
    if "auth" in options:
        return "auth"
    raise MyEnergiAuthError(f"Unsupported digest qop: {offered}")


def build_authorization(
    challenge, method, uri, username, password, nonce_count=1, client_nonce=None
):
    """Build the Authorization header answering ``challenge``."""
    algorithm = challenge.get("algorithm", "MD5")
    if algorithm.upper() != "MD5":
        raise MyEnergiAuthError(f"Unsupported digest algorithm: {algorithm}")

    if client_nonce is None:
        client_nonce = secrets.token_hex(16)
    qop = _select_qop(challenge.get("qop"))
    nc = f"{nonce_count:08x}"
    realm = challenge["realm"]
    nonce = challenge["nonce"]

    response = calculate_response(
        method, username, password, realm, qop, uri, nonce, nc, client_nonce
    )

    parts = [
        f'username="{username}"',
        f'realm="{realm}"',
        f'nonce="{nonce}"',
        f'uri="{uri}"',
    ]
    if qop:
        parts += [f'cnonce="{client_nonce}"', f"nc={nc}", f"qop={qop}"]
    parts.append(f'response="{response}"')
    if "opaque" in challenge:
        parts.append(f'opaque="{challenge["opaque"]}"')
    parts.append("algorithm=MD5")

    _LOGGER.debug("Answering digest challenge for realm %s, uri %s", realm, uri)
    return "Digest " + ", ".join(parts)
