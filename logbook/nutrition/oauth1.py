# -*- coding: utf-8 -*-
"""OAuth 1.0a request signing (HMAC-SHA1), as used by the FatSecret platform API.

Only the pieces needed for signed GET/POST calls with query or form
parameters are implemented; there is no token dance.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from typing import Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

SIGNATURE_METHOD = "HMAC-SHA1"


def percent_encode(value: object) -> str:
    """RFC 3986 percent-encoding (unreserved characters are left alone)."""
    return quote(str(value), safe="-._~")


def normalize_url(url: str) -> str:
    """Base string URI: lowercase scheme/host, no default port, no query or fragment."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    if port and not ((scheme == "http" and port == 80) or (scheme == "https" and port == 443)):
        host = f"{host}:{port}"
    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def normalize_parameters(params: Iterable[Tuple[str, str]]) -> str:
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    return "&".join(f"{k}={v}" for k, v in encoded)


def signature_base_string(method: str, url: str, params: Mapping[str, object]) -> str:
    # Parameters already on the URL take part in the signature too.
    pairs = [(k, str(v)) for k, v in params.items() if k != "oauth_signature"]
    pairs.extend(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    return "&".join(
        [
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(pairs)),
        ]
    )


def sign_hmac_sha1(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_request(
    method: str,
    url: str,
    params: Mapping[str, object],
    *,
    consumer_key: str,
    consumer_secret: str,
    token: Optional[str] = None,
    token_secret: str = "",
    nonce: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """Return ``params`` plus the oauth_* fields and ``oauth_signature``."""
    signed: Dict[str, str] = {k: str(v) for k, v in params.items()}
    signed.update(
        {
            "oauth_consumer_key": consumer_key,
            "oauth_nonce": nonce or secrets.token_hex(16),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(timestamp if timestamp is not None else int(time.time())),
            "oauth_version": "1.0",
        }
    )
    if token:
        signed["oauth_token"] = token
    base = signature_base_string(method, url, signed)
    signed["oauth_signature"] = sign_hmac_sha1(base, consumer_secret, token_secret)
    return signed
