import base64
import binascii
from hmac import compare_digest
from typing import Optional
from urllib.parse import quote

from .exceptions import InvalidArgument, InvalidSecret

MAX_COUNTER = 2**64 - 1

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

# Left unescaped by URI component encoding, on top of A-Z a-z 0-9 - _ . ~
_URI_COMPONENT_SAFE = "!*'()"


def byte_secret(secret: str) -> bytes:
    """
    Decodes a Base32 secret into the raw HMAC key.

    Padding is optional and lowercase is accepted. A trailing character
    holding only bits that Base32 packing discards is ignored.

    :param secret: secret in base32 format
    :returns: secret bytes
    :raises InvalidSecret: if the secret is empty or not valid Base32
    """
    if not isinstance(secret, str) or not secret:
        raise InvalidSecret("Secret must be a non-empty Base32 string")

    # 1, 3 or 6 leftover characters: the last one contributes no whole byte
    if len(secret) % 8 in (1, 3, 6):
        if secret[-1].upper() not in BASE32_ALPHABET:
            raise InvalidSecret("Secret is not valid Base32")
        secret = secret[:-1]
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        key = base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecret("Secret is not valid Base32") from e
    if not key:
        raise InvalidSecret("Secret decodes to an empty key")
    return key


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Encodes a counter as the 8-byte big-endian message fed to the HMAC.

    :raises InvalidArgument: if the counter is negative or wider than 64 bits
    """
    if i < 0 or i > MAX_COUNTER:
        raise InvalidArgument("Counter must be an unsigned 64-bit integer")
    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    # Bytes were collected least significant first
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))


def build_uri(secret: str, name: str, issuer: Optional[str] = None, period: Optional[int] = None) -> str:
    """
    Formats an ``otpauth://totp/`` URI for authenticator apps to scan.

    Labels are percent-encoded as URI components; the secret is written
    verbatim since Base32 is already URI safe.

    :param secret: the totp secret
    :param name: name of the account
    :param issuer: prefixes the label and is repeated as a parameter;
        left out entirely when None
    :param period: seconds per code; only written when it differs from 30
    :returns: provisioning uri
    """
    label = quote(name, safe=_URI_COMPONENT_SAFE)
    query = "secret=" + secret
    if issuer is not None:
        encoded_issuer = quote(issuer, safe=_URI_COMPONENT_SAFE)
        label = encoded_issuer + ":" + label
        query += "&issuer=" + encoded_issuer
    if period is not None and period != 30:
        query += "&period={}".format(period)
    return "otpauth://totp/{0}?{1}".format(label, query)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Constant-time comparison of the exact UTF-8 bytes of two strings.

    No unicode normalisation is applied, so lookalike digits never match.
    Only the lengths can leak through timing.
    """
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
