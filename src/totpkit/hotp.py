import hashlib
import hmac

from .exceptions import InvalidSecret
from .utils import int_to_bytestring

DIGITS = 6


def compute_code(secret_bytes: bytes, counter: int) -> str:
    """
    Computes the HOTP value for one counter (RFC 4226 section 5.3).

    :param secret_bytes: the shared secret, already Base32-decoded
    :param counter: the HMAC counter value, an unsigned 64-bit integer.
        For TOTP this is the Unix time divided by the time step.
    :returns: 6 digit OTP, left padded with zeros
    :raises InvalidSecret: if the secret is empty
    :raises InvalidArgument: if the counter does not fit in 64 bits
    """
    if not secret_bytes:
        raise InvalidSecret("Secret must not be empty")

    hmac_hash = bytearray(hmac.new(secret_bytes, int_to_bytestring(counter), hashlib.sha1).digest())

    # Dynamic truncation: the low nibble of the last byte picks 4 bytes,
    # the top bit is dropped so the result is a 31-bit positive integer
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    str_code = str(10_000_000_000 + (code % 10**DIGITS))
    return str_code[-DIGITS:]
