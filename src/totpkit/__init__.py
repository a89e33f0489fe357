import logging
import secrets
from re import IGNORECASE, split
from typing import Any, Dict, Optional, Sequence
from urllib.parse import parse_qsl, unquote, urlparse

from . import utils
from .config import settings
from .exceptions import InvalidArgument as InvalidArgument
from .exceptions import InvalidSecret as InvalidSecret
from .exceptions import TOTPError as TOTPError
from .hotp import compute_code as compute_code
from .totp import TOTP as TOTP
from .totp import generate_otp as generate_otp
from .totp import timecode as timecode
from .totp import verify_otp as verify_otp

logger = logging.getLogger(__name__)

BASE32_ALPHABET = utils.BASE32_ALPHABET


def generate_secret_key(length: Optional[int] = None, chars: Sequence[str] = BASE32_ALPHABET) -> str:
    """
    Generates a random Base32 secret for a new authenticator enrollment.

    :param length: number of Base32 characters, defaults to the configured value (20)
    :param chars: alphabet to draw from
    :returns: secret in base32 format, without padding
    """
    if length is None:
        length = settings.secret_length
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidArgument("length must be a positive integer")
    # RFC 4226 R6 requires at least 128 bits of key material
    if length * 5 < 128:
        logger.warning("Generating a %d-character secret (%d bits); 26 or more is recommended", length, length * 5)

    return "".join(secrets.choice(chars) for _ in range(length))


def generate_otpauth_url(
    secret: str,
    account_name: Optional[str] = None,
    issuer: Optional[str] = None,
) -> str:
    """
    Returns the ``otpauth://`` URI for a secret, ready to be rendered as a QR code.

    With the default 30 second time step the URI has the form
    ``otpauth://totp/Issuer:account?secret=SECRET&issuer=Issuer``.

    :param secret: secret in base32 format, inserted verbatim
    :param account_name: defaults to the configured account name
    :param issuer: defaults to the configured issuer
    :returns: provisioning URI
    """
    return utils.build_uri(
        secret,
        name=account_name if account_name is not None else settings.account_name,
        issuer=issuer if issuer is not None else settings.issuer,
        period=settings.time_step,
    )


def parse_uri(uri: str) -> TOTP:
    """
    Parses a TOTP provisioning URI.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the totp URI to parse
    :returns: TOTP object
    """

    # Secret (to be filled in later)
    secret = None

    # Data we'll parse to the TOTP constructor
    otp_data: Dict[str, Any] = {}

    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise InvalidArgument("Not an otpauth URI")
    if parsed_uri.netloc != "totp":
        raise InvalidArgument("Not a supported OTP type")

    # Parse issuer/accountname info; a literal ":" is the separator, an
    # encoded one only counts when the whole label was encoded
    label = parsed_uri.path[1:]
    if ":" in label:
        accountinfo_parts = label.split(":", 1)
    else:
        accountinfo_parts = split("%3A", label, maxsplit=1, flags=IGNORECASE)
    if len(accountinfo_parts) == 1:
        otp_data["name"] = unquote(accountinfo_parts[0])
    else:
        otp_data["issuer"] = unquote(accountinfo_parts[0])
        otp_data["name"] = unquote(accountinfo_parts[1])

    # Parse values
    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if otp_data.get("issuer") is not None and otp_data["issuer"] != value:
                raise InvalidArgument("If issuer is specified in both label and parameters, it should be equal.")
            otp_data["issuer"] = value
        elif key == "algorithm":
            if value.upper() != "SHA1":
                raise InvalidArgument("Invalid value for algorithm, must be SHA1")
        elif key == "digits":
            if value != "6":
                raise InvalidArgument("Digits may only be 6")
        elif key == "period":
            try:
                otp_data["interval"] = int(value)
            except ValueError as e:
                raise InvalidArgument("Invalid value for period") from e

    if not secret:
        raise InvalidArgument("No secret found in URI")

    return TOTP(secret, **otp_data)
