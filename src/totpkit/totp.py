import calendar
import datetime
import logging
import time
from typing import Any, Callable, Optional, Union

from . import utils
from .config import settings
from .exceptions import InvalidArgument
from .hotp import DIGITS, compute_code

logger = logging.getLogger(__name__)

Clock = Callable[[], Any]
Timestamp = Union[int, float, datetime.datetime]


def _check_time_step(time_step: Optional[int]) -> int:
    if time_step is None:
        time_step = settings.time_step
    if isinstance(time_step, bool) or not isinstance(time_step, int) or time_step <= 0:
        raise InvalidArgument("time_step must be a positive integer")
    return time_step


def _check_window(window: Optional[int]) -> int:
    if window is None:
        window = settings.window
    if isinstance(window, bool) or not isinstance(window, int) or window < 0:
        raise InvalidArgument("window must be a non-negative integer")
    return window


def _to_seconds(for_time: Timestamp) -> Union[int, float]:
    if isinstance(for_time, datetime.datetime):
        if for_time.tzinfo:
            return calendar.timegm(for_time.utctimetuple())
        return int(time.mktime(for_time.timetuple()))
    return for_time


def timecode(for_time: Timestamp, time_step: Optional[int] = None) -> int:
    """
    Converts a point in time to the TOTP counter.

    :param for_time: Unix timestamp, or a datetime (naive values are local time)
    :param time_step: seconds per counter step, defaults to the configured value
    :returns: floor(for_time / time_step)
    """
    return int(_to_seconds(for_time) // _check_time_step(time_step))


def generate_otp(secret: str, time_step: Optional[int] = None, clock: Clock = time.time) -> str:
    """
    Generates the OTP for the current time step.

    The code is only valid until the clock crosses the next step boundary.

    :param secret: secret in base32 format
    :param time_step: seconds per counter step, defaults to the configured value
    :param clock: returns the current Unix time
    :returns: 6 digit OTP
    """
    key = utils.byte_secret(secret)
    return compute_code(key, timecode(clock(), time_step))


def verify_otp(
    secret: str,
    token: str,
    window: Optional[int] = None,
    time_step: Optional[int] = None,
    clock: Clock = time.time,
) -> bool:
    """
    Verifies a submitted OTP, tolerating clock drift.

    Counters from ``current - window`` to ``current + window`` are tried in
    that order; the first match wins. Each candidate is compared in
    constant time.

    :param secret: secret in base32 format
    :param token: the OTP to check; anything other than a string of 6
        digits simply fails to match
    :param window: steps of drift accepted on each side of the current step
    :param time_step: seconds per counter step, must match the one the
        code was generated with
    :param clock: returns the current Unix time
    :returns: True if the token matches a candidate
    :raises InvalidSecret: if the secret is empty or not Base32
    :raises InvalidArgument: if window or time_step is out of range
    """
    window = _check_window(window)
    key = utils.byte_secret(secret)
    current = timecode(clock(), time_step)

    if not isinstance(token, str) or len(token) != DIGITS or not token.isdigit():
        logger.debug("TOTP rejected: malformed token")
        return False

    for offset in range(-window, window + 1):
        counter = current + offset
        if counter < 0 or counter > utils.MAX_COUNTER:
            continue
        if utils.strings_equal(token, compute_code(key, counter)):
            logger.debug("TOTP accepted at step offset %+d", offset)
            return True

    logger.debug("TOTP rejected within a window of %d step(s)", window)
    return False


class TOTP(object):
    """
    Handler for time-based OTP counters.

    Bundles a secret with its time step, clock and provisioning labels.
    Every method delegates to the module level functions.
    """

    def __init__(
        self,
        s: str,
        interval: Optional[int] = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        clock: Clock = time.time,
    ) -> None:
        """
        :param s: secret in base32 format
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param name: account name
        :param issuer: issuer; None leaves it out of provisioning URIs
        :param clock: returns the current Unix time
        """
        self.secret = s
        self.interval = _check_time_step(interval)
        self.name = name if name is not None else settings.account_name
        self.issuer = issuer
        self.clock = clock
        # Fail on a bad secret now rather than at first use
        self.byte_secret()

    def byte_secret(self) -> bytes:
        return utils.byte_secret(self.secret)

    def timecode(self, for_time: Timestamp) -> int:
        return timecode(for_time, self.interval)

    def at(self, for_time: Timestamp, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return compute_code(self.byte_secret(), self.timecode(for_time) + counter_offset)

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return generate_otp(self.secret, self.interval, self.clock)

    def verify(self, otp: str, for_time: Optional[Timestamp] = None, valid_window: Optional[int] = None) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        clock = self.clock if for_time is None else (lambda: for_time)
        return verify_otp(self.secret, otp, window=valid_window, time_step=self.interval, clock=clock)

    def remaining_seconds(self, for_time: Optional[Timestamp] = None) -> int:
        """
        Seconds until the OTP for ``for_time`` (defaults to now) expires.
        """
        seconds = _to_seconds(self.clock() if for_time is None else for_time)
        return self.interval - int(seconds) % self.interval

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        The ``otpauth://`` URI for this secret, with ``period`` added for a
        non-default interval.

        :param name: overrides the account name for this URI only
        :param issuer_name: overrides the issuer for this URI only
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name if name is not None else self.name,
            issuer=issuer_name if issuer_name is not None else self.issuer,
            period=self.interval,
        )
