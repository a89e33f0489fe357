class TOTPError(ValueError):
    """
    Base class for errors raised by totpkit.
    """


class InvalidArgument(TOTPError):
    """
    A length, window, time step or counter is out of range, or a
    provisioning URI cannot be understood.
    """


class InvalidSecret(TOTPError):
    """
    The secret is empty or is not valid Base32.
    """
