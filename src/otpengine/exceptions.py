class OtpError(Exception):
    """
    Base class for errors raised by otpengine.
    """


class InvalidConfiguration(OtpError, ValueError):
    """
    Raised when an engine is built or reconfigured with unusable values:
    an empty secret, a non-positive step, a bad digit count, or an
    otpauth URI that cannot be turned into an engine.

    Messages never include the secret.
    """


class InternalInvariantViolation(OtpError, RuntimeError):
    """
    Raised when the HMAC primitive returns a digest of unexpected length.

    This points to a broken crypto backend, not bad input, and should be
    treated as fatal.
    """
