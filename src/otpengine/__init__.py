import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from .counters import CounterSource as CounterSource
from .counters import FixedCounter as FixedCounter
from .counters import TimeCounter as TimeCounter
from .exceptions import InternalInvariantViolation as InternalInvariantViolation
from .exceptions import InvalidConfiguration as InvalidConfiguration
from .exceptions import OtpError as OtpError
from .hotp import HOTP as HOTP
from .otp import DEFAULT_DIGITS
from .otp import OTP as OTP
from .totp import TOTP as TOTP
from .utils import base32_decode

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def parse_uri(uri: str, clock: Optional[Callable[[], int]] = None) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :param clock: clock handed to a TOTP result, see ``TOTP``
    :returns: OTP object
    :raises InvalidConfiguration: if the URI does not describe a usable engine
    """

    # Secret (to be filled in later)
    secret = None

    # Data we'll parse to the correct constructor
    otp_data: Dict[str, Any] = {"digits": DEFAULT_DIGITS, "issuer": ""}

    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise InvalidConfiguration("Not an otpauth URI")

    # The label is opaque: "Issuer: account" stays one string
    label = unquote(parsed_uri.path[1:])

    # Parse values
    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            otp_data["issuer"] = value
        elif key == "algorithm":
            if value.upper() != "SHA1":
                raise InvalidConfiguration("Invalid value for algorithm, only SHA1 is supported")
        elif key == "digits":
            otp_data["digits"] = _parse_int(key, value)
        elif key == "period":
            otp_data["step"] = _parse_int(key, value)
        elif key == "counter":
            otp_data["initial_count"] = _parse_int(key, value)

    # Every OTP needs a secret
    if not secret:
        raise InvalidConfiguration("No secret found in URI")

    logger.debug("parsed %s uri for issuer %r", parsed_uri.netloc, otp_data["issuer"])

    # Create objects
    otp_type = parsed_uri.netloc.lower()
    if otp_type == "totp":
        otp_data.pop("initial_count", None)
        return TOTP(label=label, secret=base32_decode(secret), clock=clock, **otp_data)
    elif otp_type == "hotp":
        otp_data.pop("step", None)
        return HOTP(label=label, secret=base32_decode(secret), **otp_data)
    raise InvalidConfiguration("Not a supported OTP type")


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise InvalidConfiguration("{} must be an integer".format(key)) from e
