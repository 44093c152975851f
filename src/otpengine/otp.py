import hashlib
import hmac
import logging
from typing import Iterable, Tuple

from . import utils
from .counters import CounterSource
from .exceptions import InternalInvariantViolation, InvalidConfiguration

logger = logging.getLogger(__name__)

DEFAULT_DIGITS = 6
SHA1_DIGEST_SIZE = 20


class OTP(object):
    """
    Base class for OTP handlers.

    Turns whatever counter its ``CounterSource`` reports into a fixed-width
    decimal password (RFC 4226 section 5.3). Subclasses pick the counter
    source and add their own provisioning URI.
    """

    def __init__(
        self,
        digits: int,
        issuer: str,
        label: str,
        secret: bytes,
        counter_source: CounterSource,
    ) -> None:
        """
        :param digits: number of decimal digits in the password
        :param issuer: issuer shown by authenticator apps
        :param label: account label shown by authenticator apps
        :param secret: raw shared key; any non-empty length
        :param counter_source: where the moving factor comes from
        """
        if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
            raise InvalidConfiguration("digits must be a positive integer")
        if not isinstance(secret, (bytes, bytearray)):
            raise InvalidConfiguration("secret must be bytes")
        if not secret:
            raise InvalidConfiguration("secret must not be empty")
        self.digits = digits
        self.issuer = issuer
        self.label = label
        self.secret = bytes(secret)
        self.counter_source = counter_source

    def __repr__(self) -> str:
        return "{0}(digits={1!r}, issuer={2!r}, label={3!r})".format(
            type(self).__name__, self.digits, self.issuer, self.label
        )

    def get_counter(self) -> bytes:
        return self.counter_source.get_counter()

    def get_password(self) -> str:
        """
        Generates the password for the counter in effect right now.
        """
        return self.generate_otp(self.get_counter())

    def generate_otp(self, counter: bytes) -> str:
        """
        :param counter: the 8-byte big-endian HMAC counter to use as the OTP input.
            Either an event count or the step number derived from the Unix timestamp
        """
        # Implements RFC 4226
        hasher = hmac.new(self.secret, counter, hashlib.sha1)
        hmac_hash = bytearray(hasher.digest())
        if len(hmac_hash) != SHA1_DIGEST_SIZE:
            logger.error("HMAC-SHA1 returned %d bytes, expected %d", len(hmac_hash), SHA1_DIGEST_SIZE)
            raise InternalInvariantViolation("HMAC-SHA1 did not return a 20-byte value")
        offset = hmac_hash[-1] & 0xF
        code = (
            (hmac_hash[offset] & 0x7F) << 24
            | (hmac_hash[offset + 1] & 0xFF) << 16
            | (hmac_hash[offset + 2] & 0xFF) << 8
            | (hmac_hash[offset + 3] & 0xFF)
        )
        return str(code % 10**self.digits).zfill(self.digits)

    def verify(self, otp: str) -> bool:
        """
        Compares a candidate against the current password in constant time.

        No neighbouring counters are tried.

        :param otp: the OTP to check against
        """
        return utils.strings_equal(str(otp), self.get_password())

    def create_uri(self, otp_type: str, params: Iterable[Tuple[str, utils.UriValue]]) -> str:
        return utils.build_uri(otp_type, self.label, params)
