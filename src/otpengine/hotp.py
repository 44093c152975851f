import logging

from . import utils
from .counters import FixedCounter, int_to_bytestring
from .otp import OTP

logger = logging.getLogger(__name__)


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.

    The counter is not persisted here; applications that need replay
    protection store the last accepted value themselves.
    """

    def __init__(
        self,
        digits: int,
        issuer: str,
        label: str,
        secret: bytes,
        initial_count: int = 0,
    ) -> None:
        """
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param issuer: issuer
        :param label: account label
        :param secret: raw secret bytes
        :param initial_count: starting HMAC counter value, defaults to 0
        """
        super().__init__(digits, issuer, label, secret, FixedCounter(initial_count))

    @property
    def counter(self) -> int:
        return self.counter_source.value()

    @counter.setter
    def counter(self, count: int) -> None:
        self.counter_source.count = count
        logger.debug("counter set to %d", count)

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count without touching the stored counter.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(int_to_bytestring(count))

    def advance(self) -> str:
        """
        Moves the counter forward by one and returns the password for it.
        """
        self.counter_source.advance()
        return self.get_password()

    def get_uri(self) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.
        """
        return self.create_uri(
            "hotp",
            [
                ("secret", utils.base32_encode(self.secret)),
                ("issuer", self.issuer),
                ("algorithm", "SHA1"),
                ("digits", self.digits),
                ("counter", self.counter),
            ],
        )
