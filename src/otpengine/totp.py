import logging
from typing import Callable, Optional

from . import utils
from .counters import DEFAULT_STEP, TimeCounter
from .otp import OTP

logger = logging.getLogger(__name__)


class TOTP(OTP):
    """
    Handler for time-based OTP counters.

    The counter is ``floor((now + offset) / step)``. ``now`` comes from the
    injected clock, so tests can pin the time without patching ``time``.
    """

    def __init__(
        self,
        digits: int,
        issuer: str,
        label: str,
        secret: bytes,
        step: int = DEFAULT_STEP,
        offset: int = 0,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        """
        :param digits: number of integers in the OTP
        :param issuer: issuer shown by authenticator apps
        :param label: account label shown by authenticator apps
        :param secret: raw secret bytes
        :param step: the time interval in seconds for OTP. This defaults to 30.
        :param offset: seconds added to the clock before quantization
        :param clock: zero-argument callable returning Unix seconds
        """
        super().__init__(digits, issuer, label, secret, TimeCounter(step, offset, clock))

    @property
    def step(self) -> int:
        return self.counter_source.step

    @property
    def offset(self) -> int:
        return self.counter_source.offset

    def set_step(self, seconds: int) -> "TOTP":
        """
        :param seconds: positive number of seconds per counter increment
        :raises InvalidConfiguration: if ``seconds`` is not a positive integer
        """
        self.counter_source.step = seconds
        logger.debug("step set to %ds", seconds)
        return self

    def set_offset(self, seconds: int) -> "TOTP":
        """
        :param seconds: signed number of seconds added to the clock
        :raises InvalidConfiguration: if ``seconds`` is not an integer
        """
        self.counter_source.offset = seconds
        logger.debug("offset set to %ds", seconds)
        return self

    def at(self, for_time: int) -> str:
        """
        Accepts a Unix timestamp integer and returns the OTP for that time.
        The configured offset still applies.

        :param for_time: the time to generate an OTP for
        """
        return self.generate_otp(self.counter_source.to_bytestring(self.counter_source.timecode(for_time)))

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.get_password()

    def remaining(self) -> int:
        """
        Seconds until the current password rolls over.
        """
        return self.counter_source.remaining()

    def get_uri(self) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :returns: provisioning URI
        """
        return self.create_uri(
            "totp",
            [
                ("secret", utils.base32_encode(self.secret)),
                ("issuer", self.issuer),
                ("algorithm", "SHA1"),
                ("digits", self.digits),
                ("period", self.step),
            ],
        )
