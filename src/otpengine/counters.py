import logging
import time
from typing import Callable, Optional

from .exceptions import InvalidConfiguration

logger = logging.getLogger(__name__)

COUNTER_BYTES = 8
DEFAULT_STEP = 30


def unix_time() -> int:
    """
    Current wall-clock time in whole seconds since the epoch.
    """
    return int(time.time())


def int_to_bytestring(i: int, padding: int = COUNTER_BYTES) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret
    """
    try:
        return i.to_bytes(padding, "big")
    except OverflowError as e:
        # negative, or too wide for the padding
        raise ValueError("counter must fit in {} unsigned bytes".format(padding)) from e


class CounterSource(object):
    """
    Supplies the moving factor an OTP engine feeds into the HMAC.

    Subclasses implement ``value()``; the engine only ever calls
    ``get_counter()``.
    """

    def value(self) -> int:
        raise NotImplementedError()

    def get_counter(self) -> bytes:
        """
        :returns: the current counter as 8 big-endian bytes
        """
        return int_to_bytestring(self.value())


class FixedCounter(CounterSource):
    """
    Counter that only moves when the caller moves it (HOTP).
    """

    def __init__(self, count: int = 0) -> None:
        self.count = count

    def value(self) -> int:
        return self.count

    def advance(self, n: int = 1) -> int:
        self.count += n
        logger.debug("counter advanced to %d", self.count)
        return self.count


class TimeCounter(CounterSource):
    """
    Counter derived from the clock: the number of whole ``step``-second
    intervals since the epoch, after shifting the time by ``offset``.
    """

    def __init__(self, step: int = DEFAULT_STEP, offset: int = 0, clock: Optional[Callable[[], int]] = None) -> None:
        """
        :param step: seconds per counter increment
        :param offset: seconds added to the clock before quantization; may be negative
        :param clock: zero-argument callable returning Unix seconds, defaults to the system clock
        """
        self._step = self._check_step(step)
        self._offset = self._check_offset(offset)
        self.clock = clock or unix_time

    @staticmethod
    def _check_step(step: int) -> int:
        # bool is an int subclass but never a meaningful step
        if isinstance(step, bool) or not isinstance(step, int) or step <= 0:
            raise InvalidConfiguration("step must be a positive integer")
        return step

    @staticmethod
    def _check_offset(offset: int) -> int:
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidConfiguration("offset must be an integer")
        return offset

    @property
    def step(self) -> int:
        return self._step

    @step.setter
    def step(self, seconds: int) -> None:
        self._step = self._check_step(seconds)

    @property
    def offset(self) -> int:
        return self._offset

    @offset.setter
    def offset(self, seconds: int) -> None:
        self._offset = self._check_offset(seconds)

    @staticmethod
    def to_bytestring(timecode: int) -> bytes:
        """
        Encodes a step number as the 8-byte counter. Negative step numbers
        wrap to their 64-bit two's-complement value.
        """
        return int_to_bytestring(timecode % (1 << 64))

    def timecode(self, for_time: int) -> int:
        """
        Quantizes a Unix time into a counter. Floor division, so shifted
        times before the epoch round toward negative infinity.

        :param for_time: Unix time in seconds
        """
        return (int(for_time) + self._offset) // self._step

    def value(self) -> int:
        return self.timecode(self.clock())

    def get_counter(self) -> bytes:
        return self.to_bytestring(self.value())

    def remaining(self, for_time: Optional[int] = None) -> int:
        """
        :returns: seconds left before the counter next changes
        """
        if for_time is None:
            for_time = self.clock()
        return self._step - (int(for_time) + self._offset) % self._step
