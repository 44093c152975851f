"""
Tests for encoding helpers and counter sources.
"""

import pytest

from otpengine import FixedCounter, InvalidConfiguration, TimeCounter
from otpengine.counters import int_to_bytestring
from otpengine.utils import base32_decode, base32_encode, build_uri, percent_encode, strings_equal


class TestEncoding:
    def test_base32_strips_padding(self):
        assert base32_encode(b"1") == "GE"
        assert base32_encode(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

    def test_base32_decode_tolerates_missing_padding_and_case(self):
        assert base32_decode("ge") == b"1"
        assert base32_decode("GEZD GNBV") == b"12345"

    def test_base32_decode_rejects_garbage(self):
        with pytest.raises(InvalidConfiguration):
            base32_decode("not base32!")

    @pytest.mark.parametrize(
        "raw,encoded",
        [
            ("a b", "a%20b"),
            ("a:b", "a%3Ab"),
            ("a@b", "a%40b"),
            ("a/b", "a%2Fb"),
            ("a&b=c", "a%26b%3Dc"),
            ("A-z.0_~", "A-z.0_~"),
        ],
    )
    def test_percent_encode(self, raw, encoded):
        assert percent_encode(raw) == encoded

    def test_build_uri(self):
        assert build_uri("totp", "x y", [("secret", "AB"), ("period", 30)]) == "otpauth://totp/x%20y?secret=AB&period=30"

    def test_strings_equal(self):
        assert strings_equal("123456", "123456")
        assert not strings_equal("123456", "123457")
        assert not strings_equal("123456", "12345")


class TestCounters:
    def test_int_to_bytestring(self):
        assert int_to_bytestring(0) == b"\x00" * 8
        assert int_to_bytestring(0x3039) == b"\x00" * 6 + b"\x30\x39"
        assert int_to_bytestring(2**64 - 1) == b"\xff" * 8

    @pytest.mark.parametrize("value", [-1, 2**64])
    def test_int_to_bytestring_out_of_range(self, value):
        with pytest.raises(ValueError):
            int_to_bytestring(value)

    def test_fixed_counter(self):
        counter = FixedCounter(41)
        assert counter.advance() == 42
        assert counter.get_counter() == b"\x00" * 7 + b"\x2a"

    def test_time_counter_floor_division(self):
        counter = TimeCounter(step=30, clock=lambda: 59)
        assert counter.value() == 1
        assert counter.timecode(-1) == -1
        assert counter.timecode(60) == 2

    def test_time_counter_offset(self):
        counter = TimeCounter(step=10, offset=5, clock=lambda: 4)
        assert counter.value() == 0
        counter.offset = 6
        assert counter.value() == 1

    def test_time_counter_bytes_wrap_negative_steps(self):
        assert TimeCounter.to_bytestring(1) == b"\x00" * 7 + b"\x01"
        assert TimeCounter.to_bytestring(-1) == b"\xff" * 8
        assert TimeCounter(step=30, clock=lambda: -31).get_counter() == b"\xff" * 7 + b"\xfe"

    def test_time_counter_remaining(self):
        counter = TimeCounter(step=30, clock=lambda: 31)
        assert counter.remaining() == 29
        assert counter.remaining(59) == 1

    def test_time_counter_rejects_bad_step(self):
        with pytest.raises(InvalidConfiguration):
            TimeCounter(step=-1)
        counter = TimeCounter()
        with pytest.raises(InvalidConfiguration):
            counter.step = 0
        assert counter.step == 30
