import base64
import binascii
import unicodedata
from hmac import compare_digest
from typing import Iterable, Tuple, Union
from urllib.parse import quote

from .exceptions import InvalidConfiguration

UriValue = Union[int, str]


def base32_encode(raw: bytes) -> str:
    """
    Base32-encodes raw secret bytes the way authenticator apps expect them:
    RFC 4648 alphabet, upper case, with the ``=`` padding stripped.
    """
    # The otpauth scheme does not use base32 padding.
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def base32_decode(secret: str) -> bytes:
    """
    Decodes a base32 secret, tolerating missing padding, lower case and
    the spaces some apps insert for readability.

    :param secret: base32 text
    :returns: raw secret bytes
    :raises InvalidConfiguration: if the text is not valid base32
    """
    secret = secret.replace(" ", "")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except binascii.Error as e:
        raise InvalidConfiguration("secret is not valid base32") from e


def percent_encode(value: str) -> str:
    """
    Percent-encodes a single URI component per RFC 3986.

    Everything outside the unreserved set (``A-Z a-z 0-9 - . _ ~``) is
    escaped, so ``/``, ``:`` and ``@`` are encoded and a space becomes
    ``%20`` rather than ``+``.
    """
    return quote(value, safe="")


def build_uri(otp_type: str, label: str, params: Iterable[Tuple[str, UriValue]]) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    This can then be encoded in a QR Code and used to provision the Google
    Authenticator app.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param otp_type: "totp" or "hotp"
    :param label: account label; encoded as one path component
    :param params: query parameters, emitted in the given order with each
        value percent-encoded
    :returns: provisioning uri
    """
    base_uri = "otpauth://{0}/{1}?{2}"
    query = "&".join("{0}={1}".format(key, percent_encode(str(value))) for key, value in params)
    return base_uri.format(otp_type, percent_encode(label), query)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
