"""RFC 7512 character classes and percent-encoding helpers.

The PKCS#11 URI grammar (RFC 7512 section 2.3) builds attribute values from:

    pk11-pchar     = unreserved / pk11-res-avail / pct-encoded / "&"
    pk11-qchar     = unreserved / pk11-res-avail / pct-encoded / "/" / "?" / "|"
    pk11-res-avail = ":" / "[" / "]" / "@" / "!" / "$" / "'" / "(" / ")"
                   / "*" / "+" / "," / "="
    unreserved     = ALPHA / DIGIT / "-" / "." / "_" / "~"

Characters outside these classes SHOULD be percent-encoded. A small subset
(space, "#", and "/" inside the path) makes the URI structurally ambiguous
and MUST be percent-encoded; those are rejected outright by the validator.
"""

from __future__ import annotations

import re
import string
from enum import Enum
from typing import Final
from urllib.parse import quote, unquote_to_bytes

PKCS11_SCHEME: Final[str] = "pkcs11:"

UNRESERVED: Final[frozenset[str]] = frozenset(string.ascii_letters + string.digits + "-._~")
PK11_RES_AVAIL: Final[frozenset[str]] = frozenset(":[]@!$'()*+,=")

# 1*pk11-v-attr-nm-char
VENDOR_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]+$")

# Whole value made of pct-encoded octets
PERCENT_ENCODED_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(%[0-9A-Fa-f]{2})+$")

HEXDIGITS: Final[frozenset[str]] = frozenset(string.hexdigits)

DEPRECATED_VENDOR_PREFIX: Final[str] = "x-"


class Component(str, Enum):
    """The two attribute-bearing components of a PKCS#11 URI."""

    PATH = "path"
    QUERY = "query"

    @property
    def separator(self) -> str:
        return ";" if self is Component.PATH else "&"

    @property
    def production(self) -> str:
        """ABNF production name of an attribute in this component."""
        return "pk11-pattr" if self is Component.PATH else "pk11-qattr"

    @property
    def extra_chars(self) -> frozenset[str]:
        """Characters beyond unreserved / pk11-res-avail allowed in values."""
        return _PATH_EXTRAS if self is Component.PATH else _QUERY_EXTRAS

    @property
    def unsafe_chars(self) -> tuple[str, ...]:
        """Characters that must always be percent-encoded in a value.

        Ordered by the precedence used when naming the violation.
        """
        return _PATH_UNSAFE if self is Component.PATH else _QUERY_UNSAFE


_PATH_EXTRAS: Final[frozenset[str]] = frozenset("&")
_QUERY_EXTRAS: Final[frozenset[str]] = frozenset("/?|")
_PATH_UNSAFE: Final[tuple[str, ...]] = (" ", "#", "/")
_QUERY_UNSAFE: Final[tuple[str, ...]] = (" ", "#")


def is_safe_char(char: str, component: Component) -> bool:
    """Check whether a character may appear unencoded in a component value."""
    return char in UNRESERVED or char in PK11_RES_AVAIL or char in component.extra_chars


def first_unsafe_char(value: str, component: Component) -> str | None:
    """Return the highest-precedence must-encode character found in value."""
    for char in component.unsafe_chars:
        if char in value:
            return char
    return None


def percent_encode_unsafe(value: str, component: Component) -> str:
    """Percent-encode only the must-encode characters of value.

    Everything else, including existing pct-encoded triplets, is kept as is,
    so the result can be substituted back into the URI verbatim.
    """
    unsafe = component.unsafe_chars
    return "".join(quote(char, safe="") if char in unsafe else char for char in value)


def percent_decode(value: str) -> bytes:
    """Decode pct-encoded octets; unencoded characters are UTF-8 encoded."""
    return unquote_to_bytes(value)
