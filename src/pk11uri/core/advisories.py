"""Non-fatal advisories for RFC 7512 SHOULD / SHOULD NOT guidance.

RFC 7512 recommends, without requiring, that certain characters be
percent-encoded and that certain attribute combinations be avoided. These
recommendations never make a URI invalid; after a successful parse they are
reported as Advisory objects and logged at WARNING level, one line each,
prefixed with ``pkcs11 warning:``.

Example:
    pkcs11 warning: the `<` identified at offset 6 in `cookie<^^>monster!` of
    component `x-muppet=cookie<^^>monster!` SHOULD be percent-encoded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from pk11uri.core.grammar import (
    DEPRECATED_VENDOR_PREFIX,
    HEXDIGITS,
    PERCENT_ENCODED_PATTERN,
    is_safe_char,
)
from pk11uri.core.registry import AttributeRegistry
from pk11uri.core.tokenizer import AttributeOccurrence

logger = logging.getLogger(__name__)

ADVISORY_MARKER: Final[str] = "pkcs11 warning:"


class AdvisoryKind(str, Enum):
    DEPRECATED_VENDOR_PREFIX = "deprecated-vendor-prefix"
    SHOULD_PERCENT_ENCODE = "should-percent-encode"
    MALFORMED_PERCENT_ENCODING = "malformed-percent-encoding"
    ID_NOT_PERCENT_ENCODED = "id-not-percent-encoded"
    MODULE_NAME_NOT_PORTABLE = "module-name-not-portable"
    MODULE_NAME_AND_PATH = "module-name-and-path"
    PIN_SOURCE_AND_VALUE = "pin-source-and-value"


@dataclass(frozen=True)
class Advisory:
    """A single SHOULD / SHOULD NOT notice.

    Attributes:
        kind: What the notice is about
        message: Advisory text, without the marker
        attribute: Name of the attribute concerned
        value: Raw value of that attribute
        token: The whole ``name=value`` token
        char: Offending character, for character-level notices
        offset: Offset of char within value
    """

    kind: AdvisoryKind
    message: str
    attribute: str = ""
    value: str = ""
    token: str = ""
    char: str | None = None
    offset: int | None = None

    def __str__(self) -> str:
        return f"{ADVISORY_MARKER} {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": str(self),
            "attribute": self.attribute,
            "offset": self.offset,
            "char": self.char,
        }


class AdvisoryScanner:
    """Scan accepted occurrences for SHOULD-level issues.

    Attributes:
        registry: Standard attribute definitions, consulted for the
            per-attribute advisory flag
    """

    def __init__(self, registry: AttributeRegistry):
        self.registry = registry

    def scan(self, occurrences: Iterable[AttributeOccurrence]) -> list[Advisory]:
        """Collect advisories in occurrence order, then URI-wide ones."""
        advisories: list[Advisory] = []
        names: set[str] = set()

        for occurrence in occurrences:
            name = occurrence.name
            names.add(name)
            definition = self.registry.lookup(name)

            if definition is None:
                if name.startswith(DEPRECATED_VENDOR_PREFIX):
                    advisories.append(_deprecated_prefix(occurrence))
                advisories.extend(_scan_value(occurrence))
                continue

            if name == "id":
                advisory = _check_id(occurrence)
                if advisory is not None:
                    advisories.append(advisory)
            elif name == "module-name":
                advisory = _check_module_name(occurrence)
                if advisory is not None:
                    advisories.append(advisory)

            if definition.advisory:
                advisories.extend(_scan_value(occurrence))

        # "...semantics of using both attributes in the same URI string is
        #  implementation specific but such use SHOULD be avoided."
        if {"module-name", "module-path"} <= names:
            advisories.append(
                Advisory(
                    kind=AdvisoryKind.MODULE_NAME_AND_PATH,
                    message=(
                        "using both `module-name` and `module-path` SHOULD be avoided. "
                        "Attribute `module-name` is preferred due to its "
                        "system-independent nature."
                    ),
                )
            )
        if {"pin-source", "pin-value"} <= names:
            advisories.append(
                Advisory(
                    kind=AdvisoryKind.PIN_SOURCE_AND_VALUE,
                    message=(
                        'a PKCS#11 URI containing both "pin-source" and "pin-value" '
                        "query attributes SHOULD be refused as invalid."
                    ),
                )
            )
        return advisories


def emit(advisories: Iterable[Advisory]) -> None:
    """Log each advisory as a single WARNING line."""
    for advisory in advisories:
        logger.warning("%s", advisory)


def _deprecated_prefix(occurrence: AttributeOccurrence) -> Advisory:
    return Advisory(
        kind=AdvisoryKind.DEPRECATED_VENDOR_PREFIX,
        message=(
            "per RFC7512, the previously used convention of starting vendor attributes "
            f'with an "{DEPRECATED_VENDOR_PREFIX}" prefix is now deprecated. '
            f"Identified: `{occurrence.name}`."
        ),
        attribute=occurrence.name,
        value=occurrence.value,
        token=occurrence.token,
    )


def _scan_value(occurrence: AttributeOccurrence) -> list[Advisory]:
    """Report characters that SHOULD be percent-encoded, left to right."""
    advisories: list[Advisory] = []
    value = occurrence.value
    token = occurrence.token
    offset = 0
    while offset < len(value):
        char = value[offset]
        if char == "%":
            if len(value) >= offset + 3 and set(value[offset + 1 : offset + 3]) <= HEXDIGITS:
                offset += 3
                continue
            advisories.append(
                Advisory(
                    kind=AdvisoryKind.MALFORMED_PERCENT_ENCODING,
                    message=(
                        f"identified malformed percent-encoding at offset {offset} "
                        f"in `{value}` of component `{token}`."
                    ),
                    attribute=occurrence.name,
                    value=value,
                    token=token,
                    char=char,
                    offset=offset,
                )
            )
        elif not is_safe_char(char, occurrence.component):
            advisories.append(
                Advisory(
                    kind=AdvisoryKind.SHOULD_PERCENT_ENCODE,
                    message=(
                        f"the `{char}` identified at offset {offset} in `{value}` "
                        f"of component `{token}` SHOULD be percent-encoded."
                    ),
                    attribute=occurrence.name,
                    value=value,
                    token=token,
                    char=char,
                    offset=offset,
                )
            )
        offset += 1
    return advisories


def _check_id(occurrence: AttributeOccurrence) -> Advisory | None:
    value = occurrence.value
    if not value or PERCENT_ENCODED_PATTERN.match(value):
        return None
    return Advisory(
        kind=AdvisoryKind.ID_NOT_PERCENT_ENCODED,
        message=f"the whole value of the `id` attribute SHOULD be percent-encoded: id={value}.",
        attribute="id",
        value=value,
        token=occurrence.token,
    )


def _check_module_name(occurrence: AttributeOccurrence) -> Advisory | None:
    value = occurrence.value
    if not (value.startswith("lib") or any(c in "./\\" for c in value)):
        return None
    return Advisory(
        kind=AdvisoryKind.MODULE_NAME_NOT_PORTABLE,
        message=(
            'the attribute "module-name" SHOULD contain a case-insensitive PKCS #11 module '
            "name (not path nor filename) without system-specific affixes. "
            f"Context: `module-name={value}`."
        ),
        attribute="module-name",
        value=value,
        token=occurrence.token,
    )
