"""Parse errors with spans and fix suggestions.

A parse stops at the first violation and raises exactly one ParseError.
The error carries everything needed to explain itself: the URI, the span of
the offending text, the violated rule and a concrete suggestion. Rendering
it with ``str()`` underlines the span:

    pkcs11:object=Private key for Card Authentication;pin-value=123456
                  ^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^ Invalid component value: ...

    help: Replace `Private key for Card Authentication` with `Private%20key...`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pk11uri.core.grammar import PKCS11_SCHEME, Component, percent_encode_unsafe
from pk11uri.core.spans import Span

if TYPE_CHECKING:
    from pk11uri.core.registry import AttributeDefinition
    from pk11uri.core.tokenizer import AttributeOccurrence

# Line breaks dropped from the rendered URI; tabs are shown as one space
_TIDY_CHARS = frozenset("\n\r")


class ErrorKind(str, Enum):
    """Category of a fatal parse violation."""

    SCHEME_MISMATCH = "scheme-mismatch"
    MALFORMED_TOKEN = "malformed-token"
    INVALID_VALUE = "invalid-value"
    INVALID_ENUMERATION = "invalid-enumeration"
    DUPLICATE_NAME = "duplicate-name"
    MISPLACED_ATTRIBUTE = "misplaced-attribute"


class ParseError(ValueError):
    """Raised when a PKCS#11 URI violates RFC 7512.

    Attributes:
        kind: Category of the violation
        uri: The URI exactly as given to the parser
        span: Offsets of the offending text within uri
        violation: The ABNF or RFC text exhibiting the issue
        help: Human-friendly suggestion for resolving the issue
        replacement: Literal text that should replace the span, if computable
    """

    def __init__(
        self,
        kind: ErrorKind,
        uri: str,
        span: Span,
        violation: str,
        help: str,
        replacement: str | None = None,
    ):
        super().__init__(violation)
        self.kind = kind
        self.uri = uri
        self.span = span
        self.violation = violation
        self.help = help
        self.replacement = replacement

    @property
    def error_span(self) -> tuple[int, int]:
        return self.span.as_tuple()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"ParseError(kind={self.kind.value!r}, uri={self.uri!r}, "
            f"error_span={self.error_span}, violation={self.violation!r}, help={self.help!r})"
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            type(self),
            (self.kind, self.uri, self.span, self.violation, self.help, self.replacement),
        )

    def render(self) -> str:
        """Render the URI, a caret underline beneath the span and the help line.

        Line breaks used to format long URIs are removed and tabs are shown
        as a single space, so the underline lines up with a one-line rendering.
        """
        tidy_uri = "".join(ch for ch in self.uri if ch not in _TIDY_CHARS).replace("\t", " ")
        start = _tidy_offset(self.uri, self.span.start)
        end = max(_tidy_offset(self.uri, self.span.end), start + 1)
        underline = " " * start + "^" * (end - start)
        return f"{tidy_uri}\n{underline} {self.violation}\n\nhelp: {self.help}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "uri": self.uri,
            "span": list(self.error_span),
            "violation": self.violation,
            "help": self.help,
            "replacement": self.replacement,
        }


def _tidy_offset(uri: str, offset: int) -> int:
    """Map an offset in uri onto the tidied rendering."""
    return offset - sum(1 for ch in uri[: min(offset, len(uri))] if ch in _TIDY_CHARS)


# Builders, one per violation


def scheme_mismatch(uri: str) -> ParseError:
    return ParseError(
        ErrorKind.SCHEME_MISMATCH,
        uri,
        Span(0, len(PKCS11_SCHEME)),
        'Invalid `pk11-URI`: expected `"pkcs11:" pk11-path [ "?" pk11-query ]`.',
        f"PKCS#11 URI must start with `{PKCS11_SCHEME}`.",
    )


def missing_separator(source: str, span: Span, component: Component) -> ParseError:
    return ParseError(
        ErrorKind.MALFORMED_TOKEN,
        source,
        span,
        f"Malformed component: expected `{component.production}` in the form `name=value`.",
        f"Write `{span.text(source)}` as `name=value`; refer to RFC7512 section 2.3 "
        "for acceptable path|query attributes.",
    )


def misplaced_delimiter(source: str, span: Span, component: Component) -> ParseError:
    return ParseError(
        ErrorKind.MALFORMED_TOKEN,
        source,
        span,
        f"Misplaced {component.value} delimiter.",
        f"Remove the misplaced '{component.separator}' delimiter.",
        replacement="",
    )


def missing_name(occurrence: AttributeOccurrence) -> ParseError:
    return ParseError(
        ErrorKind.MALFORMED_TOKEN,
        occurrence.source,
        occurrence.token_span,
        "Invalid component: Missing attribute name.",
        "The attribute name may not be blank. "
        "Refer to the RFC7512 specification for valid attributes.",
    )


def invalid_vendor_name(occurrence: AttributeOccurrence) -> ParseError:
    return ParseError(
        ErrorKind.MALFORMED_TOKEN,
        occurrence.source,
        occurrence.name_span,
        "Invalid vendor-specific component name: expected `1*pk11-v-attr-nm-char`.",
        f"`{occurrence.name}` violated vendor-specific attribute name characters "
        "consisting solely of alphanumeric, '-', or '_'.",
    )


_UNSAFE_VIOLATIONS = {
    " ": (
        "Invalid component value: the component value contains an embedded space; "
        "Appendix A of [RFC3986] specifies component values may not contain empty spaces."
    ),
    "#": "Invalid component value: The '#' delimiter must always be percent-encoded.",
    "/": (
        "Invalid `pk11-pattr`: The general '/' delimiter must always be "
        "percent-encoded in a path component."
    ),
}


def unsafe_value(occurrence: AttributeOccurrence, char: str) -> ParseError:
    value = occurrence.value
    fixed = percent_encode_unsafe(value, occurrence.component)
    return ParseError(
        ErrorKind.INVALID_VALUE,
        occurrence.source,
        occurrence.value_span,
        _UNSAFE_VIOLATIONS[char],
        f"Replace `{value}` with `{fixed}`.",
        replacement=fixed,
    )


def invalid_pattern(occurrence: AttributeOccurrence, definition: AttributeDefinition) -> ParseError:
    return ParseError(
        ErrorKind.INVALID_VALUE,
        occurrence.source,
        occurrence.value_span if occurrence.value else occurrence.token_span,
        f"Invalid `{definition.component.production}`: {definition.abnf}.",
        definition.grammar_help,
    )


def invalid_enumeration(
    occurrence: AttributeOccurrence, definition: AttributeDefinition
) -> ParseError:
    members = definition.enumeration or ()
    return ParseError(
        ErrorKind.INVALID_ENUMERATION,
        occurrence.source,
        occurrence.value_span if occurrence.value else occurrence.token_span,
        f"Invalid `{definition.component.production}`: {definition.abnf}.",
        f"Replace `{occurrence.value}` value with one of: {', '.join(members)}.",
    )


def duplicate_name(occurrence: AttributeOccurrence) -> ParseError:
    return ParseError(
        ErrorKind.DUPLICATE_NAME,
        occurrence.source,
        occurrence.token_span,
        f'Duplicate `{occurrence.component.production}` standard name: "{occurrence.name}".',
        "A PKCS #11 URI must not contain duplicate standard attributes of the same name "
        "(RFC7512 section 2.3).",
    )


def misplaced_attribute(
    occurrence: AttributeOccurrence, definition: AttributeDefinition
) -> ParseError:
    target = definition.component.value
    return ParseError(
        ErrorKind.MISPLACED_ATTRIBUTE,
        occurrence.source,
        occurrence.token_span,
        f"Naming collision with standard {target} component.",
        f"Move `{occurrence.name}` and its value to the PKCS#11 URI {target}.",
    )
