"""pk11uri: parse and validate PKCS#11 URIs (RFC 7512).

Example:
    from pk11uri import ParseError, parse

    try:
        mapping = parse("pkcs11:token=my-token;object=my-certificate;type=cert")
    except ParseError as e:
        print(e)  # URI, caret underline, violation and help
    else:
        print(mapping.object(), mapping.type())
"""

from pk11uri.core import (
    Advisory,
    AdvisoryKind,
    AttributeDefinition,
    Component,
    ErrorKind,
    Mapping,
    ParseError,
    ParseOutcome,
    Parser,
    Span,
    ValueGrammar,
    get_registry,
    parse,
)

__version__ = "0.1.0"

__all__ = [
    "Advisory",
    "AdvisoryKind",
    "AttributeDefinition",
    "Component",
    "ErrorKind",
    "Mapping",
    "ParseError",
    "ParseOutcome",
    "Parser",
    "Span",
    "ValueGrammar",
    "get_registry",
    "parse",
]
