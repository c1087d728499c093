"""RFC 7512 PKCS#11 URI parsing engine.

Pipeline, leaves first:
- grammar: character classes and percent-encoding helpers
- registry: declarative table of the standard attributes
- splitter / tokenizer: scheme check, component split, ``name=value`` tokens
- validator / vendor: registry-driven checks and vendor value aggregation
- diagnostics: the single ParseError raised on failure
- advisories: SHOULD-level notices for successful parses
- mapping / parser: the result object and the entry point
"""

from pk11uri.core.advisories import Advisory, AdvisoryKind
from pk11uri.core.diagnostics import ErrorKind, ParseError
from pk11uri.core.grammar import Component
from pk11uri.core.mapping import Mapping
from pk11uri.core.parser import ParseOutcome, Parser, get_parser, parse
from pk11uri.core.registry import AttributeDefinition, ValueGrammar, get_registry
from pk11uri.core.spans import Span

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
    "get_parser",
    "get_registry",
    "parse",
]
