"""PKCS#11 URI parsing entry point.

Ties the pipeline together: split the URI, tokenize path then query, validate
each occurrence as it is produced, route standard attributes into the
mapping and vendor attributes into the aggregator, and, only once everything
succeeded, scan for advisories.

Example:
    from pk11uri import parse

    mapping = parse("pkcs11:object=my-key;type=private?pin-source=file:/etc/token")
    print(mapping.object())      # "my-key"
    print(mapping.pin_source())  # "file:/etc/token"
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from itertools import chain

from pk11uri.config import settings
from pk11uri.core import advisories as advisory_emitter
from pk11uri.core.advisories import Advisory, AdvisoryScanner
from pk11uri.core.diagnostics import ParseError
from pk11uri.core.grammar import Component
from pk11uri.core.mapping import Mapping
from pk11uri.core.registry import AttributeRegistry, get_registry
from pk11uri.core.spans import Span
from pk11uri.core.splitter import split_uri
from pk11uri.core.tokenizer import AttributeOccurrence, tokenize
from pk11uri.core.validator import Validator
from pk11uri.core.vendor import VendorAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseOutcome:
    """A mapping together with the advisories raised while producing it."""

    mapping: Mapping
    advisories: list[Advisory] = field(default_factory=list)


class Parser:
    """Configured PKCS#11 URI parser.

    Attributes:
        validation: Enforce grammar, enumeration, affinity and duplicate rules.
            When disabled, structural errors (scheme, missing ``=``, stray
            separators) are still raised, a repeated standard name keeps its
            last value and standard names are accepted in either component.
        advisories: Scan successful parses for SHOULD-level advisories
    """

    def __init__(
        self,
        validation: bool = True,
        advisories: bool = True,
        registry: AttributeRegistry | None = None,
    ):
        self.validation = validation
        self.advisories = advisories
        self.registry = registry or get_registry()
        self._validator = Validator(self.registry, enabled=validation)
        self._scanner = AdvisoryScanner(self.registry)

    def parse(self, uri: str) -> Mapping:
        """Parse uri, logging any advisories.

        Raises:
            ParseError: On the first RFC 7512 violation
        """
        outcome = self.inspect(uri)
        advisory_emitter.emit(outcome.advisories)
        return outcome.mapping

    def inspect(self, uri: str) -> ParseOutcome:
        """Parse uri and return the advisories instead of logging them.

        Raises:
            ParseError: On the first RFC 7512 violation
        """
        try:
            mapping, occurrences = self._build(uri)
        except ParseError as e:
            logger.debug("Rejected PKCS#11 URI (%s): %s", e.kind.value, e.violation)
            raise

        found = self._scanner.scan(occurrences) if self.advisories else []
        logger.debug(
            "Parsed PKCS#11 URI: %d attribute(s), %d advisory(ies)",
            len(occurrences),
            len(found),
        )
        return ParseOutcome(mapping=mapping, advisories=found)

    def _build(self, uri: str) -> tuple[Mapping, list[AttributeOccurrence]]:
        split = split_uri(uri)
        components = [tokenize(uri, split.path, Component.PATH)]
        if split.query is not None:
            components.append(tokenize(uri, split.query, Component.QUERY))

        standard: dict[str, Span] = {}
        vendor = VendorAggregator()
        seen: set[str] = set()
        occurrences: list[AttributeOccurrence] = []

        for occurrence in chain.from_iterable(components):
            definition = self._validator.check(occurrence, seen)
            if definition is None:
                vendor.add(occurrence)
            else:
                standard[definition.name] = occurrence.value_span
            occurrences.append(occurrence)

        return Mapping(uri, standard, vendor.freeze()), occurrences


# Module-level parser configured from settings (initialized lazily)
_default_parser: Parser | None = None
_parser_lock = threading.Lock()


def get_parser() -> Parser:
    """Get or create the parser configured from ``pk11uri.config.settings``."""
    global _default_parser
    if _default_parser is None:
        with _parser_lock:
            if _default_parser is None:
                _default_parser = Parser(
                    validation=settings.validation, advisories=settings.advisories
                )
    return _default_parser


def parse(uri: str) -> Mapping:
    """Parse and validate a PKCS#11 URI.

    The returned Mapping refers back to uri; values are raw, still
    percent-encoded text.

    Raises:
        ParseError: If uri violates RFC 7512
    """
    return get_parser().parse(uri)
