"""Registry of the standard RFC 7512 attributes.

Every piece of attribute-specific knowledge (which component an attribute
belongs to, how its value is checked, how a failure is explained) lives in
the declarative table below. The validator and the advisory scanner only
ever consult the registry, so adding or correcting an attribute is a
one-line change here.

Example:
    from pk11uri.core.registry import get_registry

    registry = get_registry()
    definition = registry.lookup("type")
    print(definition.enumeration)  # ('public', 'private', 'cert', 'secret-key', 'data')
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

from pk11uri.core.grammar import Component

logger = logging.getLogger(__name__)


class ValueGrammar(str, Enum):
    """How an attribute value is checked.

    Attributes:
        TEXT: Free text restricted to the component's character class
        PATTERN: Must fully match a regular expression
        ENUMERATED: Must be one of a closed set of literals
    """

    TEXT = "text"
    PATTERN = "pattern"
    ENUMERATED = "enumerated"


@dataclass(frozen=True)
class AttributeDefinition:
    """A standard PKCS#11 URI attribute.

    Attributes:
        name: Attribute name as it appears in the URI
        component: Component the attribute must appear in
        grammar: Kind of value check applied
        abnf: RFC 7512 ABNF rule, quoted in violations
        pattern: Compiled value pattern for PATTERN grammar
        enumeration: Allowed literals for ENUMERATED grammar
        grammar_help: Help text for PATTERN violations
        advisory: Whether the percent-encoding advisory scan applies
    """

    name: str
    component: Component
    grammar: ValueGrammar = ValueGrammar.TEXT
    abnf: str = ""
    pattern: re.Pattern[str] | None = None
    enumeration: tuple[str, ...] | None = None
    grammar_help: str = ""
    advisory: bool = True

    @property
    def accessor(self) -> str:
        """Python-friendly name used for Mapping accessors."""
        return self.name.replace("-", "_")

    def accepts(self, value: str) -> bool:
        """Check a value against the PATTERN or ENUMERATED grammar.

        TEXT values are checked against the component character class by
        the validator, so they are always accepted here.
        """
        if self.grammar is ValueGrammar.ENUMERATED:
            return self.enumeration is not None and value in self.enumeration
        if self.grammar is ValueGrammar.PATTERN:
            return self.pattern is not None and self.pattern.fullmatch(value) is not None
        return True


OBJECT_TYPES: Final[tuple[str, ...]] = ("public", "private", "cert", "secret-key", "data")

# ABNF DIGIT is ASCII only, so no \d
LIBRARY_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+(\.[0-9]+)?")
SLOT_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+")


def _text(name: str, component: Component, abnf: str) -> AttributeDefinition:
    return AttributeDefinition(name=name, component=component, abnf=abnf)


_DEFINITIONS: Final[tuple[AttributeDefinition, ...]] = (
    # pk11-pattr
    _text("token", Component.PATH, '`pk11-token` = `"token" "=" *pk11-pchar`'),
    _text("manufacturer", Component.PATH, '`pk11-manuf` = `"manufacturer" "=" *pk11-pchar`'),
    _text("serial", Component.PATH, '`pk11-serial` = `"serial" "=" *pk11-pchar`'),
    _text("model", Component.PATH, '`pk11-model` = `"model" "=" *pk11-pchar`'),
    _text(
        "library-manufacturer",
        Component.PATH,
        '`pk11-lib-manuf` = `"library-manufacturer" "=" *pk11-pchar`',
    ),
    AttributeDefinition(
        name="library-version",
        component=Component.PATH,
        grammar=ValueGrammar.PATTERN,
        abnf='`pk11-lib-ver` = `"library-version" "=" 1*DIGIT [ "." 1*DIGIT ]`',
        pattern=LIBRARY_VERSION_PATTERN,
        grammar_help=(
            "The `library-version` attribute represents the major and minor version "
            "decimal number of the library and its format is `M.N`. "
            "The major version is required."
        ),
        advisory=False,
    ),
    _text(
        "library-description",
        Component.PATH,
        '`pk11-lib-desc` = `"library-description" "=" *pk11-pchar`',
    ),
    _text("object", Component.PATH, '`pk11-object` = `"object" "=" *pk11-pchar`'),
    AttributeDefinition(
        name="type",
        component=Component.PATH,
        grammar=ValueGrammar.ENUMERATED,
        abnf=(
            '`pk11-type` = `"type" "=" '
            '( "public" / "private" / "cert" / "secret-key" / "data" )`'
        ),
        enumeration=OBJECT_TYPES,
        advisory=False,
    ),
    # id has its own advisory (whole value SHOULD be pct-encoded)
    AttributeDefinition(
        name="id",
        component=Component.PATH,
        abnf='`pk11-id` = `"id" "=" *pk11-pchar`',
        advisory=False,
    ),
    _text(
        "slot-description",
        Component.PATH,
        '`pk11-slot-desc` = `"slot-description" "=" *pk11-pchar`',
    ),
    _text(
        "slot-manufacturer",
        Component.PATH,
        '`pk11-slot-manuf` = `"slot-manufacturer" "=" *pk11-pchar`',
    ),
    AttributeDefinition(
        name="slot-id",
        component=Component.PATH,
        grammar=ValueGrammar.PATTERN,
        abnf='`pk11-slot-id` = `"slot-id" "=" 1*DIGIT`',
        pattern=SLOT_ID_PATTERN,
        grammar_help="The `slot-id` value may only be numeric.",
        advisory=False,
    ),
    # pk11-qattr
    _text("pin-source", Component.QUERY, '`pk11-pin-source` = `"pin-source" "=" *pk11-qchar`'),
    _text("pin-value", Component.QUERY, '`pk11-pin-value` = `"pin-value" "=" *pk11-qchar`'),
    _text(
        "module-name",
        Component.QUERY,
        '`pk11-mod-name` = `"module-name" "=" *pk11-qchar`',
    ),
    _text(
        "module-path",
        Component.QUERY,
        '`pk11-mod-path` = `"module-path" "=" *pk11-qchar`',
    ),
)


class AttributeRegistry:
    """Read-only lookup table of standard attribute definitions.

    Definitions keep the RFC 7512 order, path attributes first.
    """

    def __init__(self, definitions: tuple[AttributeDefinition, ...]) -> None:
        self._definitions = MappingProxyType({d.name: d for d in definitions})

    def lookup(self, name: str) -> AttributeDefinition | None:
        """Get the definition for a standard name, or None for vendor names."""
        return self._definitions.get(name)

    def is_standard(self, name: str) -> bool:
        return name in self._definitions

    def names(self, component: Component | None = None) -> tuple[str, ...]:
        """List standard names, optionally restricted to one component."""
        return tuple(
            d.name
            for d in self._definitions.values()
            if component is None or d.component is component
        )

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(self._definitions.values())


# Module-level registry (initialized lazily)
_registry: AttributeRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> AttributeRegistry:
    """Get or create the process-wide attribute registry.

    The registry is built exactly once, on first access, and is never
    mutated afterwards, so concurrent readers need no synchronization.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = AttributeRegistry(_DEFINITIONS)
                logger.debug("Built attribute registry with %d standard attributes", len(_registry))
    return _registry
