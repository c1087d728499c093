"""Registry-driven validation of attribute occurrences.

The validator is generic: everything attribute-specific comes from the
AttributeDefinition found in the registry. Checks run in this order for a
single occurrence, and the first failure is raised immediately:

1. the name is not blank
2. vendor names use only ``1*pk11-v-attr-nm-char``
3. standard names appear in their own component
4. the value satisfies its grammar (enumeration, pattern or character class)
5. standard names have not been seen earlier in the path or the query
"""

from __future__ import annotations

import logging

from pk11uri.core import diagnostics
from pk11uri.core.grammar import VENDOR_NAME_PATTERN, first_unsafe_char
from pk11uri.core.registry import AttributeDefinition, AttributeRegistry, ValueGrammar
from pk11uri.core.tokenizer import AttributeOccurrence

logger = logging.getLogger(__name__)


class Validator:
    """Validate occurrences against the standard attribute registry.

    Attributes:
        registry: Standard attribute definitions
        enabled: When False only the registry lookup is performed
    """

    def __init__(self, registry: AttributeRegistry, enabled: bool = True):
        self.registry = registry
        self.enabled = enabled

    def check(
        self, occurrence: AttributeOccurrence, seen: set[str]
    ) -> AttributeDefinition | None:
        """Validate one occurrence.

        Args:
            occurrence: The occurrence to validate
            seen: Standard names accepted so far in this parse; updated in place

        Returns:
            The matching definition, or None for a vendor attribute

        Raises:
            ParseError: On the first violation found
        """
        name = occurrence.name
        definition = self.registry.lookup(name)
        if not self.enabled:
            return definition

        if not name:
            raise diagnostics.missing_name(occurrence)

        if definition is None:
            if VENDOR_NAME_PATTERN.match(name) is None:
                raise diagnostics.invalid_vendor_name(occurrence)
            self._check_text(occurrence)
            return None

        if definition.component is not occurrence.component:
            raise diagnostics.misplaced_attribute(occurrence, definition)

        self._check_value(occurrence, definition)

        if name in seen:
            raise diagnostics.duplicate_name(occurrence)
        seen.add(name)
        return definition

    def _check_value(
        self, occurrence: AttributeOccurrence, definition: AttributeDefinition
    ) -> None:
        if definition.grammar is ValueGrammar.TEXT:
            self._check_text(occurrence)
        elif not definition.accepts(occurrence.value):
            if definition.grammar is ValueGrammar.ENUMERATED:
                raise diagnostics.invalid_enumeration(occurrence, definition)
            raise diagnostics.invalid_pattern(occurrence, definition)

    @staticmethod
    def _check_text(occurrence: AttributeOccurrence) -> None:
        """Reject characters that must always be percent-encoded."""
        char = first_unsafe_char(occurrence.value, occurrence.component)
        if char is not None:
            logger.debug("Unsafe %r in value of %s", char, occurrence.name)
            raise diagnostics.unsafe_value(occurrence, char)
