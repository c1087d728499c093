"""Accumulation of vendor-specific attribute values."""

from __future__ import annotations

from collections import defaultdict

from pk11uri.core.spans import Span
from pk11uri.core.tokenizer import AttributeOccurrence


class VendorAggregator:
    """Collect vendor attribute values in encounter order.

    Unlike standard attributes, a vendor name may repeat any number of times
    across the path and the query; every occurrence contributes one value.
    """

    def __init__(self) -> None:
        self._values: defaultdict[str, list[Span]] = defaultdict(list)

    def add(self, occurrence: AttributeOccurrence) -> None:
        self._values[occurrence.name].append(occurrence.value_span)

    def __len__(self) -> int:
        return len(self._values)

    def freeze(self) -> dict[str, tuple[Span, ...]]:
        """Snapshot the collected spans; names keep first-seen order."""
        return {name: tuple(spans) for name, spans in self._values.items()}
