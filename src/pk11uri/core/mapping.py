"""The result of a successful parse."""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from pk11uri.core.grammar import percent_decode
from pk11uri.core.registry import get_registry
from pk11uri.core.spans import Span


def _attribute(name: str, component: str) -> Callable[[Mapping], str | None]:
    def accessor(self: Mapping) -> str | None:
        return self.get(name)

    accessor.__name__ = name.replace("-", "_")
    accessor.__qualname__ = f"Mapping.{accessor.__name__}"
    accessor.__doc__ = f"Value of the `{name}` {component} attribute if one was parsed."
    return accessor


class Mapping:
    """Immutable view of the attributes found in a PKCS#11 URI.

    Values are returned raw, exactly as written in the URI (still
    percent-encoded); use ``decoded()`` for the octets. An attribute given
    with an empty value (``serial=``) yields ``""``, an attribute that never
    appeared yields ``None``.

    The mapping stores offsets into the parsed URI, which it keeps a
    reference to, rather than copies of each value.
    """

    __slots__ = ("_source", "_standard", "_vendor")

    def __init__(
        self,
        source: str,
        standard: dict[str, Span] | None = None,
        vendor: dict[str, tuple[Span, ...]] | None = None,
    ):
        self._source = source
        self._standard = MappingProxyType(dict(standard or {}))
        self._vendor = MappingProxyType(dict(vendor or {}))

    # pk11-pattr
    token = _attribute("token", "path")
    manufacturer = _attribute("manufacturer", "path")
    serial = _attribute("serial", "path")
    model = _attribute("model", "path")
    library_manufacturer = _attribute("library-manufacturer", "path")
    library_version = _attribute("library-version", "path")
    library_description = _attribute("library-description", "path")
    object = _attribute("object", "path")
    type = _attribute("type", "path")
    id = _attribute("id", "path")
    slot_description = _attribute("slot-description", "path")
    slot_manufacturer = _attribute("slot-manufacturer", "path")
    slot_id = _attribute("slot-id", "path")
    # pk11-qattr
    pin_source = _attribute("pin-source", "query")
    pin_value = _attribute("pin-value", "query")
    module_name = _attribute("module-name", "query")
    module_path = _attribute("module-path", "query")

    @property
    def source(self) -> str:
        """The URI this mapping was parsed from."""
        return self._source

    def get(self, name: str) -> str | None:
        """Value of a standard attribute by its URI name (e.g. ``"pin-value"``)."""
        span = self._standard.get(name)
        return None if span is None else span.text(self._source)

    def span(self, name: str) -> Span | None:
        """Location of a standard attribute's value within the source URI."""
        return self._standard.get(name)

    def decoded(self, name: str) -> bytes | None:
        """Percent-decoded octets of a standard attribute's value."""
        value = self.get(name)
        return None if value is None else percent_decode(value)

    def vendor(self, name: str) -> list[str] | None:
        """Values of a vendor-specific attribute, in the order they appeared.

        Example:
            >>> mapping = parse("pkcs11:v-attr=val1?v-attr=val2&v-attr=val3")
            >>> mapping.vendor("v-attr")
            ['val1', 'val2', 'val3']
        """
        spans = self._vendor.get(name)
        if spans is None:
            return None
        return [span.text(self._source) for span in spans]

    def vendor_spans(self, name: str) -> tuple[Span, ...] | None:
        return self._vendor.get(name)

    def vendor_names(self) -> list[str]:
        """Vendor attribute names in first-seen order."""
        return list(self._vendor)

    def to_dict(self) -> dict[str, Any]:
        """Every standard attribute (None when absent) plus the vendor values."""
        data: dict[str, Any] = {
            definition.name: self.get(definition.name) for definition in get_registry()
        }
        data["vendor"] = {name: self.vendor(name) for name in self._vendor}
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return (
            self._source == other._source
            and dict(self._standard) == dict(other._standard)
            and dict(self._vendor) == dict(other._vendor)
        )

    def __hash__(self) -> int:
        return hash((self._source, tuple(self._standard.items()), tuple(self._vendor.items())))

    def __repr__(self) -> str:
        parts = [f"{name}={self.get(name)!r}" for name in self._standard]
        vendor = {name: self.vendor(name) for name in self._vendor}
        parts.append(f"vendor={vendor!r}")
        return f"Mapping({', '.join(parts)})"
