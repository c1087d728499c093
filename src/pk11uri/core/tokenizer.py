"""Split a URI component into ``name=value`` attribute occurrences."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pk11uri.core import diagnostics
from pk11uri.core.grammar import Component
from pk11uri.core.spans import Span


@dataclass(frozen=True)
class AttributeOccurrence:
    """One ``name=value`` token found in a component.

    Only offsets are stored; the text is sliced from ``source`` on demand.
    Surrounding whitespace is excluded from every span, so URIs wrapped
    over several lines tokenize the same as their single-line form.
    """

    source: str = field(repr=False)
    component: Component
    token_span: Span
    name_span: Span
    value_span: Span

    @property
    def name(self) -> str:
        return self.name_span.text(self.source)

    @property
    def value(self) -> str:
        return self.value_span.text(self.source)

    @property
    def token(self) -> str:
        return self.token_span.text(self.source)


def tokenize(source: str, span: Span, component: Component) -> Iterator[AttributeOccurrence]:
    """Yield the attribute occurrences of one component, left to right.

    Args:
        source: The whole URI
        span: Location of the component within source
        component: Which component is being tokenized

    Raises:
        ParseError: On a token without ``=`` or a stray separator. Errors
            are raised lazily, when the offending token is reached.
    """
    if not len(span.strip(source)):
        return

    separator = component.separator
    start = span.start
    while start <= span.end:
        stop = source.find(separator, start, span.end)
        if stop == -1:
            stop = span.end
        raw = Span(start, stop)
        token_span = raw.strip(source)

        if not len(token_span):
            if stop < span.end:
                offending = Span(stop, stop + 1)
            else:
                offending = Span(start - 1, start)
            raise diagnostics.misplaced_delimiter(source, offending, component)

        equals = source.find("=", token_span.start, token_span.end)
        if equals == -1:
            raise diagnostics.missing_separator(source, token_span, component)

        yield AttributeOccurrence(
            source=source,
            component=component,
            token_span=token_span,
            name_span=Span(token_span.start, equals).strip(source),
            value_span=Span(equals + 1, token_span.end).strip(source),
        )
        start = stop + 1
