"""Scheme check and path/query split."""

from __future__ import annotations

from dataclasses import dataclass

from pk11uri.core import diagnostics
from pk11uri.core.grammar import PKCS11_SCHEME
from pk11uri.core.spans import Span


@dataclass(frozen=True)
class SplitUri:
    """Component locations of a PKCS#11 URI.

    Attributes:
        path: Text between the scheme and the first ``?`` (may be empty)
        query: Text after the first ``?``, or None when there is no ``?``
    """

    path: Span
    query: Span | None = None


def split_uri(uri: str) -> SplitUri:
    """Validate the ``pkcs11:`` scheme and locate the path and query.

    pk11-path characters never include ``?``, so the first ``?`` always
    starts the query. Query values may themselves contain ``?``.

    Raises:
        ParseError: If uri does not start with ``pkcs11:``
    """
    if not uri.startswith(PKCS11_SCHEME):
        raise diagnostics.scheme_mismatch(uri)

    path_start = len(PKCS11_SCHEME)
    question = uri.find("?", path_start)
    if question == -1:
        return SplitUri(path=Span(path_start, len(uri)))
    return SplitUri(path=Span(path_start, question), query=Span(question + 1, len(uri)))
