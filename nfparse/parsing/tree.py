# -*- coding: utf-8 -*-
"""
Namespace-agnostic element lookup
=================================
Fiscal XML files declare (or omit) namespaces inconsistently and use
arbitrary prefixes, so every lookup here matches on the *local* tag name
only.  The walker is written against a three-method adapter
(``children``, ``local_name``, ``text``) so the lookup rules do not depend
on a particular XML library; :data:`LXML` binds it to lxml trees.

Absence is the normal case across dialects: text lookups return ``""`` and
numeric lookups return ``Decimal("0")`` instead of raising.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional, Protocol

from lxml import etree as LET

from .money import parse_decimal


class TreeAdapter(Protocol):
    def children(self, node: Any) -> Iterable[Any]: ...

    def local_name(self, node: Any) -> str: ...

    def text(self, node: Any) -> str: ...


class LxmlAdapter:
    """Adapter for lxml elements and element trees.

    An ``_ElementTree`` behaves like a DOM document: its only child is the
    root element, so searches started from it also consider the root.
    """

    def children(self, node):
        if isinstance(node, LET._ElementTree):
            return [node.getroot()]
        return [c for c in node if isinstance(c.tag, str)]

    def local_name(self, node) -> str:
        if isinstance(node, LET._ElementTree):
            return ""
        return LET.QName(node).localname

    def text(self, node) -> str:
        if isinstance(node, LET._ElementTree):
            node = node.getroot()
        parts: list[str] = []
        _collect_text(node, parts)
        return "".join(parts)


def _collect_text(el: LET._Element, parts: list[str]) -> None:
    # DOM textContent: element text and children, comments/PIs skipped
    if el.text and isinstance(el.tag, str):
        parts.append(el.text)
    for child in el:
        if isinstance(child.tag, str):
            _collect_text(child, parts)
        if child.tail:
            parts.append(child.tail)


class Locator:
    """Local-name lookups over any tree exposed through a :class:`TreeAdapter`."""

    def __init__(self, adapter: TreeAdapter):
        self.adapter = adapter

    def iter_descendants(self, node) -> Iterator[Any]:
        """Yield descendants of ``node`` in document order (``node`` excluded)."""
        if node is None:
            return
        stack = list(reversed(list(self.adapter.children(node))))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(list(self.adapter.children(current))))

    def find_first(self, node, local_name: str) -> Optional[Any]:
        for el in self.iter_descendants(node):
            if self.adapter.local_name(el) == local_name:
                return el
        return None

    def find_all(self, node, local_name: str) -> list[Any]:
        return [
            el
            for el in self.iter_descendants(node)
            if self.adapter.local_name(el) == local_name
        ]

    def has(self, node, local_name: str) -> bool:
        return self.find_first(node, local_name) is not None

    def get_text(self, node, local_name: str) -> str:
        """Trimmed text of the first ``local_name`` descendant, or ``""``."""
        el = self.find_first(node, local_name)
        if el is None:
            return ""
        return (self.adapter.text(el) or "").strip()

    def get_nested_text(self, node, parent_name: str, child_name: str) -> str:
        return self.get_text(self.find_first(node, parent_name), child_name)

    def get_first_non_zero(self, node, local_names: Iterable[str]) -> Decimal:
        """Return the first candidate tag whose value is strictly positive.

        Dialects name the same amount differently (``ValorPis``, ``vPis``,
        ``vRetPIS`` ...), so callers list every spelling in priority order.
        """
        for name in local_names:
            value = parse_decimal(self.get_text(node, name))
            if value > 0:
                return value
        return Decimal("0")

    def get_first_non_zero_in(
        self, nodes: Iterable[Any], local_names: Iterable[str]
    ) -> Decimal:
        """:meth:`get_first_non_zero` over several containers, in order."""
        names = list(local_names)
        for node in nodes:
            if node is None:
                continue
            value = self.get_first_non_zero(node, names)
            if value > 0:
                return value
        return Decimal("0")


LXML = Locator(LxmlAdapter())

find_first = LXML.find_first
find_all = LXML.find_all
has_element = LXML.has
get_text = LXML.get_text
get_nested_text = LXML.get_nested_text
get_first_non_zero = LXML.get_first_non_zero
get_first_non_zero_in = LXML.get_first_non_zero_in


def namespace_uri(el) -> str:
    """Namespace URI of an lxml element (``""`` when not namespaced)."""
    if el is None or not isinstance(el.tag, str):
        return ""
    return LET.QName(el).namespace or ""
