"""Locate entity records inside a listing page's DOM."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from selectolax.lexbor import LexborHTMLParser, LexborNode, SelectolaxError

from ..config import SourceConfig
from ..errors import ParseError
from .models import Entity

TEXT_TAG = "-text"


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    """What an entity anchor and its title container look like."""

    entity_prefix: str
    marker_tag: str = "div"
    marker_attribute: str = "class"
    marker_value: str = "title-text"
    anchor_tag: str = "a"
    anchor_attribute: str = "href"

    @classmethod
    def from_source(cls, source: SourceConfig) -> "ExtractionRule":
        marker = source.title_marker
        return cls(
            entity_prefix=source.entity_prefix,
            marker_tag=marker.tag,
            marker_attribute=marker.attribute,
            marker_value=marker.value,
        )


def parse_document(markup: str | bytes | LexborHTMLParser) -> LexborNode:
    """Parse ``markup`` leniently and return the root element.

    Ill-formed HTML is repaired by the parser. Input that cannot be turned
    into a tree at all raises :class:`ParseError`.
    """

    if isinstance(markup, LexborHTMLParser):
        tree = markup
    else:
        if not isinstance(markup, (str, bytes)):
            raise ParseError(f"Cannot parse markup of type {type(markup).__name__}")
        try:
            tree = LexborHTMLParser(markup)
        except (TypeError, ValueError, RuntimeError, SelectolaxError) as exc:
            raise ParseError(f"Failed to parse HTML: {exc}") from exc
    root = tree.root
    if root is None:
        raise ParseError("Failed to parse HTML: document has no root element")
    return root


def iter_preorder(node: LexborNode) -> Iterator[LexborNode]:
    """Yield ``node`` and every descendant depth-first, pre-order."""

    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        children = list(current.iter(include_text=True))
        stack.extend(reversed(children))


def collect_text(node: LexborNode) -> str:
    """Concatenate every text node under ``node`` in document order, trimmed."""

    parts = [
        child.text(deep=False) or ""
        for child in iter_preorder(node)
        if child.tag == TEXT_TAG
    ]
    return "".join(parts).strip()


class EntityExtractor:
    """Pure DOM walker turning one listing page into entities keyed by id."""

    def __init__(self, rule: ExtractionRule) -> None:
        self.rule = rule

    def extract(self, markup: str | bytes | LexborHTMLParser) -> dict[str, Entity]:
        root = parse_document(markup)
        entities: dict[str, Entity] = {}
        # Children are visited whether or not a node matched, so anchors
        # nested inside skipped or malformed anchors are still found.
        for node in iter_preorder(root):
            href = self._anchor_href(node)
            if href is None:
                continue
            entity_id = href[len(self.rule.entity_prefix):]
            if not entity_id:
                continue
            title = self._find_title(node)
            if not title:
                continue
            entities[entity_id] = Entity(id=entity_id, url=href, title=title)
        return entities

    def _anchor_href(self, node: LexborNode) -> str | None:
        if node.tag != self.rule.anchor_tag:
            return None
        href = node.attributes.get(self.rule.anchor_attribute)
        if href and href.startswith(self.rule.entity_prefix):
            return href
        return None

    def _find_title(self, anchor: LexborNode) -> str:
        descendants = iter_preorder(anchor)
        next(descendants)
        for node in descendants:
            if self._is_marker(node):
                return collect_text(node)
        return ""

    def _is_marker(self, node: LexborNode) -> bool:
        if node.tag != self.rule.marker_tag:
            return False
        return node.attributes.get(self.rule.marker_attribute) == self.rule.marker_value


def extract(markup: str | bytes | LexborHTMLParser, rule: ExtractionRule) -> dict[str, Entity]:
    return EntityExtractor(rule).extract(markup)


__all__ = [
    "EntityExtractor",
    "ExtractionRule",
    "collect_text",
    "extract",
    "iter_preorder",
    "parse_document",
]
