"""
Helpers for reading BeautifulSoup nodes.

Shared by the markup tree parser and the macro handlers: tag names,
attribute copies and text collection with whitespace normalization.
"""

import re
from typing import Callable, Dict, List, Optional

from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
    Tag,
)

WHITESPACE_PATTERN = re.compile(r"\s+")

# NavigableString subclasses that never contribute text.
IGNORED_STRING_TYPES = (Comment, Declaration, Doctype, ProcessingInstruction)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def tag_name(node: PageElement) -> Optional[str]:
    """Lower-cased tag name, or None for text and other non-tag nodes."""
    if isinstance(node, Tag):
        return (node.name or "").lower()
    return None


def child_tags(node: Tag, *names: str) -> List[Tag]:
    """Direct child tags, optionally restricted to the given names."""
    wanted = {name.lower() for name in names}
    return [
        child for child in node.children
        if isinstance(child, Tag) and (not wanted or tag_name(child) in wanted)
    ]


def first_child_tag(node: Tag, name: str) -> Optional[Tag]:
    for child in child_tags(node, name):
        return child
    return None


def has_child_tags(node: Tag) -> bool:
    return any(isinstance(child, Tag) for child in node.children)


def source_attributes(node: Tag) -> Dict[str, str]:
    """
    Copy a tag's attributes in source order (multi-valued ones joined by spaces).

    Names are as the tree builder reports them: ``html.parser`` folds them to
    lower case. Values are copied verbatim.
    """
    attributes: Dict[str, str] = {}
    for key, value in (node.attrs or {}).items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attributes[key] = "" if value is None else str(value)
    return attributes


def collect_text(
    node: PageElement,
    preserve_whitespace: bool = False,
    skip: Optional[Callable[[Tag], bool]] = None,
) -> str:
    """
    Gather the text under ``node`` in document order.

    Comments, doctypes and processing instructions are ignored and ``<br>``
    becomes a line break. Tags for which ``skip`` returns True are left out
    together with their subtrees. The result has whitespace collapsed unless
    ``preserve_whitespace`` is set, in which case only the ends are trimmed.
    """
    parts: List[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, NavigableString):
            if not isinstance(current, IGNORED_STRING_TYPES):
                parts.append(str(current))
            continue
        if not isinstance(current, Tag):
            continue
        if current is not node and skip is not None and skip(current):
            continue
        if tag_name(current) == "br":
            parts.append("\n")
            continue
        stack.extend(reversed(list(current.children)))

    text = "".join(parts)
    if preserve_whitespace:
        return text.strip()
    return normalize_whitespace(text)
