"""
Scope traversal shared by the extraction functions.

A scope is a Document, an Element, a Section, or any iterable mixing these.
"""

from typing import Iterable, Iterator, Optional, Tuple, Union

from ..structure.section import Section
from ..types import Document, Element, ElementKind

Scope = Union[Document, Element, Section, Iterable[Union[Document, Element, Section]]]

# (leaf, kinds of its ancestors, owning section)
LeafVisit = Tuple[Element, Tuple[ElementKind, ...], Optional[Section]]


def _check_scope(scope: Scope) -> None:
    if isinstance(scope, (str, bytes)):
        raise TypeError("scope must be a Document, Element, Section or an iterable of them, not a string")


def iter_scope_elements(scope: Scope) -> Iterator[Element]:
    """Every element in the scope, depth-first in document order."""
    _check_scope(scope)
    if isinstance(scope, Document):
        for element in scope.elements:
            yield from element.iter()
    elif isinstance(scope, Element):
        yield from scope.iter()
    elif isinstance(scope, Section):
        yield from scope.iter_elements()
    else:
        for item in scope:
            yield from iter_scope_elements(item)


def iter_scope_leaves(scope: Scope) -> Iterator[LeafVisit]:
    """
    Every leaf in the scope with its ancestor kinds and owning section.

    Sections contribute their heading, their content and then their
    subsections; leaves reached through a Document or Element have no
    owning section.
    """
    _check_scope(scope)
    if isinstance(scope, Document):
        for element in scope.elements:
            yield from _leaves(element, (), None)
    elif isinstance(scope, Element):
        yield from _leaves(scope, (), None)
    elif isinstance(scope, Section):
        yield from _section_leaves(scope)
    else:
        for item in scope:
            yield from iter_scope_leaves(item)


def _section_leaves(section: Section) -> Iterator[LeafVisit]:
    if section.heading is not None:
        yield from _leaves(section.heading, (), section)
    for element in section.content:
        yield from _leaves(element, (), section)
    for subsection in section.subsections:
        yield from _section_leaves(subsection)


def _leaves(
    element: Element,
    ancestors: Tuple[ElementKind, ...],
    section: Optional[Section],
) -> Iterator[LeafVisit]:
    stack = [(element, ancestors)]
    while stack:
        node, node_ancestors = stack.pop()
        if node.is_leaf:
            yield node, node_ancestors, section
            continue
        child_ancestors = node_ancestors + (node.kind,)
        stack.extend((child, child_ancestors) for child in reversed(node.children))
