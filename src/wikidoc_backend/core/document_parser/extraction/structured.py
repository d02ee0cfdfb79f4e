"""
Structured data projection.

Flattens the tables, lists and headings of a scope into plain values
(strings, integers and tuples) for callers that want data rather than
Elements, e.g. JSON output or spreadsheet export.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..types import Element, ElementKind
from .scope import Scope, iter_scope_elements


@dataclass(frozen=True)
class TableData:
    """
    A table as text.

    Attributes:
        headers: Cell texts of the header rows, in order
        rows: Cell texts of every other row
    """
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"headers": list(self.headers), "rows": [list(row) for row in self.rows]}


@dataclass(frozen=True)
class ListData:
    ordered: bool
    items: Tuple[str, ...]

    @property
    def list_type(self) -> str:
        return "ol" if self.ordered else "ul"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.list_type, "ordered": self.ordered, "items": list(self.items)}


@dataclass(frozen=True)
class HeadingData:
    level: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "text": self.text}


@dataclass(frozen=True)
class StructuredData:
    """Tables, lists and headings of a scope, in document order."""
    tables: Tuple[TableData, ...] = ()
    lists: Tuple[ListData, ...] = ()
    headings: Tuple[HeadingData, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.tables or self.lists or self.headings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [table.to_dict() for table in self.tables],
            "lists": [item.to_dict() for item in self.lists],
            "headings": [heading.to_dict() for heading in self.headings],
        }


def table_data(table: Element) -> TableData:
    """Project one table; rows of nested tables stay inside their cell's text."""
    headers: List[str] = []
    rows: List[Tuple[str, ...]] = []
    for row in table.children:
        if row.kind is not ElementKind.TABLE_ROW:
            continue
        cells = tuple(cell.plain_text(" ") for cell in row.children)
        if row.attributes.get("isHeader") == "true":
            headers.extend(cells)
        else:
            rows.append(cells)
    return TableData(headers=tuple(headers), rows=tuple(rows))


def list_data(element: Element) -> ListData:
    """Project one list; an item's text includes its nested lists."""
    items = tuple(item.plain_text(" ") for item in element.children if item.kind is ElementKind.LIST_ITEM)
    return ListData(ordered=element.attributes.get("ordered") == "true", items=items)


def structured_data(scope: Scope) -> StructuredData:
    """
    Collect every table, list and heading in the scope as plain data.

    Nested tables and lists are reported on their own as well as through
    the text of the cell or item that contains them. Headings without a
    valid level are reported at level 1.
    """
    tables: List[TableData] = []
    lists: List[ListData] = []
    headings: List[HeadingData] = []
    for element in iter_scope_elements(scope):
        if element.kind is ElementKind.TABLE:
            tables.append(table_data(element))
        elif element.kind is ElementKind.LIST:
            lists.append(list_data(element))
        elif element.kind is ElementKind.HEADING:
            headings.append(HeadingData(level=element.level or 1, text=element.plain_text()))
    return StructuredData(tables=tuple(tables), lists=tuple(lists), headings=tuple(headings))
