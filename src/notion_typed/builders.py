"""Block builders for creating content programmatically.

Each builder returns a metadata-free ``Block`` ready for
``NotionClient.append_block_children``. Text arguments accept a plain string,
a single ``RichText`` span, or a list of spans for mixed styling.
"""

from typing import Sequence, Union

from notion_typed.blocks import (
    Block,
    Bookmark,
    BulletedListItem,
    Callout,
    Code,
    Divider,
    Heading,
    Heading1,
    Heading2,
    Heading3,
    Image,
    NumberedListItem,
    Paragraph,
    Quote,
    Table,
    TableRow,
    ToDo,
    Toggle,
)
from notion_typed.common import FileObject, Icon
from notion_typed.rich_text import Color, RichText, as_rich_text

TextInput = Union[str, RichText, Sequence[RichText]]

_HEADINGS: dict[int, type[Heading]] = {1: Heading1, 2: Heading2, 3: Heading3}


def paragraph(text: TextInput, color: Color | str = Color.DEFAULT) -> Block:
    """Create a paragraph block.

    Args:
        text: Text content for the paragraph.
        color: Optional text or background colour.

    Returns:
        Paragraph block.

    Example:
        >>> paragraph("Hello, world!").to_request()
        {'object': 'block', 'type': 'paragraph', 'paragraph': {'rich_text': [...], 'color': 'default'}}
    """
    return Block(Paragraph(rich_text=as_rich_text(text), color=Color(color)))


def heading(level: int, text: TextInput, color: Color | str = Color.DEFAULT, is_toggleable: bool = False) -> Block:
    """Create a heading block (level 1, 2, or 3).

    Raises:
        ValueError: If level is not 1, 2, or 3.
    """
    if level not in _HEADINGS:
        raise ValueError(f"Heading level must be 1, 2, or 3, got {level}")
    return Block(
        _HEADINGS[level](rich_text=as_rich_text(text), color=Color(color), is_toggleable=is_toggleable)
    )


def heading_1(text: TextInput, color: Color | str = Color.DEFAULT) -> Block:
    return heading(1, text, color)


def heading_2(text: TextInput, color: Color | str = Color.DEFAULT) -> Block:
    return heading(2, text, color)


def heading_3(text: TextInput, color: Color | str = Color.DEFAULT) -> Block:
    return heading(3, text, color)


def toggle(text: TextInput, children: Sequence[Block] | None = None) -> Block:
    """Create a toggle block with optional children.

    Example:
        >>> toggle("Details", [paragraph("Hidden content")])
    """
    return Block(Toggle(rich_text=as_rich_text(text), children=tuple(children or ())))


def bulleted_list_item(text: TextInput, children: Sequence[Block] | None = None) -> Block:
    """Create a bulleted list item; children make a nested list."""
    return Block(BulletedListItem(rich_text=as_rich_text(text), children=tuple(children or ())))


def numbered_list_item(text: TextInput, children: Sequence[Block] | None = None) -> Block:
    """Create a numbered list item; children make a nested list."""
    return Block(NumberedListItem(rich_text=as_rich_text(text), children=tuple(children or ())))


def to_do(text: TextInput, checked: bool = False) -> Block:
    """Create a to-do (checkbox) block."""
    return Block(ToDo(rich_text=as_rich_text(text), checked=checked))


def code(source: str, language: str = "python") -> Block:
    """Create a code block.

    Args:
        source: Code content.
        language: Notion language name (default: "python").
    """
    return Block(Code(rich_text=as_rich_text(source), language=language))


def callout(text: TextInput, icon: str = "💡", color: Color | str = Color.DEFAULT) -> Block:
    """Create a callout block with an emoji icon."""
    return Block(Callout(rich_text=as_rich_text(text), color=Color(color), icon=Icon.from_emoji(icon)))


def quote(text: TextInput) -> Block:
    return Block(Quote(rich_text=as_rich_text(text)))


def divider() -> Block:
    return Block(Divider())


def bookmark(url: str, caption: TextInput = ()) -> Block:
    return Block(Bookmark(url=url, caption=as_rich_text(caption)))


def image(url: str, caption: TextInput = ()) -> Block:
    """Create an image block pointing at an external URL."""
    return Block(Image(file=FileObject.external(url, caption=as_rich_text(caption))))


def table(
    rows: Sequence[Sequence[TextInput]],
    has_column_header: bool = False,
    has_row_header: bool = False,
) -> Block:
    """Create a table block from rows of cells.

    The table width is taken from the first row; every row must have the
    same number of cells.

    Args:
        rows: Rows of cells; each cell is text or rich text spans.
        has_column_header: Style the first row as a header.
        has_row_header: Style the first column as a header.

    Returns:
        Table block with one ``table_row`` child per row.

    Raises:
        ValueError: If there are no rows, or rows differ in length.

    Example:
        >>> table([["Name", "Qty"], ["Apples", "3"]], has_column_header=True)
    """
    if not rows:
        raise ValueError("A table needs at least one row")
    width = len(rows[0])
    if width == 0:
        raise ValueError("Table rows need at least one cell")
    children = []
    for index, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"Row {index} has {len(row)} cells, expected {width}")
        children.append(Block(TableRow(cells=tuple(as_rich_text(cell) for cell in row))))
    return Block(
        Table(
            table_width=width,
            has_column_header=has_column_header,
            has_row_header=has_row_header,
            children=tuple(children),
        )
    )


__all__ = [
    "paragraph",
    "heading",
    "heading_1",
    "heading_2",
    "heading_3",
    "toggle",
    "bulleted_list_item",
    "numbered_list_item",
    "to_do",
    "code",
    "callout",
    "quote",
    "divider",
    "bookmark",
    "image",
    "table",
]
