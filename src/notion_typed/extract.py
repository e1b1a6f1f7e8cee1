"""Text extraction utilities for typed blocks and pages.

Provides functions to turn blocks into plain text for comparison, searching
and display purposes.
"""

import logging
from typing import Iterable

from notion_typed.blocks import (
    Block,
    Bookmark,
    Callout,
    ChildPage,
    Code,
    Divider,
    MediaBlockContent,
    Paragraph,
    Table,
    TableRow,
    TextBlockContent,
    ToDo,
    Unsupported,
)
from notion_typed.common import IconType
from notion_typed.pages import Page
from notion_typed.rich_text import RichText

logger = logging.getLogger(__name__)


def extract_rich_text(rich_text: Iterable[RichText]) -> str:
    """Concatenate the plain text of rich text spans.

    Fetched spans use the server's ``plain_text``; locally built spans fall
    back to their content.
    """
    return "".join(span.text for span in rich_text)


def extract_block_text(block: Block) -> str:
    """Extract plain text content from a block.

    Handles block types as follows:
    - Text blocks (paragraph, heading_*, list items, quote, toggle): the text
    - Callout: emoji icon followed by the text
    - To-do: "[x]" or "[ ]" followed by the text
    - Code: fenced with the language
    - Divider: "---"
    - Table: "table:{width}:{rows}" when rows are attached, else "table:{width}"
    - Table row: cells joined with " | "
    - Image/video/file/bookmark: "{type}:{caption or url}"
    - Child page: "child_page:{title}"
    - Unsupported: empty string

    Args:
        block: A fetched or locally built block.

    Returns:
        Plain text representation of the block content.
    """
    content = block.content

    if isinstance(content, TextBlockContent):
        text = extract_rich_text(content.rich_text)

        if isinstance(content, Callout) and content.icon is not None:
            if content.icon.type is IconType.EMOJI:
                text = f"{content.icon.emoji} {text}" if text else content.icon.emoji

        if isinstance(content, ToDo):
            prefix = "[x]" if content.checked else "[ ]"
            text = f"{prefix} {text}"

        return text

    if isinstance(content, Code):
        return f"```{content.language}\n{extract_rich_text(content.rich_text)}\n```"

    if isinstance(content, Divider):
        return "---"

    if isinstance(content, Table):
        if content.children:
            row_texts = [
                "|".join(extract_rich_text(cell) for cell in child.content.cells)
                for child in content.children
                if isinstance(child.content, TableRow)
            ]
            return f"table:{content.table_width}:{';'.join(row_texts)}"
        return f"table:{content.table_width}"

    if isinstance(content, TableRow):
        return " | ".join(extract_rich_text(cell) for cell in content.cells)

    if isinstance(content, MediaBlockContent):
        caption = extract_rich_text(content.file.caption)
        if caption:
            return f"{block.type_name}:{caption}"
        if content.file.url:
            return f"{block.type_name}:{content.file.url}"
        return block.type_name

    if isinstance(content, Bookmark):
        caption = extract_rich_text(content.caption)
        return f"bookmark:{caption or content.url or ''}"

    if isinstance(content, ChildPage):
        return f"child_page:{content.title}"

    if isinstance(content, Unsupported):
        logger.debug(f"No text extraction for block type: {block.type_name}")

    return ""


def is_empty_block(block: Block) -> bool:
    """True for a childless paragraph with no rich text at all.

    Whitespace counts as content, and empty to-dos or headings are not
    considered empty: they still show up on the page.
    """
    content = block.content
    if not isinstance(content, Paragraph) or block.has_children or content.children:
        return False
    return not content.rich_text


def extract_page_title(page: Page) -> str:
    """Extract plain text title from a page.

    Raises:
        ValueError: If the page has no title property.
    """
    title = page.title
    if title is None:
        raise ValueError(f"Could not find title property in page {page.id}")
    return title
