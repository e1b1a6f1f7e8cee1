"""Block fetching operations.

Provides functions to retrieve blocks from Notion pages, either top-level
only or recursively including all nested children, and to look up child
pages by title.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from notion_typed.blocks import Block
from notion_typed.common import Parent

if TYPE_CHECKING:
    from notion_typed.client import NotionClient
    from notion_typed.pages import Page

logger = logging.getLogger(__name__)


@dataclass
class BlockNode:
    """A fetched block with its fetched children."""

    block: Block
    children: list["BlockNode"] = field(default_factory=list)

    def count(self) -> int:
        """Number of blocks in this subtree, including this one."""
        return 1 + sum(child.count() for child in self.children)


def fetch_page_blocks(client: "NotionClient", page_id: str, page_size: int | None = None) -> list[Block]:
    """Fetch top-level blocks from a Notion page.

    Use this when you only need the immediate children of a page,
    not nested content inside toggles, tables, etc.

    Args:
        client: NotionClient instance.
        page_id: Notion page ID.
        page_size: Blocks per request (server default when None).

    Returns:
        List of blocks (top-level only, no children fetched).
    """
    logger.debug(f"Fetching top-level blocks for page {page_id}")
    blocks = list(client.block_children(page_id, page_size=page_size))
    logger.debug(f"Fetched {len(blocks)} top-level blocks")
    return blocks


def fetch_blocks_recursive(client: "NotionClient", page_id: str) -> list[BlockNode]:
    """Fetch all blocks from a Notion page, including nested children.

    Recursively traverses the block tree, fetching children for any block
    with ``has_children`` set (tables, toggles, nested list items, ...).
    Child pages are not descended into; their content belongs to another page.

    Args:
        client: NotionClient instance.
        page_id: Notion page ID.

    Returns:
        Tree of ``BlockNode`` objects, one per top-level block.
    """
    logger.debug(f"Fetching blocks recursively for page {page_id}")

    def _fetch(block_id: str, depth: int) -> list[BlockNode]:
        nodes = []
        for block in client.block_children(block_id):
            node = BlockNode(block)
            if block.has_children and block.id is not None and block.child_page_title is None:
                logger.debug(f"{'  ' * depth}Fetching children for {block.type_name} block {block.id}")
                node.children = _fetch(block.id, depth + 1)
            nodes.append(node)
        return nodes

    tree = _fetch(page_id, 0)
    total_count = sum(node.count() for node in tree)
    logger.info(f"Fetched {total_count} total blocks (including nested) for page {page_id}")
    return tree


def find_child_page(
    client: "NotionClient", parent_id: str, title: str, create: bool = True
) -> "Page | None":
    """Find a child page of ``parent_id`` by exact title, creating it if missing.

    Args:
        client: NotionClient instance.
        parent_id: Page whose children are searched.
        title: Exact child page title.
        create: Create the page when no child has this title.

    Returns:
        The child page, or None if it doesn't exist and ``create`` is False.
    """
    for block in client.block_children(parent_id):
        if block.child_page_title == title and block.id is not None:
            logger.debug(f"Found child page {title!r} ({block.id})")
            return client.get_page(block.id)

    if not create:
        return None

    logger.info(f"Creating child page {title!r} under {parent_id}")
    return client.create_page(Parent.page(parent_id), title=title)
