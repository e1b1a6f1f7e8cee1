"""Block modification operations.

Provides functions to delete and append blocks in Notion pages.
"""

import logging
from typing import TYPE_CHECKING, Sequence

from notion_typed.blocks import Block
from notion_typed.extract import is_empty_block

if TYPE_CHECKING:
    from notion_typed.client import NotionClient

logger = logging.getLogger(__name__)

# Notion API limit per append request
MAX_BLOCKS_PER_REQUEST = 100


def delete_all_blocks(client: "NotionClient", page_id: str) -> int:
    """Delete all blocks from a Notion page.

    Fetches all top-level blocks, then deletes them one by one.
    Skips archived blocks (which cannot be deleted).

    Args:
        client: NotionClient instance.
        page_id: Notion page ID to clear.

    Returns:
        Count of deleted blocks.
    """
    logger.info(f"Deleting all blocks from page {page_id}")

    # Collect first: deleting while paging would shift the cursor
    blocks = list(client.block_children(page_id))
    deleted_count = 0

    for block in blocks:
        if block.archived or block.id is None:
            logger.debug(f"Skipping archived block {block.id}")
            continue
        try:
            client.delete_block(block.id)
        except Exception as e:
            logger.error(f"Failed to delete block {block.id}: {e}")
            raise
        deleted_count += 1
        logger.debug(f"Deleted block {block.id}")

    logger.info(f"Deleted {deleted_count} blocks from page {page_id}")
    return deleted_count


def delete_empty_trailing_blocks(client: "NotionClient", page_id: str) -> int:
    """Delete empty paragraphs at the end of a page.

    Walks backwards from the last block and stops at the first block that
    isn't an empty paragraph (see ``is_empty_block``).

    Returns:
        Count of deleted blocks.
    """
    blocks = list(client.block_children(page_id))
    deleted_count = 0

    for block in reversed(blocks):
        if not is_empty_block(block) or block.id is None:
            break
        client.delete_block(block.id)
        deleted_count += 1
        logger.debug(f"Deleted empty trailing {block.type_name} block {block.id}")

    if deleted_count:
        logger.info(f"Deleted {deleted_count} empty trailing blocks from page {page_id}")
    return deleted_count


def append_blocks(
    client: "NotionClient",
    page_id: str,
    blocks: Sequence[Block],
    after: str | None = None,
) -> list[Block]:
    """Append blocks to a Notion page.

    Batches blocks in groups of 100 to respect Notion API limits.
    Tracks last inserted block ID across batches to maintain correct order.
    Blocks that can't be created through the API (child pages, unsupported
    types) are skipped with a warning.

    Args:
        client: NotionClient instance.
        page_id: Notion page ID to append to.
        blocks: Blocks to append.
        after: Optional block ID to insert after.

    Returns:
        The created blocks, as returned by the server.
    """
    appendable = []
    for block in blocks:
        if block.is_appendable:
            appendable.append(block)
        else:
            logger.warning(f"Skipping {block.type_name} block: can't be created via the API")

    if not appendable:
        logger.debug("No blocks to append")
        return []

    logger.info(f"Appending {len(appendable)} blocks to page {page_id}")

    created: list[Block] = []
    last_block_id = after
    total_batches = (len(appendable) + MAX_BLOCKS_PER_REQUEST - 1) // MAX_BLOCKS_PER_REQUEST

    for i in range(0, len(appendable), MAX_BLOCKS_PER_REQUEST):
        batch = appendable[i:i + MAX_BLOCKS_PER_REQUEST]
        batch_num = (i // MAX_BLOCKS_PER_REQUEST) + 1

        logger.debug(f"Appending batch {batch_num}/{total_batches} ({len(batch)} blocks)")

        try:
            result = client.append_block_children(page_id, batch, after=last_block_id)
        except Exception as e:
            logger.error(f"Failed to append batch {batch_num}: {e}")
            raise

        created.extend(result.results)
        # Track last inserted block for next batch positioning
        if result.results and result.results[-1].id is not None:
            last_block_id = result.results[-1].id

    logger.info(f"Successfully appended {len(appendable)} blocks to page {page_id}")
    return created
