"""Notion Typed - typed Notion API client with lazy pagination.

Module structure:
- client: Typed API facade and factory
- transport: Pluggable HTTP transport (default: notion_client SDK)
- json_value: Immutable generic JSON value
- rich_text: Rich text spans, annotations and colours
- blocks: Typed block model with an unsupported fallback
- properties: Typed page property values
- pages, users, common: Remaining API objects
- pagination: List envelope and lazy paginated sequence
- errors: NotionAPIError / DecodeError
- builders: Block creation helpers
- fetch: Block fetching (top-level, recursive, child page lookup)
- extract: Text extraction from blocks and pages
- modify: Batched append and block deletion
- utils: Token and ID utilities
"""

# Client
from notion_typed.client import get_notion_client, NotionClient, NOTION_VERSION
from notion_typed.transport import Transport, NotionSDKTransport

# Errors
from notion_typed.errors import NotionError, NotionAPIError, DecodeError

# Model
from notion_typed.json_value import JSON, JSONKind
from notion_typed.rich_text import Annotations, Color, RichText, RichTextType, text
from notion_typed.common import FileObject, FileType, Icon, IconType, Parent, ParentType, PartialUser
from notion_typed.users import User, UserType
from notion_typed.blocks import Block, BlockContent, BlockType, Unsupported
from notion_typed.properties import PageProperty, PropertyType, PropertyValue, UnsupportedValue
from notion_typed.pages import Page

# Pagination
from notion_typed.pagination import ListResponse, PaginatedSequence

# Fetch operations
from notion_typed.fetch import BlockNode, fetch_page_blocks, fetch_blocks_recursive, find_child_page

# Extract operations
from notion_typed.extract import extract_block_text, extract_page_title, extract_rich_text

# Modify operations
from notion_typed.modify import append_blocks, delete_all_blocks, delete_empty_trailing_blocks

# Block builders
from notion_typed.builders import (
    paragraph,
    heading,
    heading_1,
    heading_2,
    heading_3,
    toggle,
    bulleted_list_item,
    numbered_list_item,
    to_do,
    code,
    callout,
    quote,
    divider,
    bookmark,
    image,
    table,
)

# Utils
from notion_typed.utils import get_notion_token, extract_page_id

__all__ = [
    # Client
    "get_notion_client",
    "NotionClient",
    "NOTION_VERSION",
    "Transport",
    "NotionSDKTransport",
    # Errors
    "NotionError",
    "NotionAPIError",
    "DecodeError",
    # Model
    "JSON",
    "JSONKind",
    "Annotations",
    "Color",
    "RichText",
    "RichTextType",
    "text",
    "FileObject",
    "FileType",
    "Icon",
    "IconType",
    "Parent",
    "ParentType",
    "PartialUser",
    "User",
    "UserType",
    "Block",
    "BlockContent",
    "BlockType",
    "Unsupported",
    "PageProperty",
    "PropertyType",
    "PropertyValue",
    "UnsupportedValue",
    "Page",
    # Pagination
    "ListResponse",
    "PaginatedSequence",
    # Fetch
    "BlockNode",
    "fetch_page_blocks",
    "fetch_blocks_recursive",
    "find_child_page",
    # Extract
    "extract_block_text",
    "extract_page_title",
    "extract_rich_text",
    # Modify
    "append_blocks",
    "delete_all_blocks",
    "delete_empty_trailing_blocks",
    # Builders
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
    # Utils
    "get_notion_token",
    "extract_page_id",
]
