"""Configuration and ID helpers."""

import logging
import os
import re
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_UUID_HEX = re.compile(r"([0-9a-f]{32})$", re.IGNORECASE)

_env_loaded = False


def load_env() -> Path | None:
    """Load the nearest ``.env`` file once per process.

    Searches the current directory and then the package directory upwards.
    Variables already set in the environment win over the file.

    Returns:
        Path of the loaded file, or None if none was found (or already loaded).
    """
    global _env_loaded
    if _env_loaded:
        return None
    _env_loaded = True

    for start in (Path.cwd(), Path(__file__).resolve().parent):
        for directory in [start] + list(start.parents):
            env_file = directory / ".env"
            if env_file.is_file():
                load_dotenv(env_file)
                logger.debug(f"Loaded environment from {env_file}")
                return env_file
    return None


def get_notion_token() -> str:
    """Get Notion API token from environment.

    Automatically loads a ``.env`` file if present.

    Returns:
        The NOTION_API_TOKEN environment variable value.

    Raises:
        ValueError: If NOTION_API_TOKEN is not set.
    """
    load_env()

    token = os.environ.get("NOTION_API_TOKEN")
    if not token:
        raise ValueError(
            "NOTION_API_TOKEN environment variable not set.\n"
            "Create an integration at: https://www.notion.so/my-integrations"
        )
    return token


def format_uuid(raw_id: str) -> str:
    """Format 32 hex characters as a dashed UUID (8-4-4-4-12)."""
    raw_id = raw_id.replace("-", "").lower()
    if not re.fullmatch(r"[0-9a-f]{32}", raw_id):
        raise ValueError(f"Not a Notion ID: {raw_id!r}")
    return f"{raw_id[:8]}-{raw_id[8:12]}-{raw_id[12:16]}-{raw_id[16:20]}-{raw_id[20:]}"


def extract_page_id(url_or_id: str) -> str:
    """Extract a page ID from a Notion URL (or normalize a bare ID).

    Supports formats:
    - https://www.notion.so/workspace/Page-Title-abc123def456...
    - https://notion.so/abc123def456...?v=...
    - 2d240e6d8f9780778b8dfd8dae6ed382 (bare, with or without dashes)

    Returns:
        The ID formatted as UUID with dashes.

    Raises:
        ValueError: If no ID can be found.
    """
    last_segment = url_or_id.split("?")[0].split("#")[0].rstrip("/").split("/")[-1]

    # Match at the end: page titles may contain hex-looking words
    match = _UUID_HEX.search(last_segment.replace("-", ""))
    if match:
        return format_uuid(match.group(1))

    raise ValueError(f"Could not extract page ID from: {url_or_id}")
