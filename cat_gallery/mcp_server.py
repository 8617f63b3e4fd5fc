"""MCP server exposing cat gallery tools."""

from __future__ import annotations

import logging
import random
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .api import CatApiClient
from .config import DEFAULT_BASE_URL, DEFAULT_PAGE_SIZE
from .items import to_items
from .markdown import compose_gallery_markdown
from .paging import build_request, build_result, resolve_refresh_key
from .utils import join_url

logger = logging.getLogger("cat_gallery.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="cat-gallery")


def render_page(
    client: CatApiClient,
    page: int,
    page_size: int,
    rng: Optional[random.Random] = None,
) -> str:
    """Fetch one page and render it as Markdown with its navigation keys."""
    request = build_request(page, page_size)
    fetched = client.fetch_page(request.skip, request.limit)
    items = to_items(fetched.records, client.base_url, rng)
    result = build_result(page, fetched.raw_count, items)
    markdown = compose_gallery_markdown(
        list(result.items),
        [],
        source_url=join_url(client.base_url, "api/cats"),
        title=f"Cats, page {page}",
    )
    return markdown + f"\nprev_key: {result.prev_key}\nnext_key: {result.next_key}\n"


@mcp.tool()
async def cat_page(
    page: int = 0,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> str:
    """Return one page of cats from cataas.com as Markdown."""

    with CatApiClient(DEFAULT_BASE_URL) as client:
        return render_page(client, page, page_size)


@mcp.tool()
async def refresh_key(
    prev_key: Optional[int] = None,
    next_key: Optional[int] = None,
) -> Optional[int]:
    """Return the page key to reload given the keys of the last viewed page."""

    return resolve_refresh_key(prev_key, next_key)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
