"""MCP server exposing image search/download tools."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Union

from mcp.server.fastmcp import FastMCP

from .client import download_async, search
from .config import SearchConfig

logger = logging.getLogger("image_search.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="image-search")


@mcp.tool()
async def search_images(
    query: str,
    limit: int = 10,
) -> List[Dict[str, Union[str, int]]]:
    """Search Google Images and return url/width/height/thumbnail/source records."""
    config = SearchConfig(query=query, limit=limit)
    images = await asyncio.to_thread(search, config)
    return [image.to_dict() for image in images]


@mcp.tool()
async def download_images(
    query: str,
    directory: str,
    limit: int = 10,
    thumbnails: bool = False,
) -> List[str]:
    """Download up to ``limit`` images for a query and return the file paths."""
    config = SearchConfig(
        query=query,
        limit=limit,
        thumbnails=thumbnails,
        directory=Path(directory).expanduser(),
    )
    paths = await download_async(config)
    if not paths:
        logger.error("No images downloaded for %r", query)
    return [str(path) for path in paths]


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
