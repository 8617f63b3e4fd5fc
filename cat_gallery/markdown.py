"""Markdown rendering for gallery pages."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Sequence

from .models import CatItem, ImageAsset


def _timestamp() -> str:
    return (
        dt.datetime.now(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


def render_card(index: int, item: CatItem, asset: Optional[ImageAsset] = None) -> str:
    """Render one gallery card; ``index`` is zero-based."""
    target = asset.relative_path if asset else item.url
    lines = [f"### Cat #{index + 1}", "", f"![{item.id}]({target})", ""]
    if item.tags:
        lines.append("Tags: " + ", ".join(item.tags))
    if asset and asset.width and asset.height:
        lines.append(f"Size: {asset.width}x{asset.height}")
    else:
        lines.append(f"Size: {item.width}x{item.height}")
    return "\n".join(lines) + "\n"


def compose_gallery_markdown(
    items: Sequence[CatItem],
    assets: Sequence[ImageAsset],
    source_url: str,
    title: str,
) -> str:
    """Generate the gallery document including front matter."""
    by_id: Dict[str, ImageAsset] = {asset.cat_id: asset for asset in assets}

    front_matter_lines = ["---"]
    front_matter_lines.append(f"title: {title}")
    front_matter_lines.append(f"source_url: {source_url}")
    front_matter_lines.append(f"retrieved_at: {_timestamp()}")
    front_matter_lines.append(f"count: {len(items)}")
    if assets:
        image_files = [asset.relative_path for asset in assets]
        files_str = "[" + ", ".join(image_files) + "]"
        front_matter_lines.append(f"images: {files_str}")
    front_matter_lines.append("---\n")

    body: List[str] = [f"# {title}\n"]
    if not items:
        body.append("No cats were found.\n")
    for index, item in enumerate(items):
        body.append(render_card(index, item, by_id.get(item.id)))

    return "\n".join(front_matter_lines) + "\n".join(body)
