from __future__ import annotations

from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from .blog import parse_blog_name
from .config import SiteConfig
from .content import parse_json_metadata, read_front_matter
from .log import get_logger
from .paths import target_file_for, url_for
from .stack import deep_merge
from .utils import read_text

if TYPE_CHECKING:
    from .site import Site

logger = get_logger("gather")

DECLARATION_EXT = ".json"
PUBLISHABLE_EXTS = {".html", ".md"}
OUTPUT_EXT = ".html"


def gather_declarations(site: Site) -> None:
    """First pass: register every ``.json`` file as its directory's scope."""
    logger.debug("gathering JSON")
    for path in site.walk():
        if path.suffix != DECLARATION_EXT:
            continue
        metadata = parse_json_metadata(read_text(path), str(path))
        site.stack.add(path.parent, metadata)
        logger.debug("%s gathered (%d element(s))", path, len(metadata))


def default_metadata(config: SiteConfig, path: Path) -> dict:
    target = target_file_for(config.source, config.target, path, OUTPUT_EXT)
    metadata = {
        "source": str(path),
        "target": str(target),
        "url": url_for(config.target, target),
        "sortkey": path.name,
    }
    if path.suffix != ".md":
        return metadata

    blog = parse_blog_name(path, OUTPUT_EXT)
    if blog is None:
        return metadata
    base_dir = config.target / path.parent.relative_to(config.source)
    blog_target = blog.target_file_for(base_dir)
    metadata.update(
        {
            "title": blog.title,
            "date": blog.date_string(),
            "target": str(blog_target),
            "url": url_for(config.target, blog_target),
            "redirects": blog.redirect_from_urls(base_dir, config.target),
        }
    )
    return metadata


def splat_into(index: dict, rel_path: PurePath, metadata: dict) -> None:
    node = index
    for part in rel_path.parts[:-1]:
        node = node.setdefault(part, {})
    node[rel_path.parts[-1]] = metadata


def gather_sources(site: Site) -> None:
    """Second pass: compute each page's metadata and publish it.

    Precedence, lowest first: generated defaults, inherited scopes, the
    file's own front-matter.
    """
    logger.debug("gathering source")
    config = site.config
    for path in site.walk():
        if path.suffix not in PUBLISHABLE_EXTS:
            continue
        defaults = default_metadata(config, path)
        file_metadata, _ = read_front_matter(read_text(path), path)
        inherited = site.stack.get(path)
        metadata = deep_merge(defaults, deep_merge(inherited, file_metadata))
        site.stack.add(path, metadata)
        splat_into(site.index, path.relative_to(config.source), metadata)
        logger.debug("%s gathered (%d element(s))", path, len(metadata))
