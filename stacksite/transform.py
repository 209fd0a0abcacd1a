from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .content import split_front_matter
from .errors import MetadataError
from .log import get_logger
from .paths import is_within, normalize, target_file_for
from .render import redirect_stub
from .utils import copy_file, read_text, write_text

if TYPE_CHECKING:
    from .config import SiteConfig
    from .site import Site

logger = get_logger("transform")

IGNORED_EXTS = {".json", ".source", ".template"}


@dataclass
class TransformReport:
    rendered: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    redirects: list[Path] = field(default_factory=list)
    ignored: list[Path] = field(default_factory=list)


def _target_path(config: SiteConfig, metadata: dict) -> Path:
    raw_target = str(metadata["target"])
    target = Path(raw_target)
    if not target.is_absolute():
        target = config.target / target
    target = normalize(target)
    if target == config.target or not is_within(config.target, target):
        raise MetadataError(f"target {raw_target!r} does not resolve to a file inside {config.target}")
    return target


def _redirect_file(config: SiteConfig, url: str) -> Path:
    path = normalize(config.target / url.lstrip("/"))
    if path == config.target or not is_within(config.target, path):
        raise MetadataError(f"redirect {url!r} does not resolve to a file inside {config.target}")
    return path


def _redirect_urls(path: Path, metadata: dict) -> list[str]:
    redirects = metadata.get("redirects") or []
    if isinstance(redirects, str) or not isinstance(redirects, (list, tuple)):
        raise MetadataError(f"{path}: redirects must be a list of URLs")
    return [str(url) for url in redirects]


def transform(site: Site) -> TransformReport:
    """Third pass: render, copy or skip every source file."""
    logger.debug("transforming")
    config = site.config
    report = TransformReport()
    for path in site.walk():
        logger.debug("transforming %s", path)
        ext = path.suffix

        if ext in IGNORED_EXTS:
            report.ignored.append(path)
            logger.debug("%s ignored for transformation", path)

        elif ext == ".html":
            _, _, body = split_front_matter(read_text(path))
            metadata = site.context_for(path)
            output = site.renderer.render(path, body, metadata)
            dst = _target_path(config, metadata)
            write_text(dst, output)
            report.rendered.append(dst)
            logger.debug("%s transformed to %s", path, dst)

        elif ext == ".md":
            _, _, body = split_front_matter(read_text(path))
            metadata = site.context_for(path)
            output = site.renderer.render_page(path, body, metadata)
            dst = _target_path(config, metadata)
            write_text(dst, output)
            report.rendered.append(dst)

            redirect_to = str(metadata.get("url", ""))
            for redirect_from in _redirect_urls(path, metadata):
                redirect_file = _redirect_file(config, redirect_from)
                write_text(redirect_file, redirect_stub(redirect_to))
                report.redirects.append(redirect_file)
            logger.debug("%s transformed to %s", path, dst)

        else:
            dst = target_file_for(config.source, config.target, path, ext)
            copy_file(path, dst)
            report.copied.append(dst)
            logger.debug("%s transformed to %s verbatim", path, dst)
    return report
