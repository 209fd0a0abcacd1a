from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from .config import SiteConfig
from .gather import gather_declarations, gather_sources
from .log import get_logger
from .paths import walk_files
from .render import Renderer
from .stack import MetadataStack, deep_merge
from .transform import TransformReport, transform

logger = get_logger("site")


@dataclass
class Site:
    """State of a single build, shared by all three passes."""

    config: SiteConfig
    stack: MetadataStack = field(default_factory=MetadataStack)
    index: dict = field(default_factory=dict)
    renderer: Renderer = field(init=False)
    report: Optional[TransformReport] = None

    def __post_init__(self) -> None:
        self.renderer = Renderer(self.config.source)

    def walk(self) -> Iterator[Path]:
        return walk_files(self.config.source, exclude=self.config.target)

    def context_for(self, path: os.PathLike | str) -> dict:
        # The site index sits below every scope, so a page may shadow it.
        return deep_merge({self.config.global_key: self.index}, self.stack.get(path))


def build_site(config: SiteConfig) -> Site:
    site = Site(config)
    gather_declarations(site)
    gather_sources(site)
    site.stack.freeze()
    logger.debug("gathered %d scope(s), transforming", len(site.stack))
    site.report = transform(site)
    return site
