from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .paths import url_for

DATE_FMT = "%Y-%m-%d"
BLOG_NAME_RE = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)\.(?P<ext>[^.]+)$")
SLUG_SEPARATOR_RE = re.compile(r"[-_]+")


def title_from_slug(slug: str) -> str:
    words = [word for word in SLUG_SEPARATOR_RE.split(slug) if word]
    return " ".join(word.capitalize() for word in words)


@dataclass(frozen=True)
class BlogTuple:
    date: dt.date
    slug: str
    title: str
    ext: str

    def date_string(self) -> str:
        return self.date.strftime(DATE_FMT)

    def target_file_for(self, base_dir: Path) -> Path:
        return (
            base_dir
            / f"{self.date.year:04d}"
            / f"{self.date.month:02d}"
            / f"{self.date.day:02d}"
            / f"{self.slug}{self.ext}"
        )

    def redirect_from_files(self, base_dir: Path) -> list[Path]:
        return [
            base_dir / f"{self.date_string()}-{self.slug}{self.ext}",
            base_dir / f"{self.slug}{self.ext}",
        ]

    def redirect_from_urls(self, base_dir: Path, target_dir: Path) -> list[str]:
        return [url_for(target_dir, path) for path in self.redirect_from_files(base_dir)]


def parse_blog_name(path: Path, ext: str) -> Optional[BlogTuple]:
    """Parse ``YYYY-MM-DD-slug.ext``; ``None`` means the name is not a blog post."""
    match = BLOG_NAME_RE.match(Path(path).name)
    if not match:
        return None
    try:
        date = dt.datetime.strptime(match.group("date"), DATE_FMT).date()
    except ValueError:
        return None
    slug = match.group("slug").strip("-_")
    if not slug:
        return None
    return BlogTuple(date=date, slug=slug, title=title_from_slug(slug), ext=ext)
