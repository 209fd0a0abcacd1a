from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Iterator, Optional

from .log import get_logger

logger = get_logger("paths")

HIDDEN_PREFIX = "."


def normalize(path: os.PathLike | str) -> Path:
    return Path(os.path.abspath(path))


def is_within(ancestor: os.PathLike | str, path: os.PathLike | str) -> bool:
    ancestor_path = normalize(ancestor)
    candidate = normalize(path)
    return candidate == ancestor_path or ancestor_path in candidate.parents


def is_hidden(path: os.PathLike | str) -> bool:
    return Path(path).name.startswith(HIDDEN_PREFIX)


def target_file_for(source_dir: Path, target_dir: Path, path: Path, ext: str) -> Path:
    rel = normalize(path).relative_to(normalize(source_dir))
    return normalize(target_dir) / rel.with_suffix(ext)


def url_for(target_dir: Path, target: Path) -> str:
    rel = normalize(target).relative_to(normalize(target_dir))
    return "/" + rel.as_posix()


def relative(base: str, target: str) -> str:
    return posixpath.relpath(target, base or "/")


def walk_files(root: Path, exclude: Optional[Path] = None) -> Iterator[Path]:
    """Yield files under root in lexical, depth-first order.

    Hidden entries are pruned together with everything below them, and so
    is ``exclude`` (used to keep the output tree out of the source walk).
    """
    root = normalize(root)
    excluded = normalize(exclude) if exclude is not None else None
    with os.scandir(root) as scanner:
        entries = sorted(scanner, key=lambda entry: entry.name)
    for entry in entries:
        path = root / entry.name
        if is_hidden(path):
            logger.debug("skip hidden %s", path)
            continue
        if excluded is not None and path == excluded:
            continue
        if entry.is_dir():
            yield from walk_files(path, excluded)
        else:
            yield path
