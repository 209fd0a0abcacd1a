from __future__ import annotations

import shutil
from pathlib import Path

from .errors import ConfigError, SiteReadError
from .paths import is_within, normalize


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteReadError(f"cannot read {path}: {exc}") from exc


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_file(src: Path, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)


def clean_output_dir(output_dir: Path, source_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = normalize(output_dir)
    if output_resolved == normalize(project_root) or output_resolved.parent == output_resolved:
        raise ConfigError(f"refusing to clean {output_resolved}")
    if is_within(output_resolved, source_dir):
        raise ConfigError(f"refusing to clean {output_resolved}: it contains the source directory")
    shutil.rmtree(output_resolved)
