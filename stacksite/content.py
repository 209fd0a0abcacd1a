from __future__ import annotations

import json
from pathlib import Path

import yaml

from .errors import MetadataError

FRONT_SEPARATOR = "---"


def _is_separator(line: str) -> bool:
    return line.rstrip("\r\n") == FRONT_SEPARATOR


def _is_yaml_mapping(text: str) -> bool:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return False
    return data is None or isinstance(data, dict)


def split_front_matter(text: str) -> tuple[str, str, str]:
    """Split text into ``(format, front_matter, body)``.

    ``format`` is ``"json"`` for a JSON block ended by a ``---`` line,
    ``"yaml"`` for a mapping fenced by two ``---`` lines, or ``""`` when the
    text carries no front-matter. An empty head before the first ``---``
    line is empty JSON front-matter.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines(keepends=True)
    if not lines:
        return "", "", clean_text

    if _is_separator(lines[0]):
        for i in range(1, len(lines)):
            if _is_separator(lines[i]):
                block = "".join(lines[1:i])
                if _is_yaml_mapping(block):
                    return "yaml", block, "".join(lines[i + 1 :])
                break
        return "json", "", "".join(lines[1:])

    for i, line in enumerate(lines):
        if _is_separator(line):
            head = "".join(lines[:i])
            # A leading paragraph followed by a Markdown rule is not front-matter.
            if not head.strip() or head.lstrip().startswith("{"):
                return "json", head, "".join(lines[i + 1 :])
            break
    return "", "", clean_text


def _require_mapping(data: object, origin: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MetadataError(f"{origin}: metadata must be a mapping, got {type(data).__name__}")
    return data


def parse_json_metadata(text: str, origin: str) -> dict:
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"{origin}: invalid JSON: {exc}") from exc
    return _require_mapping(data, origin)


def parse_yaml_metadata(text: str, origin: str) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MetadataError(f"{origin}: invalid YAML: {exc}") from exc
    return _require_mapping(data, origin)


def read_front_matter(text: str, origin: Path) -> tuple[dict, str]:
    fmt, head, body = split_front_matter(text)
    if fmt == "json":
        return parse_json_metadata(head, str(origin)), body
    if fmt == "yaml":
        return parse_yaml_metadata(head, str(origin)), body
    return {}, body
