from __future__ import annotations

import html
import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import markdown
from jinja2 import Environment, TemplateError
from markupsafe import Markup

from .errors import ImportCycleError, RenderError, SiteReadError
from .log import get_logger
from .paths import is_within, normalize, relative
from .stack import deep_merge
from .utils import parse_bool, read_text

logger = get_logger("render")

CONTENT_KEY = "content"
TEMPLATE_KEY = "template"
TOC_KEY = "toc"
SORT_KEY = "sortkey"

MARKDOWN_EXTENSIONS = [
    "tables",
    "fenced_code",
    "footnotes",
    "smarty",
    "md_in_html",
    "toc",
    "pymdownx.magiclink",
    "pymdownx.tilde",
    "pymdownx.betterem",
]
MARKDOWN_EXTENSION_CONFIGS = {
    # Header IDs are always generated; the TOC itself is prepended on demand.
    "toc": {"marker": ""},
    "pymdownx.tilde": {"subscript": False},
    "pymdownx.betterem": {"smart_enable": "all"},
}

REDIRECT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="0; url={url}">
<link rel="canonical" href="{url}">
<title>Redirecting</title>
</head>
<body>
<p>Moved to <a href="{url}">{url}</a>.</p>
</body>
</html>
"""


def sorted_values(mapping: Mapping) -> list:
    if not isinstance(mapping, Mapping):
        raise TypeError(f"sorted expects a mapping, got {type(mapping).__name__}")

    def sort_key(item: tuple) -> str:
        name, value = item
        if isinstance(value, Mapping) and SORT_KEY in value:
            return str(value[SORT_KEY])
        return str(name)

    return [value for _, value in sorted(mapping.items(), key=sort_key)]


def markdown_to_html(text: str, toc: bool = False) -> str:
    logger.debug("rendering %d character(s) of Markdown", len(text))
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    html_content = md.convert(text)
    if toc:
        html_content = md.toc + html_content
    return html_content


def redirect_stub(url: str) -> str:
    return REDIRECT_TEMPLATE.format(url=html.escape(url, quote=True))


class Renderer:
    """Renders Jinja2 templates against cascaded page metadata.

    Templates may pull in other files relative to their own directory with
    ``importhtml``, ``importcss`` and ``importjs``. Imports share the
    importing page's metadata, and a file that ends up importing itself
    raises :class:`ImportCycleError`.
    """

    def __init__(self, source_dir: Path) -> None:
        self.source_dir = normalize(source_dir)
        self.env = Environment(autoescape=True, keep_trailing_newline=True)
        self.env.filters["sorted"] = sorted_values
        self._chain: list[Path] = []

    def _name(self, path: Path) -> str:
        try:
            return path.relative_to(self.source_dir).as_posix()
        except ValueError:
            return str(path)

    def render(self, path: Path, body: str, metadata: Mapping) -> str:
        path = normalize(path)
        if path in self._chain:
            raise ImportCycleError([self._name(item) for item in [*self._chain, path]])
        self._chain.append(path)
        try:
            return self._render(path, body, metadata)
        finally:
            self._chain.pop()

    def _render(self, path: Path, body: str, metadata: Mapping) -> str:
        name = self._name(path)

        def render_import(relative_filename: str) -> str:
            filename = normalize(path.parent / relative_filename)
            return self.render(filename, read_text(filename), metadata)

        def importhtml(relative_filename: str) -> Markup:
            return Markup(render_import(relative_filename))

        def importcss(relative_filename: str) -> Markup:
            return Markup(render_import(relative_filename).replace("</style", "<\\/style"))

        def importjs(relative_filename: str) -> Markup:
            return Markup(render_import(relative_filename).replace("</script", "<\\/script"))

        page_url = str(metadata.get("url", "/"))

        def relative_url(target: str) -> str:
            return relative(posixpath.dirname(page_url), str(target))

        helpers = {
            "importhtml": importhtml,
            "importcss": importcss,
            "importjs": importjs,
            "sorted": sorted_values,
            "relative": relative_url,
        }
        try:
            template = self.env.from_string(body, globals=helpers)
        except TemplateError as exc:
            raise RenderError(f"Render template {name}: parse: {exc}") from exc
        try:
            return template.render(metadata)
        except TemplateError as exc:
            raise RenderError(f"Render template {name}: execute: {exc}") from exc
        except (TypeError, ValueError, LookupError, AttributeError) as exc:
            raise RenderError(f"Render template {name}: execute: {exc}") from exc

    def render_markdown(self, path: Path, body: str, metadata: Mapping) -> str:
        templated = self.render(path, body, metadata)
        return markdown_to_html(templated, toc=parse_bool(metadata.get(TOC_KEY)))

    def template_for(self, path: Path, metadata: Mapping) -> Optional[Path]:
        value = metadata.get(TEMPLATE_KEY)
        if not value:
            return None
        value = str(value)
        if value.startswith("/"):
            candidate = normalize(self.source_dir / value.lstrip("/"))
            if candidate.is_file():
                return candidate
            raise SiteReadError(f"template {value!r} for {self._name(normalize(path))} not found")

        directory = normalize(path).parent
        while True:
            candidate = normalize(directory / value)
            if candidate.is_file():
                return candidate
            if directory == self.source_dir or not is_within(self.source_dir, directory):
                break
            directory = directory.parent
        raise SiteReadError(f"template {value!r} for {self._name(normalize(path))} not found")

    def render_page(self, path: Path, body: str, metadata: Mapping) -> str:
        content = Markup(self.render_markdown(path, body, metadata))
        page_metadata = deep_merge(metadata, {CONTENT_KEY: content})
        template_path = self.template_for(path, page_metadata)
        if template_path is None:
            return str(content)
        logger.debug("%s rendered with template %s", self._name(normalize(path)), self._name(template_path))
        return self.render(template_path, read_text(template_path), page_metadata)
