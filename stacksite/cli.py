from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    DEFAULT_GLOBAL_KEY,
    DEFAULT_PORT,
    DEFAULT_SOURCE,
    DEFAULT_TARGET,
    SiteConfig,
    load_config,
    resolve_config,
)
from .errors import BuildError
from .log import configure_logging
from .serve import serve_directory
from .site import Site, build_site
from .utils import clean_output_dir, parse_bool, parse_int


def build_parser(config: Optional[dict] = None, config_path: str = "site.toml") -> argparse.ArgumentParser:
    config = config or {}

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_bool(key: str, default: bool) -> bool:
        value = config.get(key)
        return default if value is None else parse_bool(value)

    def cfg_int(key: str, default: int) -> int:
        return parse_int(config.get(key), default)

    parser = argparse.ArgumentParser(description="Build a static site from a source tree.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--source", default=cfg_str("source", DEFAULT_SOURCE), help="Path to site source (input).")
    parser.add_argument("--target", default=cfg_str("target", DEFAULT_TARGET), help="Path to site target (output).")
    parser.add_argument(
        "--global-key",
        default=cfg_str("global_key", DEFAULT_GLOBAL_KEY),
        help="Template node name for per-file metadata.",
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("debug", False),
        help="Print debug information.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", False),
        help="Remove the target directory before building.",
    )
    parser.add_argument(
        "--serve",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("serve", False),
        help="Serve the target directory over HTTP after building.",
    )
    parser.add_argument("--port", default=cfg_int("port", DEFAULT_PORT), type=int, help="Port used by --serve.")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))
    return build_parser(config, pre_args.config).parse_args(argv)


def run(config: SiteConfig) -> Site:
    if config.clean:
        clean_output_dir(config.target, config.source, Path.cwd())
    return build_site(config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        args = parse_args(argv)
        configure_logging(verbose=args.debug)
        config = resolve_config(args)
        start = time.perf_counter()
        site = run(config)
    except BuildError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start
    report = site.report
    print(
        f"Build completed in {elapsed:.2f}s: {len(report.rendered)} rendered, "
        f"{len(report.copied)} copied, {len(report.redirects)} redirect(s)."
    )
    print(f"Site generated in: {config.target}")
    if config.serve:
        serve_directory(config.target, config.port)
    return 0
