from __future__ import annotations


class BuildError(Exception):
    """Base class for failures that abort a build."""


class ConfigError(BuildError):
    pass


class MetadataError(BuildError):
    """Malformed directory declaration or front-matter."""


class SiteReadError(BuildError):
    pass


class RenderError(BuildError):
    """Template parse or execution failure."""


class ImportCycleError(RenderError):
    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__("import cycle: " + " -> ".join(chain))


class StackFrozenError(BuildError):
    pass
