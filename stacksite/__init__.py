"""Static site builder with cascading directory metadata."""

from .config import SiteConfig
from .site import Site, build_site
from .stack import MetadataStack, deep_merge

__version__ = "0.1.0"

__all__ = ["MetadataStack", "Site", "SiteConfig", "build_site", "deep_merge"]
