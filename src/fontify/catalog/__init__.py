"""Remote font catalog access and direct font installs."""

from .client import CatalogClient, select_common_variants
from .installer import FontInstaller

__all__ = ["CatalogClient", "FontInstaller", "select_common_variants"]
