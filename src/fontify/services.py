"""Service container built once per process and handed to each command."""

import logging
from dataclasses import dataclass

import requests

from .bundling.bundler import ProductionBundler
from .catalog.client import CatalogClient
from .catalog.installer import FontInstaller
from .core.config import AppConfig
from .detection.detector import FontDetector
from .detection.framework import FrameworkInferencer

logger = logging.getLogger(__name__)


@dataclass
class FontifyServices:
    """Long-lived collaborators shared by every operation in a session."""

    config: AppConfig
    client: CatalogClient
    detector: FontDetector
    inferencer: FrameworkInferencer
    bundler: ProductionBundler
    installer: FontInstaller

    def close(self) -> None:
        self.client.cleanup()

    def __enter__(self) -> "FontifyServices":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_services(
    config: AppConfig | None = None, session: requests.Session | None = None
) -> FontifyServices:
    """
    Wire up the services for one session.

    Args:
        config: Application configuration; loaded from the environment if omitted
        session: Optional HTTP session for the catalog client

    Returns:
        FontifyServices sharing a single catalog client
    """
    config = config or AppConfig.load_from_env()
    client = CatalogClient(config.catalog, session=session)

    services = FontifyServices(
        config=config,
        client=client,
        detector=FontDetector(config.detection),
        inferencer=FrameworkInferencer(),
        bundler=ProductionBundler(client, config.bundle),
        installer=FontInstaller(client, config.install),
    )
    logger.debug(f"Services created for project root {config.project_root}")
    return services
