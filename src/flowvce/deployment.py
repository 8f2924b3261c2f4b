"""Walrus Sites deployment.

Publishing is simulated: the bundle is assembled and a deployment record
with random object identifiers is returned after a short delay.
"""

from __future__ import annotations

import logging
import re
import secrets
import time

from flowvce.models import Deployment, GeneratedSite, SiteStatus

logger = logging.getLogger(__name__)

NETWORKS = ("mainnet", "testnet")

_PRIVATE_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class DeploymentError(Exception):
    """Raised when a site cannot be deployed."""


def _random_object_id() -> str:
    return "0x" + secrets.token_hex(20)


def validate_private_key(key: str) -> bool:
    """Basic shape check for a Sui private key (64 hex characters)."""
    return bool(_PRIVATE_KEY_RE.match(key))


def create_site_bundle(site: GeneratedSite) -> dict[str, bytes]:
    """Lay out the site as the files a Walrus site is built from."""
    bundle: dict[str, bytes] = {
        "index.html": site.html.encode("utf-8"),
        "styles.css": site.css.encode("utf-8"),
        "script.js": site.js.encode("utf-8"),
    }
    for name, content in site.assets.items():
        bundle[f"assets/{name}"] = content.encode("utf-8")
    return bundle


class WalrusDeployer:
    """Deploys generated sites to Walrus Sites."""

    def __init__(self, private_key: str, network: str = "testnet", delay: float = 3.0):
        if network not in NETWORKS:
            raise ValueError(f"Unknown Walrus network: {network}")
        self.private_key = private_key
        self.network = network
        self.delay = delay

    def deploy_site(self, site: GeneratedSite, site_name: str) -> Deployment:
        if not site_name:
            raise DeploymentError("Site name is required")
        try:
            bundle = create_site_bundle(site)
            total = sum(len(data) for data in bundle.values())
            logger.info(
                "Deploying %s (%d files, %d bytes) to %s",
                site_name, len(bundle), total, self.network,
            )
            time.sleep(self.delay)
        except Exception as exc:
            logger.error("Walrus deployment error: %s", exc)
            raise DeploymentError("Failed to deploy to Walrus Sites") from exc

        return Deployment(
            object_id=_random_object_id(),
            blob_id=_random_object_id(),
            url=f"https://{site_name}.wal.app",
            transaction_digest=_random_object_id(),
        )

    def get_site_status(self, object_id: str) -> SiteStatus:
        return SiteStatus(status="published", url=f"https://wal.app/{object_id}")
