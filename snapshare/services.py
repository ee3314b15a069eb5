"""
Service construction for SnapShare.

Builds the token authority and the media pipeline from configuration once
per process; request handlers share the resulting objects.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .auth.tokens import TokenAuthority
from .config.security import SecurityValidator, validate_production_environment
from .config.settings import get_config_value, is_unresolved, load_config
from .media.compositor import MediaCompositor
from .media.filters import FilterAssetStore
from .storage.local import LocalArtifactStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Process-wide service objects."""
    tokens: TokenAuthority
    compositor: MediaCompositor
    filters: FilterAssetStore
    artifacts: LocalArtifactStore


def _configured_secret(config: Dict[str, Any]) -> Optional[str]:
    value = get_config_value(config, 'security.secret_key')
    if not value or is_unresolved(value):
        return None
    return str(value)


def create_services(config: Optional[Dict[str, Any]] = None,
                    secret_key: Optional[str] = None) -> Services:
    """
    Create the SnapShare services.

    The signing key is taken from the argument, then security.secret_key,
    then SNAPSHARE_SECRET_KEY.

    Args:
        config: Configuration dictionary; loaded from config.yaml if None
        secret_key: Explicit signing key

    Returns:
        Services bundle

    Raises:
        ValueError: If no signing key is available
        SystemExit: If security validation fails in production
    """
    if config is None:
        config = load_config()

    key = secret_key or _configured_secret(config)
    validate_production_environment(key)
    security_config = SecurityValidator(key).get_security_config()

    filters = FilterAssetStore(Path(get_config_value(config, 'media.filter_dir', 'filters')))
    artifacts = LocalArtifactStore(Path(get_config_value(config, 'media.upload_dir', 'uploads')))

    services = Services(
        tokens=TokenAuthority(security_config.secret_key),
        compositor=MediaCompositor(filters, artifacts),
        filters=filters,
        artifacts=artifacts,
    )
    logger.info(f"Services ready (uploads: {artifacts.base_path}, filters: {filters.directory})")
    return services
