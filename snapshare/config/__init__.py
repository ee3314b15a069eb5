"""
Configuration modules for SnapShare.

YAML settings plus the security checks applied to the signing key.
"""

from .settings import load_config, get_default_config, get_config_value
from .security import (
    SecurityConfig, SecurityValidator, validate_production_environment,
    generate_secure_secret_key
)

__all__ = [
    'load_config',
    'get_default_config',
    'get_config_value',
    'SecurityConfig',
    'SecurityValidator',
    'validate_production_environment',
    'generate_secure_secret_key'
]
