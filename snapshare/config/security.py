"""
Security configuration and validation for SnapShare.

The token signing key is process-wide configuration. It is checked once at
startup so that a missing or weak key stops the process instead of failing
individual requests.
"""

import os
import logging
import secrets
from typing import List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SECRET_KEY_ENV = 'SNAPSHARE_SECRET_KEY'
ENVIRONMENT_ENV = 'SNAPSHARE_ENVIRONMENT'
MIN_SECRET_KEY_LENGTH = 32


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration settings."""
    secret_key: str
    jwt_algorithm: str = "HS256"
    environment: str = "development"


class SecurityValidator:
    """Validates the signing key and environment setup."""

    ALLOWED_ENVIRONMENTS = ('development', 'staging', 'production')

    # Insecure default values that must not be used in production
    INSECURE_DEFAULTS = [
        'dev-secret-key',
        'development-key',
        'test-key',
        'changeme',
        'secret',
        'password',
        '123456',
        'default'
    ]

    def __init__(self, secret_key: Optional[str] = None):
        """
        Args:
            secret_key: Key to validate; defaults to SNAPSHARE_SECRET_KEY
        """
        self.environment = os.getenv(ENVIRONMENT_ENV, 'development')
        self.is_production = self.environment == 'production'
        self.secret_key = secret_key if secret_key is not None else os.getenv(SECRET_KEY_ENV)
        self.validation_errors: List[str] = []
        self.validation_warnings: List[str] = []

    def validate_environment(self) -> bool:
        """
        Validate the environment configuration.

        Returns:
            True if validation passes, False otherwise
        """
        logger.info(f"Validating security configuration for environment: {self.environment}")

        self.validation_errors.clear()
        self.validation_warnings.clear()

        if self.environment not in self.ALLOWED_ENVIRONMENTS:
            self.validation_errors.append(
                f"{ENVIRONMENT_ENV} has invalid value '{self.environment}'. "
                f"Allowed values: {', '.join(self.ALLOWED_ENVIRONMENTS)}"
            )

        self._validate_secret_key()
        self._log_validation_results()

        return len(self.validation_errors) == 0

    def _validate_secret_key(self) -> None:
        """Validate the token signing key."""
        secret_key = self.secret_key

        if not secret_key:
            self.validation_errors.append(
                f"Missing signing key: set {SECRET_KEY_ENV} or security.secret_key"
            )
            return

        if len(secret_key) < MIN_SECRET_KEY_LENGTH:
            self.validation_errors.append(
                f"Signing key is too short (minimum {MIN_SECRET_KEY_LENGTH} characters)"
            )

        if secret_key.lower() in [default.lower() for default in self.INSECURE_DEFAULTS]:
            self.validation_errors.append(
                "Signing key uses an insecure default value. "
                "Generate a secure random key for production."
            )

        if len(set(secret_key)) < 10:
            self.validation_warnings.append(
                "Signing key has low entropy. Consider using a more random key."
            )

        if self.is_production and len(secret_key) < 64:
            self.validation_warnings.append(
                "For production, the signing key should be at least 64 characters long."
            )

    def _log_validation_results(self) -> None:
        for error in self.validation_errors:
            logger.error(f"Security validation failed: {error}")

        for warning in self.validation_warnings:
            logger.warning(f"Security validation warning: {warning}")

        if not self.validation_errors and not self.validation_warnings:
            logger.info("Security validation passed with no issues.")

    def get_security_config(self) -> SecurityConfig:
        """
        Get security configuration.

        Returns:
            SecurityConfig instance

        Raises:
            ValueError: If no signing key is configured
        """
        if not self.secret_key:
            raise ValueError(f"{SECRET_KEY_ENV} environment variable is required")

        return SecurityConfig(
            secret_key=self.secret_key,
            environment=self.environment
        )


def validate_production_environment(secret_key: Optional[str] = None) -> bool:
    """
    Validate that the environment is properly configured.

    Called during startup. Failures abort the process in production and are
    only logged elsewhere.

    Returns:
        True if validation passes, False otherwise

    Raises:
        SystemExit: If validation fails in production environment
    """
    validator = SecurityValidator(secret_key)

    if not validator.validate_environment():
        if validator.is_production:
            logger.critical(
                "Security validation failed in production environment. "
                "Application startup aborted."
            )
            raise SystemExit(1)
        logger.warning(
            "Security validation failed in development environment. "
            "This would prevent startup in production."
        )
        return False

    return True


def generate_secure_secret_key() -> str:
    """
    Generate a cryptographically secure secret key.

    Returns:
        A 64-character URL-safe random string
    """
    return secrets.token_urlsafe(48)
