"""Environment configuration setup utilities.

This module provides functions for loading environment variables from .env files
and configuring the client for local development.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from starkperp.errors import ValidationError
from starkperp.facts import NETWORK_ID_MAINNET
from starkperp.helpers import DEFAULT_API_HOST
from starkperp.types import ApiKeyCredentials

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Client settings read from the environment."""

    environment: str
    api_endpoint: str
    network_id: int
    api_key: str
    api_secret: str = field(repr=False)
    api_passphrase: str = field(repr=False)
    stark_private_key: str | None = field(default=None, repr=False)
    position_id: str | None = None
    ethereum_address: str | None = None

    @property
    def credentials(self) -> ApiKeyCredentials:
        """The API key credentials of this configuration."""
        return ApiKeyCredentials(
            key=self.api_key,
            secret=self.api_secret,
            passphrase=self.api_passphrase,
        )


def setup_environment() -> ClientConfig:
    """Load and return the client configuration from environment variables.

    Loads environment variables from a .env file if present, otherwise falls
    back to system environment variables. Reads environment-specific variables
    based on the ENVIRONMENT variable (defaults to 'production'), for example
    ``STARKPERP_API_KEY_PRODUCTION``.

    Returns:
        ClientConfig: The configuration for the selected environment

    Raises:
        ValidationError: If the network id is not an integer

    """
    # Load the .env file if it exists
    env_file_path = Path(".env")
    if env_file_path.exists():
        log.info("Loading environment variables from .env file")
        load_dotenv(env_file_path)
    else:
        log.info(".env file not found. Falling back to Bash Environment variables.")

    environment = os.getenv("ENVIRONMENT", "production").lower()
    log.info("Using %s environment", environment)
    suffix = environment.upper()

    try:
        network_id = int(
            os.environ.get(f"STARKPERP_NETWORK_ID_{suffix}", str(NETWORK_ID_MAINNET))
        )
    except ValueError as e:
        raise ValidationError(f"Invalid STARKPERP_NETWORK_ID_{suffix}: {e}") from e

    return ClientConfig(
        environment=environment,
        api_endpoint=os.environ.get(
            f"STARKPERP_API_ENDPOINT_{suffix}", DEFAULT_API_HOST
        ),
        network_id=network_id,
        api_key=os.environ.get(f"STARKPERP_API_KEY_{suffix}", "your-api-key"),
        api_secret=os.environ.get(f"STARKPERP_API_SECRET_{suffix}", ""),
        api_passphrase=os.environ.get(
            f"STARKPERP_API_PASSPHRASE_{suffix}", "your-passphrase"
        ),
        stark_private_key=os.environ.get(f"STARKPERP_STARK_PRIVATE_KEY_{suffix}"),
        position_id=os.environ.get(f"STARKPERP_POSITION_ID_{suffix}"),
        ethereum_address=os.environ.get(f"STARKPERP_ETHEREUM_ADDRESS_{suffix}"),
    )
