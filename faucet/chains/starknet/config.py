"""
Starknet configuration.

Distribution settings come from the bundled config.json (or an explicit
policy file), secrets from STARKNET_* environment variables.
"""

from pathlib import Path
from types import MappingProxyType

from pydantic_settings import SettingsConfigDict

from ..config import ChainConfig, ChainSecrets, PolicyLocator, load_chain_config
from .validator import CHAIN_NAME

POLICY_FILENAME = "config.json"

DEFAULT_EXPLORER_URLS = MappingProxyType({
    "mainnet": "https://voyager.online/tx/",
    "sepolia": "https://sepolia.voyager.online/tx/",
})


class StarknetSecrets(ChainSecrets):
    """STARKNET_RPC_URL, STARKNET_PRIVATE_KEY, STARKNET_ADDRESS."""

    model_config = SettingsConfigDict(env_prefix="STARKNET_")


def bundled_policy_path() -> Path:
    """Policy file shipped next to this module."""
    return Path(__file__).resolve().parent / POLICY_FILENAME


def load_config(
    policy_path: Path | str | None = None,
    *,
    locate: PolicyLocator = bundled_policy_path,
    env_file: str | None = ".env",
) -> ChainConfig:
    """Load Starknet configuration from policy file and environment."""
    return load_chain_config(
        StarknetSecrets,
        policy_path,
        locate=locate,
        env_file=env_file,
        chain=CHAIN_NAME,
    )
