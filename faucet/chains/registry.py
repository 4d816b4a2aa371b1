"""
Network registry.

Maps network names (as accepted by the CLI) to their config loader and
client factory.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path
from types import MappingProxyType
from typing import NamedTuple

from loguru import logger

from .base import Chain
from .config import ChainConfig
from .ethereum import EthereumClient
from .ethereum import load_config as load_ethereum_config
from .exceptions import ConfigurationError
from .starknet import StarknetClient
from .starknet import load_config as load_starknet_config


class NetworkBackend(NamedTuple):
    load_config: Callable[..., ChainConfig]
    connect: Callable[[ChainConfig], Awaitable[Chain]]


NETWORKS = MappingProxyType({
    "starknet": NetworkBackend(load_starknet_config, StarknetClient.connect),
    "ethereum": NetworkBackend(load_ethereum_config, EthereumClient.connect),
})


def supported_networks() -> list[str]:
    """Names accepted by create_chain()."""
    return sorted(NETWORKS)


async def create_chain(
    network: str,
    *,
    policy_path: Path | str | None = None,
    env_file: str | None = ".env",
) -> Chain:
    """
    Load configuration for a network and return a connected client.

    Args:
        network: Network name (case-insensitive), see supported_networks()
        policy_path: Optional policy file overriding the bundled one
        env_file: .env file to read secrets from (None disables it)

    Raises:
        ConfigurationError: Unknown network or invalid configuration
    """
    backend = NETWORKS.get(network.lower())
    if backend is None:
        raise ConfigurationError(
            f"Unsupported network: {network} (supported: {', '.join(supported_networks())})",
            config_key="network",
        )

    config = backend.load_config(policy_path, env_file=env_file)
    logger.info(f"Connecting {network.lower()} client ({config.network})")
    return await backend.connect(config)
