"""
Chain configuration assembly.

Combines two sources into one immutable ChainConfig:
- Static policy (per-network JSON file): token contracts, drip amounts,
  hourly/daily caps, minimum balance protection, explorer URL
- Secrets (environment / .env via pydantic-settings): RPC endpoint,
  signer private key, signer address

Any missing secret or unreadable policy raises ConfigurationError; no
partial configuration is ever returned.
"""

from collections.abc import Callable, Mapping
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from faucet.config.constants import DEFAULT_TOKEN_DECIMALS

from .exceptions import ConfigurationError


PolicyLocator = Callable[[], Path]


class TokenPolicy(BaseModel):
    """Per-token distribution policy."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    contract_address: str = ""
    drip_amount: Decimal = Decimal("0")
    max_per_hour: float = Field(default=0, ge=0)
    max_per_day: float = Field(default=0, ge=0)
    decimals: int = Field(default=DEFAULT_TOKEN_DECIMALS, ge=0, le=36)


class ChainPolicy(BaseModel):
    """Static per-network policy as stored in config.json."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    chain_id: str = "sepolia"
    tokens: dict[str, TokenPolicy] = Field(default_factory=dict)
    min_balance_protect_pct: int = Field(default=0, ge=0, le=100)
    explorer_url: str = ""

    @field_validator("tokens")
    @classmethod
    def upper_case_symbols(cls, v: dict[str, TokenPolicy]) -> dict[str, TokenPolicy]:
        """Token symbols are case-insensitive; store them upper-cased."""
        return {symbol.upper(): policy for symbol, policy in v.items()}


class ChainSecrets(BaseSettings):
    """
    Secrets loaded from environment variables.

    Subclasses set env_prefix (e.g. STARKNET_) so the variables become
    <PREFIX>RPC_URL, <PREFIX>PRIVATE_KEY and <PREFIX>ADDRESS.
    """

    rpc_url: str
    private_key: SecretStr
    address: str

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("rpc_url", "address")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("private_key")
    @classmethod
    def key_not_blank(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("must not be empty")
        return SecretStr(v.get_secret_value().strip())


class ChainConfig(BaseModel):
    """Immutable configuration consumed by a chain client."""

    model_config = ConfigDict(frozen=True)

    network: str
    rpc_url: str
    private_key: SecretStr
    signer_address: str
    tokens: Mapping[str, TokenPolicy] = Field(default_factory=dict, validate_default=True)
    min_balance_protect_pct: int = 0
    explorer_url: str = ""

    @field_validator("tokens")
    @classmethod
    def freeze_tokens(cls, v: Mapping[str, TokenPolicy]) -> Mapping[str, TokenPolicy]:
        """Store the token table read-only, keyed by upper-cased symbol."""
        return MappingProxyType({symbol.upper(): policy for symbol, policy in v.items()})

    def _token(self, token: str) -> TokenPolicy | None:
        return self.tokens.get(token.upper())

    def get_drip_amount(self, token: str) -> Decimal:
        """Drip amount for a token in human units (0 if unknown)."""
        policy = self._token(token)
        return policy.drip_amount if policy else Decimal("0")

    def get_token_address(self, token: str) -> str:
        """Contract address for a token ("" if unknown)."""
        policy = self._token(token)
        return policy.contract_address if policy else ""

    def get_token_decimals(self, token: str) -> int:
        policy = self._token(token)
        return policy.decimals if policy else DEFAULT_TOKEN_DECIMALS

    def get_max_tokens_per_hour(self, token: str) -> float:
        """Max hourly distribution limit for a token (0 if unknown)."""
        policy = self._token(token)
        return policy.max_per_hour if policy else 0

    def get_max_tokens_per_day(self, token: str) -> float:
        """Max daily distribution limit for a token (0 if unknown)."""
        policy = self._token(token)
        return policy.max_per_day if policy else 0


def load_policy(path: Path, chain: str | None = None) -> ChainPolicy:
    """
    Read and validate a policy file.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read policy file {path}", chain, str(path), e
        ) from e

    try:
        return ChainPolicy.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid policy file {path}", chain, str(path), e
        ) from e


def load_secrets(
    secrets_cls: type[ChainSecrets],
    env_file: str | None = ".env",
    chain: str | None = None,
) -> ChainSecrets:
    """
    Load secrets from the environment.

    Raises:
        ConfigurationError: Naming every missing or empty variable
    """
    try:
        return secrets_cls(_env_file=env_file)
    except PydanticValidationError as e:
        prefix = secrets_cls.model_config.get("env_prefix", "")
        names = sorted({f"{prefix}{err['loc'][0]}".upper() for err in e.errors() if err["loc"]})
        raise ConfigurationError(
            f"{', '.join(names)} required in environment or .env",
            chain,
            names[0] if names else None,
            e,
        ) from e


def load_chain_config(
    secrets_cls: type[ChainSecrets],
    policy_path: Path | str | None = None,
    *,
    locate: PolicyLocator,
    env_file: str | None = ".env",
    chain: str | None = None,
) -> ChainConfig:
    """
    Assemble a ChainConfig from a policy file and environment secrets.

    Args:
        secrets_cls: Settings class with the network's env prefix
        policy_path: Explicit policy file; wins over `locate`
        locate: Strategy returning the default policy path
        env_file: .env file to read secrets from (None disables it)
        chain: Chain name for error context

    Returns:
        Validated, immutable ChainConfig
    """
    path = Path(policy_path) if policy_path is not None else locate()
    policy = load_policy(path, chain)
    secrets = load_secrets(secrets_cls, env_file, chain)

    logger.debug(
        f"Loaded {chain or 'chain'} policy from {path}: "
        f"network={policy.chain_id}, tokens={sorted(policy.tokens)}"
    )

    return ChainConfig(
        network=policy.chain_id,
        rpc_url=secrets.rpc_url,
        private_key=secrets.private_key,
        signer_address=secrets.address,
        tokens=policy.tokens,
        min_balance_protect_pct=policy.min_balance_protect_pct,
        explorer_url=policy.explorer_url,
    )
