"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV selects which .env.{environment} file is loaded (if it exists)
- Each settings group reads its own prefixed environment variables
  (FAUCET_*, CHAIN_*, LOG_*)
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename
_env_file = str(_env_path) if _env_path.is_file() else None

# Nested BaseSettings don't inherit env_file, so populate os.environ up front.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class FaucetSettings(BaseSettings):
    """Faucet behaviour: payout, cooldown and the verification providers."""

    http_port: int = Field(
        8080,
        description="Port the HTTP server listens on",
    )
    network: str = Field(
        "testnet",
        description="Human-readable network name shown by /api/info",
    )
    symbol: str = Field(
        "ETH",
        description="Token symbol shown by /api/info",
    )
    payout: int = Field(
        1,
        description="Amount of ether sent per successful claim",
        ge=0,
    )
    interval_minutes: int = Field(
        1440,
        description="Cooldown between claims per address and per client IP (0 disables)",
        ge=0,
    )
    proxy_count: int = Field(
        0,
        description="Number of trusted reverse proxies appending to X-Forwarded-For",
        ge=0,
    )
    claim_timeout_seconds: float = Field(
        5.0,
        description="Upper bound for a single payout transfer",
        gt=0,
    )
    hcaptcha_site_key: str | None = Field(
        None,
        description="hCaptcha site key exposed to the frontend",
    )
    hcaptcha_secret: str | None = Field(
        None,
        description="hCaptcha secret; captcha verification is skipped when unset",
    )
    discord_client_id: str | None = Field(
        None,
        description="Discord OAuth client id exposed to the frontend",
    )
    discord_guild_id: str | None = Field(
        None,
        description="Discord guild a claimer must belong to; membership check is skipped when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="FAUCET_",
        case_sensitive=False,
    )


class ChainSettings(BaseSettings):
    """JSON-RPC node used to send payout transactions."""

    rpc_url: str = Field(
        "http://127.0.0.1:8545",
        description="Node JSON-RPC endpoint",
    )
    sender_address: str | None = Field(
        None,
        description="Node-managed account that funds payouts",
    )
    timeout_seconds: float = Field(
        10.0,
        description="HTTP timeout for JSON-RPC calls in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="CHAIN_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file at this size (0 disables rotation)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation id header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    faucet: FaucetSettings = Field(default_factory=FaucetSettings)
    chain: ChainSettings = Field(default_factory=ChainSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
