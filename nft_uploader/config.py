"""Configuration management for the NFT uploader."""

import argparse
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from boto3.s3.transfer import TransferConfig
from dotenv import load_dotenv


DEFAULT_ENV = "devnet"
DEFAULT_PINATA_GATEWAY = "https://ipfs.io"
DEFAULT_IPFS_API_URL = "https://ipfs.infura.io:5001"
DEFAULT_AWS_REGION = "us-east-1"

# loglevel-style names accepted by --log-level
LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "silent": logging.CRITICAL + 1,
}


@dataclass
class PinataConfig:
    """Pinata pinning service configuration."""

    jwt: str | None = None
    gateway: str | None = None

    @property
    def gateway_url(self) -> str:
        """Gateway used to build links, without trailing slash."""
        return (self.gateway or DEFAULT_PINATA_GATEWAY).rstrip("/")


@dataclass
class IpfsConfig:
    """IPFS HTTP API configuration.

    Credentials are given either as a JSON object
    ({"projectId": ..., "secretKey": ...}) or as "projectId:secretKey".
    """

    credentials: str | None = None
    api_url: str = DEFAULT_IPFS_API_URL

    def auth(self) -> tuple[str, str] | None:
        """Parse the credentials into a (project_id, secret_key) pair."""
        if not self.credentials:
            return None

        try:
            parsed = json.loads(self.credentials)
        except json.JSONDecodeError:
            parsed = None

        if isinstance(parsed, dict):
            project_id = parsed.get("projectId")
            secret_key = parsed.get("secretKey")
        elif ":" in self.credentials:
            project_id, secret_key = self.credentials.split(":", 1)
        else:
            return None

        if not project_id or not secret_key:
            return None
        return str(project_id), str(secret_key)


@dataclass
class AwsConfig:
    """AWS S3 configuration."""

    bucket: str | None = None
    region: str = DEFAULT_AWS_REGION
    transfer_config: TransferConfig = field(default_factory=lambda: TransferConfig(
        multipart_threshold=8 * 1024 * 1024,  # 8MB
        max_concurrency=4,
        multipart_chunksize=8 * 1024 * 1024,  # 8MB chunks
        use_threads=True,
    ))


@dataclass
class NftStorageConfig:
    """NFT.Storage API configuration."""

    api_key: str | None = None

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)


@dataclass
class Config:
    """Main configuration container."""

    keypair: Path
    env: str = DEFAULT_ENV
    rpc_url: str | None = None
    pinata: PinataConfig = field(default_factory=PinataConfig)
    ipfs: IpfsConfig = field(default_factory=IpfsConfig)
    aws: AwsConfig = field(default_factory=AwsConfig)
    nft_storage: NftStorageConfig = field(default_factory=NftStorageConfig)

    @classmethod
    def from_args(cls, args: argparse.Namespace, env_path: Path | None = None) -> "Config":
        """Build configuration from parsed CLI arguments.

        Credential flags that were not given fall back to environment
        variables (optionally loaded from a .env file).
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        def option(name: str, env_var: str) -> str | None:
            value = getattr(args, name, None)
            return value if value else os.getenv(env_var) or None

        return cls(
            keypair=Path(args.keypair),
            env=getattr(args, "env", None) or DEFAULT_ENV,
            rpc_url=option("rpc_url", "SOLANA_RPC_URL"),
            pinata=PinataConfig(
                jwt=option("pinata_jwt", "PINATA_JWT"),
                gateway=option("pinata_gateway", "PINATA_GATEWAY"),
            ),
            ipfs=IpfsConfig(
                credentials=option("ipfs_credentials", "IPFS_CREDENTIALS"),
                api_url=os.getenv("IPFS_API_URL", DEFAULT_IPFS_API_URL),
            ),
            aws=AwsConfig(
                bucket=option("aws_s3_bucket", "AWS_S3_BUCKET"),
                region=os.getenv("AWS_REGION", DEFAULT_AWS_REGION),
            ),
            nft_storage=NftStorageConfig(
                api_key=option("nft_storage_key", "NFT_STORAGE_KEY"),
            ),
        )


def configure_logging(level: str | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: loglevel-style name (trace, debug, info, warn, error, silent)
    """
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    if level is None:
        return

    resolved = LOG_LEVELS.get(level.lower())
    if resolved is None:
        logging.getLogger(__name__).warning(
            f"Unknown log level '{level}', using info"
        )
        return

    logging.getLogger(__name__).info(f"setting the log value to: {level}")
    root.setLevel(resolved)
