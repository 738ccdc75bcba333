#!/usr/bin/env python3
"""
NFT Storage Upload CLI

Uploads an NFT's media and metadata to Arweave, AWS S3, IPFS, Pinata or
NFT.Storage and logs the resulting links.
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_ENV, Config, configure_logging
from .dispatcher import Dispatcher
from .errors import UploadError
from .services.registry import BackendRegistry
from .wallet import load_chain_program, load_wallet_key

logger = logging.getLogger(__name__)

UPLOAD_TO_STORAGE = "upload-to-storage"
UPLOAD_MEDIA_TO_STORAGE = "upload-media-to-storage"
UPLOAD_METADATA_TO_STORAGE = "upload-metadata-to-storage"


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every command."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-e",
        "--env",
        default=DEFAULT_ENV,
        help="Solana cluster env name (mainnet-beta, testnet, devnet)",
    )
    parser.add_argument(
        "-k",
        "--keypair",
        required=True,
        help="Solana wallet location",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        help="log level (trace, debug, info, warn, error, silent)",
    )
    parser.add_argument("-r", "--rpc-url", help="Optional: Custom RPC url")
    parser.add_argument("--nft-storage-key", help="Optional: NFT storage key")
    parser.add_argument("--ipfs-credentials", help="Optional: IPFS credentials")
    parser.add_argument("--pinata-jwt", help="Optional: Pinata JWT")
    parser.add_argument("--pinata-gateway", help="Optional: Pinata Gateway")
    parser.add_argument("--aws-s3-bucket", help="Optional: AWS S3 Bucket")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Upload NFT media and metadata to storage"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 1.1.0")
    commands = parser.add_subparsers(dest="command", required=True)
    common = _common_options()

    for name, file_help in (
        (UPLOAD_TO_STORAGE, "metadata json file"),
        (UPLOAD_MEDIA_TO_STORAGE, "media file"),
        (UPLOAD_METADATA_TO_STORAGE, "metadata json file"),
    ):
        command = commands.add_parser(name, parents=[common])
        command.add_argument("-f", "--file", required=True, help=file_help)
        command.add_argument(
            "-s",
            "--storage",
            required=True,
            help="storage type (arweave, aws, ipfs, pinata, nft-storage)",
        )

    return parser.parse_args(argv)


def run(args: argparse.Namespace, config: Config) -> int:
    """Run the selected command. Returns the process exit status."""
    wallet = load_wallet_key(config.keypair)
    program = None
    if args.command == UPLOAD_TO_STORAGE:
        program = load_chain_program(config.env, config.rpc_url)

    registry = BackendRegistry.from_config(config, wallet, program)
    dispatcher = Dispatcher(registry, logger=logger)

    commands = {
        UPLOAD_TO_STORAGE: dispatcher.upload_to_storage,
        UPLOAD_MEDIA_TO_STORAGE: dispatcher.upload_media_to_storage,
        UPLOAD_METADATA_TO_STORAGE: dispatcher.upload_metadata_to_storage,
    }
    result = commands[args.command](Path(args.file), args.storage)
    return 0 if result is not None else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(args.log_level)
    config = Config.from_args(args)

    try:
        return run(args, config)
    except UploadError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
