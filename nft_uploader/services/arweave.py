"""Arweave backend, paid for with a SOL transfer."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from ..errors import BackendUploadError
from ..models.upload import StorageType, UploadResult
from ..utils.identifiers import media_extension
from .base import UPLOAD_TIMEOUT, StorageBackend, read_media, response_json

if TYPE_CHECKING:
    from solders.keypair import Keypair

    from ..wallet import ChainProgram

logger = logging.getLogger(__name__)

ARWEAVE_PAYMENT_WALLET = "6FKvsq4ydWFci6nGq9ckbjYMtnmaqAoatz5c9XWjiDuS"
ARWEAVE_UPLOAD_URL = "https://us-central1-metaplex-studios.cloudfunctions.net/uploadFile"
ARWEAVE_GATEWAY = "https://arweave.net"
CONVERSION_RATES_URL = (
    "https://api.coingecko.com/api/v3/simple/price"
    "?ids=solana,arweave&vs_currencies=usd"
)

WINSTON_PER_AR = 10**12
LAMPORTS_PER_SOL = 10**9

# Multiplier applied to the quoted price
STORAGE_COST_MARGIN = 1.1

# Placeholder transaction id used to size the path manifest
_SAMPLE_TX_ID = "artestaC_testsEaEmAGFtestEGtestmMGmgMGAV438"

QUOTE_TIMEOUT = 15


def estimate_manifest_size(filenames: list[str]) -> int:
    """Estimate the byte size of the Arweave path manifest for the files."""
    paths = {
        name: {"id": _SAMPLE_TX_ID, "ext": media_extension(name)}
        for name in filenames
    }
    manifest = {
        "manifest": "arweave/paths",
        "version": "0.1.0",
        "paths": paths,
        "index": {"path": "metadata.json"},
    }
    return len(json.dumps(manifest, separators=(",", ":")).encode("utf-8"))


def fetch_asset_cost_to_store(file_sizes: list[int]) -> int:
    """Quote the cost in lamports of storing files of the given sizes."""
    total_bytes = sum(file_sizes)
    try:
        price_response = requests.get(
            f"{ARWEAVE_GATEWAY}/price/{total_bytes}", timeout=QUOTE_TIMEOUT
        )
        price_response.raise_for_status()
        winston = int(price_response.text.strip())

        rates = response_json(
            requests.get(CONVERSION_RATES_URL, timeout=QUOTE_TIMEOUT), "CoinGecko"
        )
        ar_usd = float(rates["arweave"]["usd"])
        sol_usd = float(rates["solana"]["usd"])
    except requests.RequestException as e:
        raise BackendUploadError(f"Could not quote Arweave storage cost: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise BackendUploadError(f"Unexpected Arweave price quote: {e}") from e

    if sol_usd <= 0:
        raise BackendUploadError("Unexpected SOL price quote")

    sol = (winston / WINSTON_PER_AR) * ar_usd / sol_usd
    lamports = math.ceil(sol * LAMPORTS_PER_SOL * STORAGE_COST_MARGIN)
    logger.debug(f"Arweave storage for {total_bytes} bytes: {lamports} lamports")
    return lamports


class ArweaveBackend(StorageBackend):
    """Uploads the image and manifest in a single Arweave bundle.

    Animations are not uploaded, so results never carry an animation link.
    """

    storage_type = StorageType.ARWEAVE

    def __init__(self, wallet: Keypair, program: ChainProgram, env: str) -> None:
        self._wallet = wallet
        self._program = program
        self._env = env

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        image = Path(image)
        image_ext = image.suffix
        image_data = read_media(image)

        if animation:
            logger.warning(f"Arweave uploads skip the animation file for {index}")

        storage_cost = fetch_asset_cost_to_store([
            len(image_data),
            len(manifest),
            estimate_manifest_size(["0.png", "metadata.json"]),
        ])
        signature = self._program.transfer(
            self._wallet, ARWEAVE_PAYMENT_WALLET, storage_cost
        )

        files = [
            ("file[]", (f"image{image_ext}", image_data, f"image/{media_extension(image)}")),
            ("file[]", ("metadata.json", manifest, "application/json")),
        ]
        try:
            response = requests.post(
                ARWEAVE_UPLOAD_URL,
                data={"transaction": signature, "env": self._env},
                files=files,
                timeout=UPLOAD_TIMEOUT,
            )
        except requests.RequestException as e:
            raise BackendUploadError(f"Arweave upload failed: {e}") from e

        messages = response_json(response, "Arweave").get("messages") or []
        metadata_tx = _transaction_id(messages, "manifest.json")
        image_tx = _transaction_id(messages, f"image{image_ext}")

        if not metadata_tx:
            raise BackendUploadError(f"No transaction ID for upload: {index}")

        link = f"{ARWEAVE_GATEWAY}/{metadata_tx}"
        image_link = (
            f"{ARWEAVE_GATEWAY}/{image_tx}?ext={media_extension(image)}"
            if image_tx
            else None
        )
        logger.info(f"Uploaded {index} to Arweave: {link}")
        return UploadResult(link, image_link)


def _transaction_id(messages: list, filename: str) -> str | None:
    for message in messages:
        if isinstance(message, dict) and message.get("filename") == filename:
            return message.get("transactionId")
    return None
