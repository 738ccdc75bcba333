"""Solana wallet keypair and chain program loading."""

import json
import logging
from pathlib import Path

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams
from solders.system_program import transfer as system_transfer
from solders.transaction import Transaction

from .errors import BackendUploadError, WalletError

logger = logging.getLogger(__name__)

CLUSTER_URLS = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "devnet": "https://api.devnet.solana.com",
}


def cluster_url(env: str) -> str:
    """Public RPC endpoint for a cluster name."""
    try:
        return CLUSTER_URLS[env]
    except KeyError:
        raise WalletError(
            f"Unknown cluster env '{env}'. Known envs: {', '.join(CLUSTER_URLS)}"
        ) from None


def load_wallet_key(keypair: Path | str | None) -> Keypair:
    """Load a Solana keypair file (a JSON array of 64 secret key bytes).

    Raises:
        WalletError: If the file is missing or malformed
    """
    if not keypair:
        raise WalletError("Keypair is required!")

    try:
        secret = json.loads(Path(keypair).read_text(encoding="utf-8"))
    except OSError as e:
        raise WalletError(f"Could not read keypair {keypair}: {e}") from e
    except json.JSONDecodeError as e:
        raise WalletError(f"Keypair {keypair} is not valid JSON: {e}") from e

    if not isinstance(secret, list) or not secret:
        raise WalletError(f"Keypair {keypair} must be a JSON array of bytes")

    try:
        wallet = Keypair.from_bytes(bytes(secret))
    except Exception as e:
        raise WalletError(f"Invalid keypair {keypair}: {e}") from e

    logger.debug(f"wallet public key: {wallet.pubkey()}")
    return wallet


class ChainProgram:
    """Handle on the Solana cluster used to pay for storage."""

    def __init__(self, env: str, rpc_url: str | None = None) -> None:
        self._env = env
        self._rpc_url = rpc_url
        self._client: Client | None = None

    @property
    def env(self) -> str:
        return self._env

    @property
    def client(self) -> Client:
        """Lazy-initialize the RPC client."""
        if self._client is None:
            endpoint = self._rpc_url or cluster_url(self._env)
            self._client = Client(endpoint, commitment=Confirmed)
        return self._client

    def transfer(self, payer: Keypair, recipient: str, lamports: int) -> str:
        """Send lamports from the payer and wait for confirmation.

        Returns the transaction signature.
        """
        instruction = system_transfer(
            TransferParams(
                from_pubkey=payer.pubkey(),
                to_pubkey=Pubkey.from_string(recipient),
                lamports=lamports,
            )
        )

        try:
            blockhash = self.client.get_latest_blockhash().value.blockhash
            tx = Transaction([payer], Message([instruction], payer.pubkey()), blockhash)
            signature = self.client.send_transaction(tx).value
            self.client.confirm_transaction(signature, commitment=Confirmed)
        except (SolanaRpcException, RPCException) as e:
            raise BackendUploadError(f"Storage payment failed: {e}") from e

        logger.info(f"Paid {lamports} lamports to {recipient}: {signature}")
        return str(signature)


def load_chain_program(env: str, rpc_url: str | None = None) -> ChainProgram:
    """Create the chain program handle for a cluster."""
    if rpc_url is None:
        # Fail early on unknown envs
        cluster_url(env)
    return ChainProgram(env, rpc_url)
