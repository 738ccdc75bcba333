"""Registry mapping storage identifiers to backends."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import Config
from ..errors import UnsupportedBackendError
from ..models.upload import StorageType
from .arweave import ArweaveBackend
from .aws import AwsBackend
from .base import StorageBackend
from .ipfs import IpfsBackend
from .nft_storage import NftStorageBackend
from .pinata import PinataBackend

if TYPE_CHECKING:
    from solders.keypair import Keypair

    from ..wallet import ChainProgram

logger = logging.getLogger(__name__)


class BackendRegistry:
    """The set of backends available to a command invocation."""

    def __init__(self, backends: dict[StorageType, StorageBackend]) -> None:
        self._backends = dict(backends)

    @classmethod
    def from_config(
        cls,
        config: Config,
        wallet: Keypair | None = None,
        program: ChainProgram | None = None,
    ) -> BackendRegistry:
        """Build every backend from the supplied credentials.

        Arweave is only registered when both a wallet and a chain program
        are available.
        """
        backends: dict[StorageType, StorageBackend] = {
            StorageType.AWS: AwsBackend(config.aws),
            StorageType.IPFS: IpfsBackend(config.ipfs),
            StorageType.PINATA: PinataBackend(config.pinata),
            StorageType.NFT_STORAGE: NftStorageBackend(config.nft_storage),
        }
        if wallet is not None and program is not None:
            backends[StorageType.ARWEAVE] = ArweaveBackend(wallet, program, config.env)
        return cls(backends)

    def get(self, storage: StorageType | str) -> StorageBackend:
        """Look up the backend for a --storage token.

        Raises:
            UnsupportedBackendError: If no backend is registered for it
        """
        storage_type = StorageType.from_token(storage)
        backend = self._backends.get(storage_type)
        if backend is None:
            raise UnsupportedBackendError(
                f"Not implemented: {storage_type.value} is not available for this command"
            )
        logger.debug(f"Selected {storage_type.value} backend")
        return backend

    def __contains__(self, storage: StorageType) -> bool:
        return storage in self._backends
