"""Upload data models."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageType(str, Enum):
    """Storage backends selectable with --storage."""

    ARWEAVE = "arweave"
    AWS = "aws"
    IPFS = "ipfs"
    PINATA = "pinata"
    NFT_STORAGE = "nft-storage"

    @classmethod
    def from_token(cls, token: "str | StorageType") -> "StorageType":
        """Map a --storage token to a StorageType.

        Arweave is the default backend: unrecognized tokens resolve to it.
        """
        if isinstance(token, StorageType):
            return token
        try:
            return cls(token)
        except ValueError:
            logger.warning(
                f"Unrecognized storage '{token}', defaulting to {cls.ARWEAVE.value}"
            )
            return cls.ARWEAVE


@dataclass(frozen=True)
class Asset:
    """The unit of work: a manifest identified by its base filename."""

    index: str


@dataclass(frozen=True)
class ResolvedAssets:
    """Concrete media sources for an upload.

    Local paths in local-file mode, URL strings in hosted-URL mode.
    """

    image: Path | str
    animation: Path | str | None = None

    @property
    def has_animation(self) -> bool:
        return self.animation is not None


@dataclass(frozen=True)
class UploadResult:
    """Links returned by a backend upload."""

    link: str | None
    image_link: str | None = None
    animation_link: str | None = None

    def missing_links(self, has_animation: bool) -> list[str]:
        """Names of the links a complete result still lacks."""
        required = {"link": self.link, "imageLink": self.image_link}
        if has_animation:
            required["animationLink"] = self.animation_link
        return [name for name, value in required.items() if not value]

    def is_complete(self, has_animation: bool) -> bool:
        """Check whether every link needed for the request is present."""
        return not self.missing_links(has_animation)

    def to_dict(self) -> dict:
        """Convert to the completion record logged on success."""
        return {
            "link": self.link,
            "imageLink": self.image_link,
            "animationLink": self.animation_link,
        }
