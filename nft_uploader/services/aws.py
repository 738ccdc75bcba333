"""AWS S3 storage backend."""

import json
import logging
from pathlib import Path

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from tqdm import tqdm

from ..config import AwsConfig
from ..errors import BackendUploadError
from ..models.upload import StorageType, UploadResult
from ..utils.identifiers import guess_content_type, sanitize_s3_key, with_extension_hint
from .base import StorageBackend, set_media_links

logger = logging.getLogger(__name__)

# Key prefix for every uploaded object
ASSETS_PREFIX = "assets"


class AwsBackend(StorageBackend):
    """Uploads media and manifests to a public S3 bucket."""

    storage_type = StorageType.AWS

    def __init__(self, config: AwsConfig, show_progress: bool = True) -> None:
        self._config = config
        self._show_progress = show_progress
        self._client = None

    @property
    def client(self):
        """Lazy-initialize the S3 client."""
        if self._client is None:
            boto_config = BotoConfig(
                connect_timeout=60,
                read_timeout=300,
                retries={"max_attempts": 3, "mode": "adaptive"},
            )
            self._client = boto3.client(
                "s3",
                region_name=self._config.region,
                config=boto_config,
            )
        return self._client

    def get_public_url(self, key: str) -> str:
        """Generate the public URL for an object in the bucket."""
        return f"https://{self._config.bucket}.s3.amazonaws.com/{key}"

    def upload(
        self,
        image: Path,
        animation: Path | None,
        manifest: bytes,
        index: str,
    ) -> UploadResult:
        if not self._config.bucket:
            raise BackendUploadError("AWS S3 bucket is required (--aws-s3-bucket)")

        image_link = with_extension_hint(self._upload_media(image), image)
        animation_link = (
            with_extension_hint(self._upload_media(animation), animation)
            if animation
            else None
        )

        manifest_json = set_media_links(manifest, image_link, animation_link)
        manifest_key = f"{ASSETS_PREFIX}/{sanitize_s3_key(Path(image).stem)}.json"
        link = self._put_bytes(
            json.dumps(manifest_json).encode("utf-8"),
            manifest_key,
            "application/json",
        )
        logger.info(f"Uploaded manifest: {link}")
        return UploadResult(link, image_link, animation_link)

    def _upload_media(self, media: Path) -> str:
        """Upload a media file and return its public URL."""
        media = Path(media)
        key = f"{ASSETS_PREFIX}/{sanitize_s3_key(media.name)}"

        try:
            size = media.stat().st_size
            with tqdm(
                total=size,
                unit="B",
                unit_scale=True,
                desc=media.name,
                disable=not self._show_progress,
            ) as progress:
                self.client.upload_file(
                    str(media),
                    self._config.bucket,
                    key,
                    ExtraArgs={
                        "ACL": "public-read",
                        "ContentType": guess_content_type(media),
                    },
                    Config=self._config.transfer_config,
                    Callback=progress.update,
                )
        except OSError as e:
            raise BackendUploadError(f"Could not read {media}: {e}") from e
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            raise BackendUploadError(f"S3 error uploading {media.name}: {e}") from e

        url = self.get_public_url(key)
        logger.info(f"Uploaded media {media.name}: {url}")
        return url

    def _put_bytes(self, data: bytes, key: str, content_type: str) -> str:
        """Upload raw bytes and return the public URL."""
        try:
            self.client.put_object(
                Bucket=self._config.bucket,
                Key=key,
                Body=data,
                ACL="public-read",
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise BackendUploadError(f"S3 error uploading {key}: {e}") from e
        return self.get_public_url(key)
