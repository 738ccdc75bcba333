"""Unit tests for nft_uploader/dispatcher.py."""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add parent dir to path so nft_uploader is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from nft_uploader.config import AwsConfig, NftStorageConfig
from nft_uploader.dispatcher import Dispatcher
from nft_uploader.errors import (
    AnimationMissingError,
    BackendUploadError,
    InvalidAnimationUrlError,
    InvalidImageUrlError,
    ManifestNotFoundError,
)
from nft_uploader.models.upload import StorageType, UploadResult
from nft_uploader.services.aws import AwsBackend
from nft_uploader.services.base import StorageBackend
from nft_uploader.services.nft_storage import NftStorageBackend
from nft_uploader.services.registry import BackendRegistry

LOGGER_NAME = "tests.dispatcher"


@pytest.fixture
def backend():
    """A spy backend that records every call."""
    spy = MagicMock(spec=StorageBackend)
    spy.upload.return_value = UploadResult("https://host/meta", "https://host/img")
    return spy


@pytest.fixture
def dispatcher(backend):
    registry = BackendRegistry({
        StorageType.PINATA: backend,
        StorageType.NFT_STORAGE: backend,
        StorageType.ARWEAVE: backend,
        StorageType.AWS: AwsBackend(AwsConfig(bucket="my-bucket")),
    })
    return Dispatcher(registry, logger=logging.getLogger(LOGGER_NAME))


@pytest.fixture
def write_asset(tmp_path):
    """Write a manifest (and the image it names) into tmp_path."""

    def _write(manifest: dict, media: tuple[str, ...] = ("0.png",)) -> Path:
        for name in media:
            (tmp_path / name).write_bytes(b"fake media")
        path = tmp_path / "0.json"
        path.write_text(json.dumps(manifest))
        return path

    return _write


def completion_logged(caplog) -> bool:
    return any("Upload complete" in r.getMessage() for r in caplog.records)


class TestUploadToStorage:
    """Tests for the full manifest plus local media flow."""

    def test_uploads_and_reports(self, dispatcher, backend, write_asset, tmp_path, caplog):
        """A complete result is returned and reported."""
        manifest = {"name": "Number #0", "image": "0.png"}
        path = write_asset(manifest)

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            result = dispatcher.upload_to_storage(path, "pinata")

        assert result == UploadResult("https://host/meta", "https://host/img")
        assert completion_logged(caplog)

        image, animation, manifest_bytes, index = backend.upload.call_args.args
        assert image == tmp_path / "0.png"
        assert animation is None
        assert json.loads(manifest_bytes) == manifest
        assert index == "0"

    def test_missing_animation_never_invokes_backend(self, dispatcher, backend, write_asset):
        """AnimationMissing aborts before any backend call."""
        path = write_asset({"image": "0.png", "animation_url": "0.mp4"})

        with pytest.raises(AnimationMissingError):
            dispatcher.upload_to_storage(path, "pinata")

        backend.upload.assert_not_called()

    def test_missing_manifest(self, dispatcher, backend, tmp_path):
        """A missing manifest aborts with the loader error."""
        with pytest.raises(ManifestNotFoundError):
            dispatcher.upload_to_storage(tmp_path / "7.json", "pinata")

        backend.upload.assert_not_called()

    def test_bare_index_is_normalized(self, dispatcher, backend, write_asset, tmp_path):
        """A file given without .json still finds its manifest."""
        write_asset({"image": "0.png"})

        result = dispatcher.upload_to_storage(tmp_path / "0", "pinata")

        assert result is not None
        backend.upload.assert_called_once()

    def test_incomplete_with_animation_not_reported(
        self, dispatcher, backend, write_asset, caplog
    ):
        """With an animation, a result lacking animationLink is not complete."""
        path = write_asset(
            {"image": "0.png", "animation_url": "0.mp4"}, media=("0.png", "0.mp4")
        )
        backend.upload.return_value = UploadResult(
            "https://host/meta", "https://host/img", None
        )

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            result = dispatcher.upload_to_storage(path, "pinata")

        assert result is None
        assert not completion_logged(caplog)
        assert "animationLink" in caplog.text

    def test_complete_with_animation(self, dispatcher, backend, write_asset, tmp_path):
        """All three links make an animation upload complete."""
        path = write_asset(
            {"image": "0.png", "animation_url": "0.mp4"}, media=("0.png", "0.mp4")
        )
        expected = UploadResult("https://host/meta", "https://host/img", "https://host/anim")
        backend.upload.return_value = expected

        assert dispatcher.upload_to_storage(path, "pinata") == expected
        assert backend.upload.call_args.args[1] == tmp_path / "0.mp4"

    def test_empty_link_not_reported(self, dispatcher, backend, write_asset, caplog):
        """An empty manifest link is never a success."""
        path = write_asset({"image": "0.png"})
        backend.upload.return_value = UploadResult("", "https://host/img")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            assert dispatcher.upload_to_storage(path, "pinata") is None
        assert not completion_logged(caplog)

    def test_backend_error_is_logged(self, dispatcher, backend, write_asset, caplog):
        """Backend failures are logged and end the command."""
        path = write_asset({"image": "0.png"})
        backend.upload.side_effect = BackendUploadError("401 Unauthorized")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            result = dispatcher.upload_to_storage(path, "pinata")

        assert result is None
        assert "Error uploading: 401 Unauthorized" in caplog.text

    def test_unknown_storage_uses_arweave(self, backend, write_asset):
        """An unrecognized --storage token is served by Arweave."""
        arweave = MagicMock(spec=StorageBackend)
        arweave.upload.return_value = UploadResult("https://arweave.net/m", "https://arweave.net/i")
        dispatcher = Dispatcher(BackendRegistry({
            StorageType.ARWEAVE: arweave,
            StorageType.PINATA: backend,
        }))
        path = write_asset({"image": "0.png"})

        assert dispatcher.upload_to_storage(path, "filecoin") is not None
        arweave.upload.assert_called_once()
        backend.upload.assert_not_called()


class TestUploadMediaToStorage:
    """Tests for the media-only flow."""

    def test_nft_storage_media(self, dispatcher, backend, tmp_path, caplog):
        """The media file is passed straight to the backend."""
        media = tmp_path / "0.png"
        media.write_bytes(b"fake media")
        backend.upload_media.return_value = "https://cid.ipfs.nftstorage.link"

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            result = dispatcher.upload_media_to_storage(media, "nft-storage")

        assert result == UploadResult("https://cid.ipfs.nftstorage.link")
        backend.upload_media.assert_called_once_with(media)
        assert completion_logged(caplog)

    def test_aws_not_implemented(self, dispatcher, tmp_path, caplog):
        """Only NFT.Storage uploads media on its own."""
        media = tmp_path / "0.png"
        media.write_bytes(b"fake media")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            result = dispatcher.upload_media_to_storage(media, "aws")

        assert result is None
        assert "Not implemented" in caplog.text
        assert not completion_logged(caplog)


class TestUploadMetadataToStorage:
    """Tests for the metadata-only flow."""

    def test_hosted_manifest(self, dispatcher, backend, write_asset):
        """A manifest with hosted media is uploaded as is."""
        manifest = {"image": "https://example.com/0.png", "name": "Number #0"}
        path = write_asset(manifest, media=())
        backend.upload_metadata.return_value = UploadResult(
            "https://meta.ipfs.nftstorage.link", "https://example.com/0.png"
        )

        result = dispatcher.upload_metadata_to_storage(path, "nft-storage")

        assert result.link == "https://meta.ipfs.nftstorage.link"
        backend.upload_metadata.assert_called_once_with(manifest)

    def test_animation_alias_on_nft_storage(self, write_asset, caplog):
        """A hosted "animation" field satisfies the completeness check."""
        path = write_asset(
            {"image": "https://a.example/0.png", "animation": "https://a.example/0.mp4"},
            media=(),
        )
        registry = BackendRegistry({
            StorageType.NFT_STORAGE: NftStorageBackend(NftStorageConfig(api_key="key")),
        })
        dispatcher = Dispatcher(registry, logger=logging.getLogger(LOGGER_NAME))
        response = MagicMock()
        response.raise_for_status.return_value = None
        response.json.return_value = {"ok": True, "value": {"cid": "metacid"}}

        with patch("nft_uploader.services.nft_storage.requests.post", return_value=response):
            with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
                result = dispatcher.upload_metadata_to_storage(path, "nft-storage")

        assert result == UploadResult(
            "https://metacid.ipfs.nftstorage.link",
            "https://a.example/0.png",
            "https://a.example/0.mp4",
        )
        assert completion_logged(caplog)

    def test_bare_filename_image(self, dispatcher, backend, write_asset):
        """A bare filename image fails before any backend call."""
        path = write_asset({"image": "0.png"})

        with pytest.raises(InvalidImageUrlError):
            dispatcher.upload_metadata_to_storage(path, "nft-storage")

        backend.upload_metadata.assert_not_called()

    def test_malformed_animation(self, dispatcher, backend, write_asset):
        """A malformed animation_url fails before any backend call."""
        path = write_asset(
            {"image": "https://example.com/0.png", "animation_url": "not a url"},
            media=(),
        )

        with pytest.raises(InvalidAnimationUrlError):
            dispatcher.upload_metadata_to_storage(path, "nft-storage")

        backend.upload_metadata.assert_not_called()

    def test_aws_not_implemented(self, dispatcher, write_asset, caplog):
        """AWS has no metadata-only upload."""
        path = write_asset({"image": "https://example.com/0.png"}, media=())

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            assert dispatcher.upload_metadata_to_storage(path, "aws") is None
        assert "Not implemented" in caplog.text
