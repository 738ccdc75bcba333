"""Upload orchestration for the three storage commands."""

import logging
from pathlib import Path

from .errors import BackendUploadError, IncompleteUploadError, UnsupportedBackendError
from .extractors.manifest import encode_manifest, load_manifest
from .models.upload import Asset, StorageType, UploadResult
from .processors.assets import AssetResolver
from .services.registry import BackendRegistry
from .utils.identifiers import manifest_filename

module_logger = logging.getLogger(__name__)


class Dispatcher:
    """Orchestrates load, resolve, invoke and report for one invocation.

    Validation errors (missing manifest, missing media, malformed URLs) are
    raised before any backend is called. Backend failures, including
    incomplete results, are logged and end the command without raising.
    """

    def __init__(
        self,
        registry: BackendRegistry,
        logger: logging.Logger | None = None,
        resolver: AssetResolver | None = None,
    ) -> None:
        self._registry = registry
        self._logger = logger or module_logger
        self._resolver = resolver or AssetResolver()

    def upload_to_storage(
        self, file: Path | str, storage: StorageType | str
    ) -> UploadResult | None:
        """Upload local media and its manifest.

        Returns the result when the upload is reported complete, None when
        the backend failed.
        """
        directory, asset = _asset_for(file)
        manifest = load_manifest(directory, manifest_filename(asset.index))
        assets = self._resolver.resolve_local(directory, manifest, asset)
        manifest_bytes = encode_manifest(manifest)

        try:
            backend = self._registry.get(storage)
            result = backend.upload(
                assets.image, assets.animation, manifest_bytes, asset.index
            )
            return self._report(result, assets.has_animation)
        except (UnsupportedBackendError, BackendUploadError) as e:
            self._logger.error(f"Error uploading: {e}")
            return None

    def upload_media_to_storage(
        self, file: Path | str, storage: StorageType | str
    ) -> UploadResult | None:
        """Upload a single media file, with no manifest involved."""
        try:
            backend = self._registry.get(storage)
            link = backend.upload_media(Path(file))
            if not link:
                raise IncompleteUploadError(f"No link returned for {file}")
        except (UnsupportedBackendError, BackendUploadError) as e:
            self._logger.error(f"Error uploading: {e}")
            return None

        self._logger.info(f"Upload complete: {dict(link=link)}")
        return UploadResult(link)

    def upload_metadata_to_storage(
        self, file: Path | str, storage: StorageType | str
    ) -> UploadResult | None:
        """Upload a manifest whose media is already hosted."""
        directory, asset = _asset_for(file)
        manifest = load_manifest(directory, manifest_filename(asset.index))
        assets = self._resolver.resolve_hosted(manifest, asset)

        try:
            backend = self._registry.get(storage)
            result = backend.upload_metadata(manifest)
            return self._report(result, assets.has_animation)
        except (UnsupportedBackendError, BackendUploadError) as e:
            self._logger.error(f"Error uploading: {e}")
            return None

    def _report(self, result: UploadResult, has_animation: bool) -> UploadResult:
        """Log the completion record, or fail if links are missing."""
        missing = result.missing_links(has_animation)
        if missing:
            raise IncompleteUploadError(
                f"Upload incomplete, missing {', '.join(missing)}: {result.to_dict()}"
            )
        self._logger.info(f"Upload complete: {result.to_dict()}")
        return result


def _asset_for(file: Path | str) -> tuple[Path, Asset]:
    """Split a manifest path into its directory and asset."""
    path = Path(file)
    return path.parent, Asset(index=path.stem)
