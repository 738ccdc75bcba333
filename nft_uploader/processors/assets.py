"""Asset resolution for local media and hosted media."""

import logging
from pathlib import Path

from ..errors import (
    AnimationMissingError,
    ImageMissingError,
    InvalidAnimationUrlError,
    InvalidImageUrlError,
)
from ..models.upload import Asset, ResolvedAssets
from ..utils.identifiers import is_valid_url

logger = logging.getLogger(__name__)

# Manifest fields that may reference the animation, in lookup order
ANIMATION_FIELDS = ("animation_url", "animation")


def animation_reference(manifest: dict) -> str | None:
    """Return the manifest's animation reference, if any."""
    for field in ANIMATION_FIELDS:
        value = manifest.get(field)
        if value:
            return str(value)
    return None


class AssetResolver:
    """Resolves the image and animation sources referenced by a manifest.

    Local-file mode is used before any media has been hosted: references are
    filenames relative to the manifest directory. Hosted-URL mode is used
    when the manifest already points at uploaded media.
    """

    def resolve_local(
        self, directory: Path | str, manifest: dict, asset: Asset
    ) -> ResolvedAssets:
        """Resolve media files relative to the manifest directory.

        Raises:
            ImageMissingError: If the image is absent or not a regular file
            AnimationMissingError: If a referenced animation is absent or
                not a regular file
        """
        directory = Path(directory)

        image_ref = manifest.get("image")
        if not image_ref:
            raise ImageMissingError(f"No image specified in {asset.index}.json")

        image = directory / str(image_ref)
        if not image.is_file():
            raise ImageMissingError(
                f"Missing file for the image specified in {asset.index}.json"
            )

        animation = None
        animation_ref = animation_reference(manifest)
        if animation_ref is not None:
            animation = directory / animation_ref
            if not animation.is_file():
                raise AnimationMissingError(
                    f"Missing file for the animation_url specified in {asset.index}.json"
                )

        logger.debug(f"Resolved {asset.index}: image={image}, animation={animation}")
        return ResolvedAssets(image=image, animation=animation)

    def resolve_hosted(self, manifest: dict, asset: Asset) -> ResolvedAssets:
        """Validate media URLs already embedded in the manifest.

        Raises:
            InvalidImageUrlError: If the image is absent or not a URL
            InvalidAnimationUrlError: If a present animation_url is not a URL
        """
        image = manifest.get("image")
        if not image or not is_valid_url(image):
            logger.error(f"Invalid url: {image!r}")
            raise InvalidImageUrlError(f"Invalid image specified in {asset.index}.json")

        animation = animation_reference(manifest)
        if animation is not None and not is_valid_url(animation):
            logger.error(f"Invalid url: {animation!r}")
            raise InvalidAnimationUrlError(
                f"Invalid animation_url specified in {asset.index}.json"
            )

        return ResolvedAssets(image=image, animation=animation)
