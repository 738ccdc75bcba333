"""Exception types raised while uploading NFT assets."""


class UploadError(Exception):
    """Base class for every error raised by the uploader."""


class WalletError(UploadError):
    """The wallet keypair file could not be loaded."""


class ManifestNotFoundError(UploadError):
    """The manifest JSON file does not exist."""


class ManifestReadError(UploadError):
    """The manifest file exists but could not be read."""


class ManifestParseError(UploadError):
    """The manifest file is not a valid JSON object."""


class ImageMissingError(UploadError):
    """The manifest's image does not point at an existing local file."""


class AnimationMissingError(UploadError):
    """The manifest's animation_url does not point at an existing local file."""


class InvalidImageUrlError(UploadError):
    """The manifest's image is absent or not a well-formed URL."""


class InvalidAnimationUrlError(UploadError):
    """The manifest's animation_url is not a well-formed URL."""


class UnsupportedBackendError(UploadError):
    """The selected backend has no handling rule for the current command."""


class BackendUploadError(UploadError):
    """A storage backend failed to upload (auth, network, signing...)."""


class IncompleteUploadError(BackendUploadError):
    """A backend returned a result with required links missing."""
