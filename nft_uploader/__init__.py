"""Upload NFT media and metadata to interchangeable storage backends."""

__version__ = "1.1.0"
