"""Exception hierarchy for the gallery client."""


class GalleryError(Exception):
    """Base class for all gallery errors."""


class TransportError(GalleryError):
    """The cat API could not be reached or answered with an error status."""


class DecodeError(GalleryError):
    """A response body or a single record could not be decoded."""
