"""Exception hierarchy for AniOrder."""


class AniOrderError(Exception):
    """Base exception for AniOrder errors."""

    pass


class ConfigurationError(AniOrderError, ValueError):
    """Invalid user-supplied configuration, raised before any network activity."""

    pass


class InvalidMediaReferenceError(ConfigurationError):
    """Root reference is neither an identifier nor a catalog URL."""

    pass


class InvalidRelationTypeError(ConfigurationError):
    """Unknown relation type in the relation allow-list."""

    pass


class InvalidMediaTypeError(ConfigurationError):
    """Unknown media type filter."""

    pass


class CatalogError(AniOrderError):
    """Base exception for catalog API errors."""

    pass


class CatalogResponseError(CatalogError):
    """Catalog answered with a body that is not usable for one identifier."""

    def __init__(self, media_id: int, message: str):
        super().__init__(f"Unusable catalog response for media {media_id}: {message}")
        self.media_id = media_id


class CatalogTransportError(CatalogError):
    """Catalog endpoint could not be reached."""

    pass
