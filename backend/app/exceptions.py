"""Domain exceptions raised by the service layer."""


class PickteumError(Exception):
    """Base exception for application errors."""


class ArticleValidationError(PickteumError):
    """Article fields violate a lifecycle or required-field rule."""


class UnknownCategoryError(PickteumError):
    """A category name or id did not match any category."""

    def __init__(self, category: str):
        super().__init__(f"Unknown category: {category}")
        self.category = category


class DuplicateSlugError(PickteumError):
    """An explicit slug is already used by another article."""

    def __init__(self, slug: str):
        super().__init__(f"Slug already exists: {slug}")
        self.slug = slug


class MediaValidationError(PickteumError):
    """Uploaded file is not an acceptable image."""


class ShortLinkError(PickteumError):
    """No free short code could be found."""
