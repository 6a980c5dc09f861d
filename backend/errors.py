"""Exceptions raised inside the catalog discovery engine."""


class CatalogError(Exception):
    """Base error for the catalog engine."""


class StorageError(CatalogError):
    """The local key/value store refused a write."""


class StorageQuotaError(StorageError):
    """A write would push the store past its byte quota."""


class SourceFormatError(CatalogError):
    """A catalog source returned something other than a JSON array."""


class DuplicateProductError(CatalogError):
    """An edit would leave two products with the same name."""


class AdviceUnavailableError(CatalogError):
    """The advice endpoint failed or returned an unusable body."""
