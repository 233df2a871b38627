"""Exception types raised at the dashboard's external boundaries."""


class DashboardError(Exception):
    """Base class for recoverable dashboard failures."""


class NetworkFailure(DashboardError):
    """A provider request failed, returned a non-success status, or sent garbage."""


class MalformedPayloadError(NetworkFailure):
    """A provider response could not be parsed as structured data."""


class LocationUnavailableError(DashboardError):
    """Device location was denied, unsupported, or never arrived."""


class StorageError(DashboardError):
    """A key-value store write did not reach the backend."""
