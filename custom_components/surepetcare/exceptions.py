"""Exceptions raised by the Sure Petcare API client."""


class SurePetcareError(Exception):
    """Base class for Sure Petcare errors."""


class SurePetcareApiError(SurePetcareError):
    """The API answered with a non-2xx status or an unreadable body."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class SurePetcareInvalidUrlError(SurePetcareApiError):
    """The API URL could not be built from the configuration."""


class SurePetcareConnectionError(SurePetcareApiError):
    """Transport level failure (DNS, TCP, TLS, timeout)."""


class SurePetcareAuthError(SurePetcareApiError):
    """Login was rejected."""


class SurePetcareNotFoundError(SurePetcareError):
    """No object with the requested id is in the topology cache."""

    def __init__(self, kind, object_id):
        super().__init__(f"Unknown {kind}: {object_id}")
        self.kind = kind
        self.object_id = object_id
