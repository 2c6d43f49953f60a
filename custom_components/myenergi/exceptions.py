"""Exceptions raised by the myenergi API client."""


class MyEnergiError(Exception):
    """Base class for myenergi errors."""


class MyEnergiApiError(MyEnergiError):
    """Error talking to the myenergi API."""


class MyEnergiInvalidUrlError(MyEnergiApiError):
    """The API URL could not be built from the configuration."""


class MyEnergiConnectionError(MyEnergiApiError):
    """Transport level failure (DNS, TCP, TLS, timeout)."""


class MyEnergiAuthError(MyEnergiApiError):
    """Digest authentication was rejected."""


class MyEnergiResponseError(MyEnergiApiError):
    """The API answered with a non-2xx status or an unreadable body."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class MyEnergiCommandError(MyEnergiApiError):
    """A command was accepted by HTTP but refused by the device."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class MyEnergiDeviceNotFoundError(MyEnergiError):
    """No device with the requested serial number is in the topology cache."""

    def __init__(self, serial_number):
        super().__init__(f"Unknown device: {serial_number}")
        self.serial_number = serial_number
