"""Exception hierarchy for wifi-recon."""


class ReconError(Exception):
    """Base class for every error raised by wifi-recon."""


class LifecycleError(ReconError):
    pass


class AlreadyRunningError(LifecycleError):
    def __init__(self, name: str = "wifi.recon"):
        super().__init__(f"{name} is already running")


class NotRunningError(LifecycleError):
    def __init__(self, name: str = "wifi.recon"):
        super().__init__(f"{name} is not running")


class ConfigurationError(ReconError):
    """The capture device could not be opened or configured."""


class TargetError(ReconError):
    """An attack was requested without a target."""


class TransientIOError(ReconError):
    """A single frame could not be built or written."""


class SerializationError(ReconError):
    """A registry snapshot could not be encoded."""
