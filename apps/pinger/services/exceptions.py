class PingerError(Exception):
    """Base exception for pinger errors."""
    pass


class AlreadyRunning(PingerError):
    pass


class AlreadyStopped(PingerError):
    pass


class DuplicateTarget(PingerError):
    def __init__(self, url):
        self.url = url
        super().__init__(f"Target already exists: {url}")


class TargetNotFound(PingerError):
    def __init__(self, url):
        self.url = url
        super().__init__(f"Target not found: {url}")


class TargetConfigError(PingerError):
    """Raised when a targets file can't be read, parsed or validated."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class InvalidTarget(TargetConfigError):
    """A single target record failed validation."""
    pass


class ReloadFailed(PingerError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class NetworkFailure(PingerError):
    """Transport-level failure of a single ping. Never leaves the ping loop."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)
