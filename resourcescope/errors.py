"""Failures raised out of a scope."""


class ScopedResourceError(RuntimeError):
    pass


class AcquisitionError(ScopedResourceError):
    """The resource could not be opened, created, decoded or allocated."""


class ArchiveError(AcquisitionError):
    def __init__(self, status: int | None, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class PlatformSignalError(ScopedResourceError):
    """A warning emitted while a scope was active, raised as a failure."""

    def __init__(self, warning: Warning):
        super().__init__(f'{type(warning).__name__}: {warning}')
        self.warning = warning
        self.category = type(warning)
