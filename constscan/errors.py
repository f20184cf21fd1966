"""Error kinds raised by the scan pipeline."""


class ConstScanError(Exception):
    """Base class for constscan errors."""

    pass


class FatalScanError(ConstScanError):
    """The source tree could not be walked; the whole run is aborted."""

    pass


class FileParseError(ConstScanError):
    """A single file could not be read or parsed.

    Recovered by the coordinator: the file contributes no records and the
    scan carries on with the remaining files.
    """

    def __init__(self, file_path: str, message: str):
        super().__init__(message)
        self.file_path = file_path
        self.message = message
