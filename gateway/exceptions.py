"""Custom exception classes for the gateway."""


class GatewayException(Exception):
    """
    Base exception class for all gateway errors.
    """
    pass


class BadRequestError(GatewayException):
    """
    Raised when the request lacks a file name.
    """
    pass


class FileNotInManifestError(GatewayException):
    """
    Raised when the manifest has no entry for the requested file.
    """
    pass


class RangeNotSatisfiableError(GatewayException):
    """
    Raised when a Range header is inverted or reaches past the end of the file.
    """

    def __init__(self, total_size: int, message: str = "Range Not Satisfiable"):
        super().__init__(message)
        self.total_size = total_size


class UpstreamUnavailableError(GatewayException):
    """
    Raised when the manifest cannot be fetched or is not valid JSON.
    """
    pass


class ManifestCorruptError(GatewayException):
    """
    Raised when a manifest entry is malformed or its sizes are inconsistent.
    """
    pass


class ChunkFetchError(GatewayException):
    """
    Raised when a chunk cannot be read completely from the chunk store.
    """
    pass
