"""
Exceptions raised by Newsdesk.
"""
import aiohttp


class NewsdeskError(Exception):
    """Base class for Newsdesk errors."""


class ServerError(NewsdeskError):
    """
    The news service answered with a non-success HTTP status.
    """
    def __init__(self, status: int):
        self.status = status
        super().__init__(f"Server error: {status}")


class RequestCancelledError(aiohttp.ClientError):
    """
    A news request was abandoned because its cancellation signal fired.

    Subclasses ``aiohttp.ClientError`` so callers can handle it like any
    other transport failure.
    """


class StorageError(NewsdeskError):
    """
    The storage medium could not be read.
    """
