#errors.py - Exceptions that cross the package boundary.


class CntxtMapError(Exception):
    """Base class for errors raised by cntxtmap."""


class ScanRootError(CntxtMapError):
    """The scan root is missing or is not a directory."""
