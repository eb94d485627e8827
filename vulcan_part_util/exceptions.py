"""
Custom exceptions for the Vulcan partition table utility.

Advisory findings (checksum, contiguity, geometry) are not exceptions; they are
collected as Violation values on the analysis report.
"""


class VulcanError(Exception):
    """Base exception for all Vulcan partition table errors."""
    pass


class OutOfRangeError(VulcanError, IndexError):
    """Field access past the end of a buffer."""
    pass


class TableAssertionError(VulcanError):
    """
    Fatal structural fault.

    Raised when a block cannot be a partition table of this format, or when
    the fixed layout and the code disagree. Processing of the block stops.
    """

    def __init__(self, message: str, violation=None):
        super().__init__(message)
        self.violation = violation


class MagicMismatchError(TableAssertionError):
    """Magic number is not 0xAEAE."""
    pass


class DiskError(VulcanError):
    """Error reading/writing the partition table sector."""
    pass


class ConfigError(VulcanError):
    """Invalid drive configuration or profile file."""
    pass
