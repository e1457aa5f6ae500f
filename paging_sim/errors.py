"""Exceptions raised by the paging simulator core"""


class PagingError(Exception):
    """Base class for every simulator error"""


class ConfigurationError(PagingError):
    """Memory sizes are invalid or inconsistent"""


class InvalidHexAddress(PagingError, ValueError):
    """User input could not be parsed as a hexadecimal address"""


class AddressOutOfRange(PagingError):
    """Address falls outside the virtual or physical space"""


class NoMappingFound(PagingError):
    """No resident virtual page owns the requested physical frame"""


class EncodingOverflow(PagingError):
    """A value does not fit in the requested number of bits"""


class BinaryGroupingError(PagingError):
    """Binary string cannot be split into 4-bit hex groups"""


class InvalidEdit(PagingError):
    """Manual page table edit was rejected"""
