"""Binary and hexadecimal helpers used to display addresses and page indices"""

import numbers
import re

from .errors import (
    BinaryGroupingError,
    ConfigurationError,
    EncodingOverflow,
    InvalidHexAddress,
)

HEX_ADDRESS_RE = re.compile(r"^(-)?(?:0[xX])?([0-9a-fA-F]+)$")


def to_binary(value, width):
    """Convert decimal to binary with exactly `width` bits"""
    if width < 0:
        raise EncodingOverflow(f"Bit width must be non-negative, got {width}")
    if value < 0 or value >= 2 ** width:
        raise EncodingOverflow(f"Value {value} does not fit in {width} bits")
    if width == 0:
        return ""
    return format(value, "b").zfill(width)


def binary_to_decimal(binary_str):
    """Convert binary string to decimal"""
    return int(binary_str, 2) if binary_str else 0


def binary_to_hex(binary_str):
    """Convert a binary string to uppercase hex, one digit per 4-bit group"""
    if len(binary_str) % 4 != 0:
        raise BinaryGroupingError(
            f"Binary string of length {len(binary_str)} is not a multiple of 4"
        )
    if set(binary_str) - {"0", "1"}:
        raise BinaryGroupingError(f"'{binary_str}' is not a binary string")

    # Group from the most significant bit
    groups = [binary_str[i:i + 4] for i in range(0, len(binary_str), 4)]
    return "".join(format(int(group, 2), "X") for group in groups)


def hex_to_binary(hex_str, width):
    """Parse a hex string (0x prefix optional) into `width`-bit binary"""
    return to_binary(parse_hex_address(hex_str), width)


def to_hex(value, bits):
    """Format value as 0x-prefixed hex, padded to cover `bits` bits"""
    padded_bits = -(-bits // 4) * 4
    # Zero bits still show one digit
    padded_bits = max(padded_bits, 4)
    return "0x" + binary_to_hex(to_binary(value, padded_bits))


def parse_hex_address(text):
    """Parse a user supplied hex address such as 0x2A or 2A"""
    if not isinstance(text, str):
        raise InvalidHexAddress(f"Expected a hex string, got {text!r}")

    match = HEX_ADDRESS_RE.match(text.strip())
    if match is None:
        raise InvalidHexAddress(f"'{text}' is not a valid hexadecimal address")

    sign, digits = match.groups()
    value = int(digits, 16)
    return -value if sign else value


def exact_log2(value):
    """Return log2(value), which must be a positive power of two"""
    if not isinstance(value, numbers.Integral) or isinstance(value, bool):
        raise ConfigurationError(f"{value!r} is not a whole number")
    value = int(value)
    if value <= 0 or value & (value - 1) != 0:
        raise ConfigurationError(f"{value} is not a power of two")
    return value.bit_length() - 1


def offset_bits(page_bytes):
    return exact_log2(page_bytes)


def page_number_bits(space_bytes, page_bytes):
    if space_bytes % page_bytes != 0:
        raise ConfigurationError(
            f"Page size {page_bytes} does not divide space of {space_bytes} bytes"
        )
    return exact_log2(space_bytes // page_bytes)


def address_bits(space_bytes, page_bytes):
    return page_number_bits(space_bytes, page_bytes) + offset_bits(page_bytes)


def split_binary(binary_str, index_bits):
    """Split an address into its (page index, offset) binary segments"""
    return binary_str[:index_bits], binary_str[index_bits:]
