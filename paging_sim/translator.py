"""Address translation between the virtual and physical spaces"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .codec import parse_hex_address, split_binary, to_binary, to_hex
from .errors import AddressOutOfRange, ConfigurationError, NoMappingFound
from .replacement import handle_page_fault

log = logging.getLogger(__name__)


class Direction(enum.Enum):
    VIRTUAL_TO_PHYSICAL = "v2p"
    PHYSICAL_TO_VIRTUAL = "p2v"

    @property
    def label(self):
        if self is Direction.VIRTUAL_TO_PHYSICAL:
            return "Virtual to Physical"
        return "Physical to Virtual"


@dataclass(frozen=True)
class TranslationResult:
    """Both addresses of a translation in binary and hex, plus any page fault"""
    direction: Direction
    virtual_address: int
    physical_address: int
    offset: int
    virtual_binary: str
    physical_binary: str
    virtual_parts: Tuple[str, str]
    physical_parts: Tuple[str, str]
    virtual_hex: str
    physical_hex: str
    faulted: bool
    evicted_page: Optional[int]
    assigned_frame: int
    table: Any

    @property
    def virtual_page(self):
        return self.virtual_address >> self.table.config.offset_bits

    @property
    def converted_hex(self):
        """Hex of the address that was derived, not the one that was entered"""
        if self.direction is Direction.VIRTUAL_TO_PHYSICAL:
            return self.physical_hex
        return self.virtual_hex

    @property
    def original_hex(self):
        if self.direction is Direction.VIRTUAL_TO_PHYSICAL:
            return self.virtual_hex
        return self.physical_hex

    def describe(self):
        """Message for the page fault log, or None when no fault happened"""
        if not self.faulted:
            return None
        if self.evicted_page is None:
            return (f"Page fault: Virtual page {self.virtual_page} loaded into "
                    f"free frame {self.assigned_frame} (no eviction needed)")
        return (f"Page fault: Virtual page {self.virtual_page} replaced page "
                f"{self.evicted_page} in frame {self.assigned_frame}")


def _check_table(config, table):
    if table.config != config:
        raise ConfigurationError("Page table was generated for a different configuration")


def _build_result(direction, config, table, virtual_address, physical_address,
                  faulted=False, evicted_page=None):
    virtual_binary = to_binary(virtual_address, config.virtual_address_bits)
    physical_binary = to_binary(physical_address, config.physical_address_bits)
    return TranslationResult(
        direction=direction,
        virtual_address=virtual_address,
        physical_address=physical_address,
        offset=virtual_address & config.offset_mask,
        virtual_binary=virtual_binary,
        physical_binary=physical_binary,
        virtual_parts=split_binary(virtual_binary, config.page_bits),
        physical_parts=split_binary(physical_binary, config.frame_bits),
        virtual_hex=to_hex(virtual_address, config.virtual_address_bits),
        physical_hex=to_hex(physical_address, config.physical_address_bits),
        faulted=faulted,
        evicted_page=evicted_page,
        assigned_frame=physical_address >> config.offset_bits,
        table=table,
    )


def virtual_to_physical(config, table, address):
    """Translate a virtual address, handling a page fault with FIFO if needed"""
    _check_table(config, table)
    if not 0 <= address < config.virtual_bytes:
        raise AddressOutOfRange(
            f"Address must be between 0x0 and 0x{config.max_virtual_address:X}"
        )

    # Split address into page index and offset
    virtual_page = address >> config.offset_bits
    offset = address & config.offset_mask

    faulted = False
    evicted_page = None
    entry = table[virtual_page]
    if not entry.present:
        faulted = True
        table, outcome = handle_page_fault(table, virtual_page)
        evicted_page = outcome.evicted_page
        frame = outcome.frame
    else:
        frame = entry.frame

    physical_address = (frame << config.offset_bits) | offset
    log.debug("Translated virtual 0x%X to physical 0x%X", address, physical_address)
    return _build_result(Direction.VIRTUAL_TO_PHYSICAL, config, table, address,
                         physical_address, faulted, evicted_page)


def physical_to_virtual(config, table, address):
    """Find the virtual address currently mapped to a physical address"""
    _check_table(config, table)
    if not 0 <= address < config.physical_bytes:
        raise AddressOutOfRange(
            f"Address must be between 0x0 and 0x{config.max_physical_address:X}"
        )

    physical_frame = address >> config.offset_bits
    offset = address & config.offset_mask

    # Find which virtual page maps to this physical frame
    owner = table.owner_of(physical_frame)
    if owner is None:
        raise NoMappingFound(f"No virtual page maps to physical frame {physical_frame}")

    virtual_address = (owner.virtual_page << config.offset_bits) | offset
    return _build_result(Direction.PHYSICAL_TO_VIRTUAL, config, table,
                         virtual_address, address)


def translate(direction, address_hex, config, table):
    """Parse a hex address and translate it in the given direction"""
    direction = Direction(direction)
    address = parse_hex_address(address_hex)
    if direction is Direction.VIRTUAL_TO_PHYSICAL:
        return virtual_to_physical(config, table, address)
    return physical_to_virtual(config, table, address)
