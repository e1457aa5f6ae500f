"""Single-level paged virtual memory simulator with FIFO page replacement"""

from .config import MemoryConfig
from .errors import (
    AddressOutOfRange,
    BinaryGroupingError,
    ConfigurationError,
    EncodingOverflow,
    InvalidEdit,
    InvalidHexAddress,
    NoMappingFound,
    PagingError,
)
from .page_table import (
    PageTable,
    PageTableEntry,
    apply_manual_edit,
    find_inconsistencies,
    generate,
    random_mapping,
    reorder_load_queue,
    swap_physical_slots,
)
from .replacement import FaultOutcome, handle_page_fault
from .translator import (
    Direction,
    TranslationResult,
    physical_to_virtual,
    translate,
    virtual_to_physical,
)

__all__ = [
    "AddressOutOfRange",
    "BinaryGroupingError",
    "ConfigurationError",
    "Direction",
    "EncodingOverflow",
    "FaultOutcome",
    "InvalidEdit",
    "InvalidHexAddress",
    "MemoryConfig",
    "NoMappingFound",
    "PageTable",
    "PageTableEntry",
    "PagingError",
    "TranslationResult",
    "apply_manual_edit",
    "find_inconsistencies",
    "generate",
    "handle_page_fault",
    "physical_to_virtual",
    "random_mapping",
    "reorder_load_queue",
    "swap_physical_slots",
    "translate",
    "virtual_to_physical",
]
