"""Memory configuration and the bit widths derived from it"""

import numbers
from dataclasses import dataclass, fields

from .codec import exact_log2
from .errors import ConfigurationError

KB = 1024

# Defaults shown in the sidebar
DEFAULT_VIRTUAL_KB = 16
DEFAULT_PAGE_KB = 4


@dataclass(frozen=True)
class MemoryConfig:
    """Sizes of the virtual space, physical space and a page, in bytes"""

    virtual_bytes: int
    physical_bytes: int
    page_bytes: int

    def __post_init__(self):
        # numpy integers and other Integral sizes are stored as plain ints
        for field in fields(self):
            value = getattr(self, field.name)
            if _is_whole_number(value):
                object.__setattr__(self, field.name, int(value))

    @classmethod
    def from_kilobytes(cls, virtual_kb, page_kb, physical_kb=None):
        """Build a config from KB sizes; physical memory defaults to half of virtual"""
        if physical_kb is None:
            physical_kb = virtual_kb // 2
        return cls(
            virtual_bytes=int(virtual_kb * KB),
            physical_bytes=int(physical_kb * KB),
            page_bytes=int(page_kb * KB),
        )

    def problems(self):
        """Return a list of human readable problems with this configuration"""
        sizes = {
            "Virtual space": self.virtual_bytes,
            "Physical space": self.physical_bytes,
            "Page size": self.page_bytes,
        }
        not_whole = [name for name, size in sizes.items() if not _is_whole_number(size)]
        if not_whole:
            return [f"{name} must be a whole number of bytes." for name in not_whole]

        non_positive = [name for name, size in sizes.items() if size <= 0]
        if non_positive:
            return [f"{name} must be greater than zero." for name in non_positive]

        problems = []
        if self.physical_bytes * 2 != self.virtual_bytes:
            problems.append("Physical space must be exactly half of virtual space.")

        if not _is_power_of_two(self.page_bytes):
            problems.append("Page size must be a power of 2.")

        # Page size has to divide both spaces into a power-of-two number of pages
        for name, space in (("Virtual space", self.virtual_bytes),
                            ("Physical space", self.physical_bytes)):
            if space % self.page_bytes != 0:
                problems.append(f"{name} must be divisible by the page size.")
            elif not _is_power_of_two(space // self.page_bytes):
                problems.append(f"{name} must hold a power-of-2 number of pages.")

        return problems

    def validate(self):
        """Raise ConfigurationError listing every problem found"""
        problems = self.problems()
        if problems:
            raise ConfigurationError(" ".join(problems))
        return self

    @property
    def total_pages(self):
        return self.virtual_bytes // self.page_bytes

    @property
    def total_frames(self):
        return self.physical_bytes // self.page_bytes

    @property
    def offset_bits(self):
        return exact_log2(self.page_bytes)

    @property
    def page_bits(self):
        return exact_log2(self.total_pages)

    @property
    def frame_bits(self):
        return exact_log2(self.total_frames)

    @property
    def virtual_address_bits(self):
        return self.page_bits + self.offset_bits

    @property
    def physical_address_bits(self):
        return self.frame_bits + self.offset_bits

    @property
    def offset_mask(self):
        return (1 << self.offset_bits) - 1

    @property
    def max_virtual_address(self):
        return self.virtual_bytes - 1

    @property
    def max_physical_address(self):
        return self.physical_bytes - 1


def _is_whole_number(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_power_of_two(value):
    return value > 0 and value & (value - 1) == 0
