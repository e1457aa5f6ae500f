"""Page table model, generator and manual edits.

A ``PageTable`` bundles the per-page entries with the FIFO load queue so the
two always travel together. Operations in this module never mutate the table
they are given: they copy it, apply the change to the copy and return it.
"""

import copy
import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .codec import to_binary
from .errors import InvalidEdit

log = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "present": "present",
    "arrival_order": "arrival_order",
    "arrivalOrder": "arrival_order",
}


@dataclass
class PageTableEntry:
    """
    One row of the page table.

    - virtual_page: the virtual page number (also the row index).
    - frame: physical frame holding the page, or None when not resident.
    - present: True if the page currently occupies a frame.
    - arrival_order: position in the FIFO load queue, -1 when not resident.
    """
    virtual_page: int
    frame: Optional[int] = None
    present: bool = False
    arrival_order: int = -1


class PageTable:
    """Page table entries plus the FIFO queue of resident pages (oldest first)"""

    def __init__(self, config, entries, fifo_queue):
        self.config = config
        self.entries = list(entries)
        self.fifo_queue = deque(fifo_queue)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, virtual_page):
        if not 0 <= virtual_page < len(self.entries):
            raise IndexError(f"Virtual page {virtual_page} is out of range (0 .. {len(self.entries) - 1})")
        return self.entries[virtual_page]

    def __eq__(self, other):
        if not isinstance(other, PageTable):
            return NotImplemented
        return (self.config == other.config
                and self.entries == other.entries
                and list(self.fifo_queue) == list(other.fifo_queue))

    def __repr__(self):
        return f"PageTable(pages={len(self.entries)}, fifo_queue={list(self.fifo_queue)})"

    def copy(self):
        return PageTable(self.config, copy.deepcopy(self.entries), self.fifo_queue)

    @property
    def total_frames(self):
        return self.config.total_frames

    def present_pages(self):
        return [entry.virtual_page for entry in self.entries if entry.present]

    def present_count(self):
        return sum(1 for entry in self.entries if entry.present)

    def used_frames(self):
        return {entry.frame for entry in self.entries if entry.present}

    def free_frames(self):
        used = self.used_frames()
        return [frame for frame in range(self.total_frames) if frame not in used]

    def owner_of(self, frame):
        """Return the present entry mapped to `frame`, or None"""
        for entry in self.entries:
            if entry.present and entry.frame == frame:
                return entry
        return None

    def virtual_binary(self, virtual_page):
        return to_binary(virtual_page, self.config.page_bits)

    def physical_binary(self, virtual_page):
        """Binary frame index of a page, empty when the page is not resident"""
        entry = self.entries[virtual_page]
        if not entry.present or entry.frame is None:
            return ""
        return to_binary(entry.frame, self.config.frame_bits)

    def renumber_arrivals(self):
        """Make every arrival order match the page's position in the FIFO queue"""
        for entry in self.entries:
            entry.arrival_order = -1
        for position, virtual_page in enumerate(self.fifo_queue):
            self.entries[virtual_page].arrival_order = position


def generate(config):
    """Build the initial page table with the first frames identity-mapped"""
    config.validate()

    total_frames = config.total_frames
    entries = []
    for i in range(config.total_pages):
        resident = i < total_frames
        entries.append(PageTableEntry(
            virtual_page=i,
            frame=i if resident else None,
            present=resident,
            arrival_order=i if resident else -1,
        ))

    log.debug("Generated page table with %d pages and %d frames",
              config.total_pages, total_frames)
    return PageTable(config, entries, range(total_frames))


def random_mapping(config, seed=None):
    """Fill every frame with a randomly chosen virtual page"""
    config.validate()
    rng = np.random.default_rng(seed)

    # Pick which pages are resident and shuffle the frames they land in
    selected_pages = rng.choice(config.total_pages, size=config.total_frames, replace=False)
    frames = rng.permutation(config.total_frames)

    entries = [PageTableEntry(virtual_page=i) for i in range(config.total_pages)]
    for position, (page, frame) in enumerate(zip(selected_pages, frames)):
        entry = entries[int(page)]
        entry.frame = int(frame)
        entry.present = True
        entry.arrival_order = position

    log.info("Random mapping created for %d frames", config.total_frames)
    return PageTable(config, entries, [int(page) for page in selected_pages])


def _check_index(table, index):
    if not 0 <= index < len(table):
        raise InvalidEdit(f"Virtual page {index} is out of range (0 .. {len(table) - 1})")


def apply_manual_edit(table, index, field, value):
    """Override `present` or `arrival_order` of one page, keeping the FIFO queue in sync"""
    _check_index(table, index)
    if field not in EDITABLE_FIELDS:
        raise InvalidEdit(f"Field '{field}' cannot be edited")

    updated = table.copy()
    entry = updated.entries[index]

    if EDITABLE_FIELDS[field] == "present":
        if not isinstance(value, (bool, np.bool_)):
            raise InvalidEdit(f"Present must be True or False, got {value!r}")
        present = bool(value)
        if present and not entry.present:
            free = updated.free_frames()
            if not free:
                log.warning("Rejected marking page %d present: no free frame", index)
                raise InvalidEdit(
                    f"Physical memory has only {updated.total_frames} frames; "
                    "unmark another page first"
                )
            # Auto-assign the lowest numbered free frame
            entry.frame = min(free)
            entry.present = True
            updated.fifo_queue.append(index)
        elif not present and entry.present:
            entry.frame = None
            entry.present = False
            updated.fifo_queue.remove(index)
    else:
        if not entry.present:
            raise InvalidEdit(f"Page {index} is not present and has no arrival order")
        try:
            position = int(value)
        except (TypeError, ValueError):
            raise InvalidEdit(f"Arrival order must be an integer, got {value!r}") from None
        if position < 0:
            raise InvalidEdit("Arrival order must be non-negative")
        # Move the page to the requested position in the queue
        queue = [page for page in updated.fifo_queue if page != index]
        queue.insert(min(position, len(queue)), index)
        updated.fifo_queue = deque(queue)

    updated.renumber_arrivals()
    log.info("Manual edit: page %d %s=%r", index, EDITABLE_FIELDS[field], value)
    return updated


def swap_physical_slots(table, index_a, index_b):
    """Swap the frames claimed by two virtual pages; presence and queue are untouched"""
    _check_index(table, index_a)
    _check_index(table, index_b)

    entry_a = table.entries[index_a]
    entry_b = table.entries[index_b]
    if entry_a.present != entry_b.present:
        raise InvalidEdit("Can only swap frames between two present pages")

    updated = table.copy()
    if index_a != index_b:
        a, b = updated.entries[index_a], updated.entries[index_b]
        a.frame, b.frame = b.frame, a.frame
        log.info("Swapped frames of pages %d and %d", index_a, index_b)
    return updated


def reorder_load_queue(table, order):
    """Replace the FIFO queue order (oldest first) with `order`"""
    order = [int(page) for page in order]
    if sorted(order) != sorted(table.present_pages()):
        raise InvalidEdit("New arrival order must list every present page exactly once")

    updated = table.copy()
    updated.fifo_queue = deque(order)
    updated.renumber_arrivals()
    return updated


def find_inconsistencies(table):
    """Return a list of broken page table invariants (empty when consistent)"""
    problems = []
    present = table.present_pages()

    if len(present) > table.total_frames:
        problems.append(
            f"{len(present)} pages are present but only {table.total_frames} frames exist"
        )

    seen = {}
    for entry in table.entries:
        if not entry.present:
            if entry.frame is not None or entry.arrival_order != -1:
                problems.append(f"Page {entry.virtual_page} is absent but still holds a frame")
            continue
        if entry.frame is None or not 0 <= entry.frame < table.total_frames:
            problems.append(f"Page {entry.virtual_page} has an invalid frame {entry.frame}")
        elif entry.frame in seen:
            problems.append(
                f"Pages {seen[entry.frame]} and {entry.virtual_page} share frame {entry.frame}"
            )
        else:
            seen[entry.frame] = entry.virtual_page

    if sorted(table.fifo_queue) != sorted(present):
        problems.append("FIFO queue does not match the set of present pages")
    else:
        for position, page in enumerate(table.fifo_queue):
            if table.entries[page].arrival_order != position:
                problems.append(f"Page {page} arrival order does not match its queue position")

    return problems
