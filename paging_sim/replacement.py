"""FIFO page replacement"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import AddressOutOfRange

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaultOutcome:
    """What a page fault did: the frame assigned and the page evicted, if any"""
    virtual_page: int
    frame: int
    evicted_page: Optional[int] = None

    @property
    def evicted(self):
        return self.evicted_page is not None


def handle_page_fault(table, virtual_page):
    """Load `virtual_page` using FIFO replacement and return (new_table, FaultOutcome)"""
    if not 0 <= virtual_page < len(table):
        raise AddressOutOfRange(
            f"Virtual page {virtual_page} is out of range (0 .. {len(table) - 1})"
        )
    if table[virtual_page].present:
        raise ValueError(f"Page {virtual_page} is already present")

    updated = table.copy()
    assigned_frames = updated.present_count()
    evicted_page = None

    if assigned_frames < updated.total_frames:
        # There's free space; the next frame is the number of frames in use
        new_frame = assigned_frames
        if new_frame in updated.used_frames():
            # Manual edits can leave holes, fall back to the lowest free frame
            new_frame = min(updated.free_frames())
    else:
        # Evict the oldest resident page and reuse its frame
        evicted_page = updated.fifo_queue.popleft()
        victim = updated.entries[evicted_page]
        new_frame = victim.frame
        victim.present = False
        victim.frame = None
        victim.arrival_order = -1

    entry = updated.entries[virtual_page]
    entry.present = True
    entry.frame = new_frame
    entry.arrival_order = len(updated.fifo_queue)
    updated.fifo_queue.append(virtual_page)
    updated.renumber_arrivals()

    if evicted_page is None:
        log.info("Page fault: virtual page %d loaded into free frame %d",
                 virtual_page, new_frame)
    else:
        log.info("Page fault: virtual page %d replaced page %d in frame %d",
                 virtual_page, evicted_page, new_frame)
    return updated, FaultOutcome(virtual_page, new_frame, evicted_page)
