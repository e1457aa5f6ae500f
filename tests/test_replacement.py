"""Tests for FIFO page replacement.

FIFO evicts the page that has been resident the longest, regardless of how
recently or how often it was used.
"""

import pytest

from paging_sim import (
    AddressOutOfRange,
    FaultOutcome,
    apply_manual_edit,
    find_inconsistencies,
    handle_page_fault,
)


def empty_table(table):
    """Mark every page absent so the next faults fill free frames"""
    for page in table.present_pages():
        table = apply_manual_edit(table, page, "present", False)
    return table


class TestHandlePageFault:
    def test_evicts_oldest_and_reuses_its_frame(self, small_table) -> None:
        table, outcome = handle_page_fault(small_table, 2)

        assert outcome == FaultOutcome(virtual_page=2, frame=0, evicted_page=0)
        assert outcome.evicted
        assert not table[0].present
        assert table[0].frame is None
        assert table[0].arrival_order == -1
        assert table[2].present
        assert table[2].frame == 0
        assert list(table.fifo_queue) == [1, 2]
        assert find_inconsistencies(table) == []

    def test_arrival_order_follows_queue(self, small_table) -> None:
        table, _ = handle_page_fault(small_table, 2)
        assert table[1].arrival_order == 0
        assert table[2].arrival_order == 1

    def test_free_frame_used_without_eviction(self, small_table) -> None:
        table = apply_manual_edit(small_table, 1, "present", False)
        table, outcome = handle_page_fault(table, 3)

        assert outcome.evicted_page is None
        assert not outcome.evicted
        assert outcome.frame == 1
        assert list(table.fifo_queue) == [0, 3]

    def test_hole_left_by_manual_edit(self, eight_page_table) -> None:
        # Frame 1 is free but the present count points at frame 3, which is taken
        table = apply_manual_edit(eight_page_table, 1, "present", False)
        table, outcome = handle_page_fault(table, 5)

        assert outcome.frame == 1
        assert outcome.evicted_page is None
        assert find_inconsistencies(table) == []

    def test_input_table_not_mutated(self, small_table) -> None:
        before = small_table.copy()
        handle_page_fault(small_table, 3)
        assert small_table == before

    def test_present_page_rejected(self, small_table) -> None:
        with pytest.raises(ValueError):
            handle_page_fault(small_table, 0)


class TestFifoOrder:
    def test_generated_pages_evicted_in_load_order(self, eight_page_table) -> None:
        table = eight_page_table
        evicted = []
        for page in [4, 5, 6, 7]:
            table, outcome = handle_page_fault(table, page)
            evicted.append(outcome.evicted_page)

        assert evicted == [0, 1, 2, 3]
        assert list(table.fifo_queue) == [4, 5, 6, 7]

    def test_first_loaded_page_goes_after_frames_plus_one_faults(self, eight_page_table) -> None:
        table = empty_table(eight_page_table)
        accesses = [5, 2, 7, 0, 3]  # frames + 1 distinct pages

        for page in accesses:
            table, _ = handle_page_fault(table, page)

        assert not table[5].present
        assert all(table[page].present for page in accesses[1:])

        # The next fault evicts the second page loaded
        table, outcome = handle_page_fault(table, 6)
        assert outcome.evicted_page == 2

    @pytest.mark.parametrize("page", [-1, 4])
    def test_page_out_of_range(self, small_table, page: int) -> None:
        before = small_table.copy()
        with pytest.raises(AddressOutOfRange):
            handle_page_fault(small_table, page)
        assert small_table == before
