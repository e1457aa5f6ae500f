"""Tests for virtual <-> physical address translation."""

import pytest

from paging_sim import (
    AddressOutOfRange,
    ConfigurationError,
    Direction,
    InvalidHexAddress,
    MemoryConfig,
    NoMappingFound,
    apply_manual_edit,
    generate,
    physical_to_virtual,
    swap_physical_slots,
    translate,
    virtual_to_physical,
)


class TestPageFaultScenario:
    """16 KB virtual, 8 KB physical, 4 KB pages; page 2 faults and evicts page 0"""

    def test_fault_on_page_two(self, small_config, small_table) -> None:
        result = translate("v2p", "0x2000", small_config, small_table)

        assert result.faulted
        assert result.evicted_page == 0
        assert result.assigned_frame == 0
        assert result.physical_address == 0
        assert result.converted_hex == "0x0000"
        assert list(result.table.fifo_queue) == [1, 2]
        assert result.table.physical_binary(2) == "0"

    def test_result_formats(self, small_config, small_table) -> None:
        result = translate("v2p", "0x2000", small_config, small_table)

        assert result.virtual_binary == "10000000000000"
        assert result.physical_binary == "0000000000000"
        assert result.virtual_parts == ("10", "000000000000")
        assert result.physical_parts == ("0", "000000000000")
        assert result.virtual_hex == "0x2000"
        assert result.original_hex == "0x2000"

    def test_describe(self, small_config, small_table) -> None:
        result = translate("v2p", "0x2000", small_config, small_table)
        assert result.describe() == "Page fault: Virtual page 2 replaced page 0 in frame 0"

    def test_caller_table_unchanged(self, small_config, small_table) -> None:
        translate("v2p", "0x2000", small_config, small_table)
        assert small_table == generate(small_config)


class TestVirtualToPhysical:
    def test_resident_page(self, small_config, small_table) -> None:
        result = virtual_to_physical(small_config, small_table, 0x1ABC)

        assert not result.faulted
        assert result.evicted_page is None
        assert result.physical_address == 0x1ABC
        assert result.offset == 0xABC
        assert result.physical_hex == "0x1ABC"
        assert result.describe() is None

    def test_idempotent_for_resident_page(self, small_config, small_table) -> None:
        first = virtual_to_physical(small_config, small_table, 0x0042)
        second = virtual_to_physical(small_config, first.table, 0x0042)

        assert first == second
        assert first.table is small_table
        assert second.table == generate(small_config)

    def test_fault_with_free_frame(self, small_config, small_table) -> None:
        table = apply_manual_edit(small_table, 1, "present", False)
        result = virtual_to_physical(small_config, table, 0x3004)

        assert result.faulted
        assert result.evicted_page is None
        assert result.physical_address == 0x1004
        assert result.describe() == (
            "Page fault: Virtual page 3 loaded into free frame 1 (no eviction needed)"
        )

    def test_uses_swapped_frames(self, small_config, small_table) -> None:
        table = swap_physical_slots(small_table, 0, 1)
        result = virtual_to_physical(small_config, table, 0x0ABC)
        assert result.physical_address == 0x1ABC

    def test_access_does_not_protect_page_from_fifo(self, small_config, small_table) -> None:
        table = virtual_to_physical(small_config, small_table, 0x0010).table
        result = virtual_to_physical(small_config, table, 0x3000)
        assert result.evicted_page == 0

    def test_single_frame_config(self) -> None:
        config = MemoryConfig.from_kilobytes(2, 1)
        result = virtual_to_physical(config, generate(config), 0x400)

        assert result.evicted_page == 0
        assert result.physical_address == 0
        assert result.physical_hex == "0x000"


class TestPhysicalToVirtual:
    def test_reverse_lookup(self, small_config, small_table) -> None:
        result = physical_to_virtual(small_config, small_table, 0x1ABC)

        assert result.direction is Direction.PHYSICAL_TO_VIRTUAL
        assert result.virtual_address == 0x1ABC
        assert result.converted_hex == "0x1ABC"
        assert not result.faulted

    def test_reverse_lookup_after_fault(self, small_config, small_table) -> None:
        table = translate("v2p", "0x2123", small_config, small_table).table
        result = translate("p2v", "0x0123", small_config, table)
        assert result.virtual_address == 0x2123

    def test_unmapped_frame(self, small_config, small_table) -> None:
        table = apply_manual_edit(small_table, 0, "present", False)
        with pytest.raises(NoMappingFound):
            physical_to_virtual(small_config, table, 0x0010)

    def test_never_faults(self, small_config, small_table) -> None:
        table = apply_manual_edit(small_table, 0, "present", False)
        with pytest.raises(NoMappingFound):
            physical_to_virtual(small_config, table, 0x0010)
        assert table == apply_manual_edit(small_table, 0, "present", False)


class TestRoundTrip:
    @pytest.mark.parametrize("address", [0x0000, 0x0FFF, 0x1000, 0x1ABC, 0x1FFF])
    def test_resident_addresses(self, small_config, small_table, address: int) -> None:
        forward = virtual_to_physical(small_config, small_table, address)
        back = physical_to_virtual(small_config, forward.table, forward.physical_address)
        assert back.virtual_address == address

    def test_random_mapping(self, eight_page_config) -> None:
        from paging_sim import random_mapping

        table = random_mapping(eight_page_config, seed=11)
        for page in table.present_pages():
            address = (page << eight_page_config.offset_bits) | 0x123
            forward = virtual_to_physical(eight_page_config, table, address)
            assert not forward.faulted
            back = physical_to_virtual(eight_page_config, table, forward.physical_address)
            assert back.virtual_address == address


class TestBoundaries:
    @pytest.mark.parametrize("address_hex", ["0x4000", "-0x1", "0xFFFFF"])
    def test_virtual_out_of_range(self, small_config, small_table, address_hex: str) -> None:
        with pytest.raises(AddressOutOfRange):
            translate("v2p", address_hex, small_config, small_table)

    @pytest.mark.parametrize("address_hex", ["0x2000", "-0x10"])
    def test_physical_out_of_range(self, small_config, small_table, address_hex: str) -> None:
        with pytest.raises(AddressOutOfRange):
            translate("p2v", address_hex, small_config, small_table)

    def test_last_virtual_address(self, small_config, small_table) -> None:
        result = translate("v2p", "0x3FFF", small_config, small_table)
        assert result.physical_address == 0x0FFF

    def test_invalid_hex(self, small_config, small_table) -> None:
        with pytest.raises(InvalidHexAddress):
            translate("v2p", "0xG00D", small_config, small_table)

    def test_unknown_direction(self, small_config, small_table) -> None:
        with pytest.raises(ValueError):
            translate("sideways", "0x0", small_config, small_table)

    def test_enum_direction_accepted(self, small_config, small_table) -> None:
        result = translate(Direction.VIRTUAL_TO_PHYSICAL, "0x10", small_config, small_table)
        assert result.physical_address == 0x10

    def test_table_from_other_config(self, small_table) -> None:
        other = MemoryConfig.from_kilobytes(32, 4)
        with pytest.raises(ConfigurationError):
            translate("v2p", "0x0", other, small_table)
