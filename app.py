import logging

import streamlit as st

from paging_sim import (
    Direction,
    InvalidEdit,
    MemoryConfig,
    PagingError,
    apply_manual_edit,
    find_inconsistencies,
    generate,
    random_mapping,
    reorder_load_queue,
    swap_physical_slots,
    translate,
)
from paging_sim.config import DEFAULT_PAGE_KB, DEFAULT_VIRTUAL_KB
from paging_sim.views import (
    address_map_frame,
    fifo_queue_label,
    highlight_changes,
    page_table_frame,
    replacement_frame,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

# Set page title and configuration
st.set_page_config(page_title="Memory Paging Simulator", layout="wide")

# Custom CSS for the address highlighting and the memory cards
st.markdown("""
<style>
    .memory-card {
        background-color: #1E1E1E;
        border-radius: 10px;
        padding: 20px;
        margin: 10px 0;
    }
    .memory-header {
        color: #ffffff;
        font-size: 1.2em;
        margin-bottom: 5px;
    }
    .memory-value {
        color: white;
        font-size: 1.8em;
        margin: 10px 0;
    }
    .divider {
        border-top: 1px solid #333;
        margin: 15px 0;
    }
    .page-bits {
        font-family: monospace;
        background-color: #e0f7fa;
        color: #212121;
    }
    .offset-bits {
        font-family: monospace;
        background-color: #ffe0b2;
        color: #212121;
    }
</style>
""", unsafe_allow_html=True)

st.title("Memory Paging Simulator")


def reset_session():
    """Forget the current configuration and everything derived from it"""
    st.session_state.config = None
    st.session_state.table = None
    st.session_state.table_version = 0
    st.session_state.address_results = []
    st.session_state.page_fault_log = []
    st.session_state.last_replacement = None
    st.session_state.edit_error = None
    st.session_state.notice = None
    st.session_state.show_last_result = False


def set_table(table):
    """Store a new page table and refresh the widgets bound to the old one"""
    st.session_state.table = table
    st.session_state.table_version += 1
    st.session_state.last_replacement = None


def replace_table(table, notice):
    """Store a table built by a button and rerun so every widget reads the new one"""
    set_table(table)
    st.session_state.notice = notice
    st.rerun()


def on_entry_edited(page, field, key):
    """Apply a checkbox or arrival order change from the page table editor"""
    try:
        set_table(apply_manual_edit(st.session_state.table, page, field, st.session_state[key]))
        st.session_state.edit_error = None
    except InvalidEdit as e:
        st.session_state.edit_error = str(e)
        st.session_state.table_version += 1


def highlight_binary(parts):
    """Render the page index and offset segments of a binary address"""
    index_part, offset_part = parts
    return (f"<span class='page-bits'>{index_part}</span>"
            f"<span class='offset-bits'>{offset_part}</span>")


# Initialize the session state if it doesn't exist
if "table" not in st.session_state:
    reset_session()

# Create a sidebar for inputs
with st.sidebar:
    st.header("Memory Configuration")

    virtual_size = st.number_input(
        "Virtual Memory Size (KB)",
        min_value=1,
        value=DEFAULT_VIRTUAL_KB,
        step=1,
        help="Size of virtual memory in KB. Must be a power of 2.",
    )
    page_size = st.number_input(
        "Page Size (KB)",
        min_value=1,
        value=DEFAULT_PAGE_KB,
        step=1,
        help="Size of each page in KB. Must be a power of 2 and divide both memory sizes.",
    )

    # Physical memory is automatically set to half of virtual memory
    physical_size = virtual_size / 2
    st.write(f"Physical Memory Size: {physical_size:g} KB (1/2 of Virtual Memory)")

    direction = st.selectbox(
        "Conversion Type",
        list(Direction),
        format_func=lambda d: d.label,
        key="direction",
    )

    if st.button("Initialize Memory", key="initialize"):
        try:
            config = MemoryConfig.from_kilobytes(virtual_size, page_size, physical_size)
            table = generate(config)
        except PagingError as e:
            st.error(str(e))
        else:
            reset_session()
            st.session_state.config = config
            set_table(table)
            st.success("Memory configuration initialized successfully!")

    if st.button("Restart Simulation", key="restart"):
        reset_session()
        st.success("Simulation restarted!")

config = st.session_state.config
table = st.session_state.table

# Main content area
if table is None:
    st.info("Please configure memory parameters in the sidebar and click 'Initialize Memory' to start.")

    st.subheader("Memory Paging Concept")
    st.write("""
    Memory paging is a memory management scheme that eliminates the need for contiguous allocation of physical memory.
    - Virtual addresses are divided into a page number and an offset
    - The page table maps virtual pages to physical frames
    - Page faults occur when a referenced page is not in physical memory and FIFO picks the page to evict
    """)
else:
    col1, col2, col3 = st.columns(3)
    cards = [
        (col1, [("Virtual Memory Size", f"{config.virtual_bytes // 1024} KB"),
                ("Virtual Address Bits", config.virtual_address_bits),
                ("Page Index Bits", config.page_bits),
                ("Number of Virtual Pages", config.total_pages),
                ("Address Range", f"0x0 - 0x{config.max_virtual_address:X}")]),
        (col2, [("Physical Memory Size", f"{config.physical_bytes / 1024:g} KB"),
                ("Physical Address Bits", config.physical_address_bits),
                ("Physical Frame Bits", config.frame_bits),
                ("Number of Physical Frames", config.total_frames),
                ("Address Range", f"0x0 - 0x{config.max_physical_address:X}")]),
        (col3, [("Page Size", f"{config.page_bytes / 1024:g} KB"),
                ("Offset Bits", config.offset_bits),
                ("Replacement Algorithm", "FIFO"),
                ("Conversion Type", direction.label)]),
    ]
    for col, rows in cards:
        body = "<div class='divider'></div>".join(
            f"<div class='memory-header'>{name}</div><div class='memory-value'>{value}</div>"
            for name, value in rows
        )
        col.markdown(f"<div class='memory-card'>{body}</div>", unsafe_allow_html=True)

    st.subheader("Page Table Configuration")

    if st.session_state.notice:
        st.success(st.session_state.notice)
        st.session_state.notice = None

    if st.button("Random Mapping", key="random_mapping"):
        replace_table(random_mapping(config),
                      f"Random mapping created! {config.total_frames} pages randomly assigned to physical frames.")

    with st.expander("Configure Page Table Entries and Arrival Order"):
        st.write("Toggle which virtual pages are present. Newly present pages take the lowest free frame.")
        st.info(f"Physical memory has {config.total_frames} frames available. "
                f"You can mark at most {config.total_frames} virtual pages as present.")

        if st.session_state.edit_error:
            st.error(st.session_state.edit_error)

        version = st.session_state.table_version
        cols = st.columns([2, 1, 2, 2])
        cols[0].write("**Virtual Page**")
        cols[1].write("**Present**")
        cols[2].write("**Physical Frame**")
        cols[3].write("**Arrival Order**")

        for entry in table:
            i = entry.virtual_page
            cols = st.columns([2, 1, 2, 2])
            cols[0].write(f"{i}: `{table.virtual_binary(i)}`")

            present_key = f"present_{i}_{version}"
            cols[1].checkbox("Present", value=entry.present, key=present_key,
                             label_visibility="collapsed",
                             on_change=on_entry_edited, args=(i, "present", present_key))
            cols[2].write(f"`{table.physical_binary(i)}`" if entry.present else "N/A")

            if entry.present:
                arrival_key = f"arrival_{i}_{version}"
                cols[3].number_input("Arrival Order", min_value=0, step=1,
                                     value=entry.arrival_order, key=arrival_key,
                                     label_visibility="collapsed",
                                     on_change=on_entry_edited, args=(i, "arrival_order", arrival_key))
            else:
                cols[3].write("-")

        # Swap physical frames between two resident pages
        st.write("---")
        st.write("**Swap Physical Frames**")
        present_pages = table.present_pages()
        if len(present_pages) >= 2:
            swap_cols = st.columns(3)
            page_a = swap_cols[0].selectbox("First page", present_pages,
                                            format_func=table.virtual_binary, key=f"swap_a_{version}")
            page_b = swap_cols[1].selectbox("Second page", present_pages, index=1,
                                            format_func=table.virtual_binary, key=f"swap_b_{version}")
            if swap_cols[2].button("Swap Frames", key="swap"):
                try:
                    swapped = swap_physical_slots(table, page_a, page_b)
                except InvalidEdit as e:
                    st.error(str(e))
                else:
                    replace_table(swapped, f"Swapped frames of pages {page_a} and {page_b}")

        # Arrival order configuration
        st.write("---")
        st.write("**Configure FIFO Queue Arrival Order**")
        if present_pages:
            new_order = st.multiselect(
                "Select pages in desired arrival order (oldest first):",
                options=list(table.fifo_queue),
                default=list(table.fifo_queue),
                format_func=lambda page: f"Virtual Page {table.virtual_binary(page)} → "
                                         f"Physical Frame {table.physical_binary(page)}",
                key=f"fifo_reorder_{version}",
            )
            if st.button("Update Arrival Order", key="update_order"):
                try:
                    reordered = reorder_load_queue(table, new_order)
                except InvalidEdit as e:
                    st.error(str(e))
                else:
                    replace_table(reordered, "FIFO queue order updated!")
        else:
            st.info("No pages are currently present in physical memory. Add pages to configure arrival order.")

    for problem in find_inconsistencies(table):
        st.warning(problem)

    st.subheader("Page Table")
    st.dataframe(page_table_frame(table), width="stretch")

    if table.fifo_queue:
        st.subheader("FIFO Page Replacement Queue")
        st.write("Pages in order of arrival (oldest first):")
        st.code(fifo_queue_label(table))

    with st.expander("Page Base Addresses"):
        st.dataframe(address_map_frame(table), width="stretch")

    if st.session_state.last_replacement is not None:
        st.subheader("Page Table After FIFO Replacement")
        styled_df = st.session_state.last_replacement.style.apply(highlight_changes, axis=1)
        st.dataframe(styled_df, width="stretch")

    if st.session_state.page_fault_log:
        with st.expander("Page Fault History", expanded=True):
            st.write("Recent page faults and replacements:")
            for log_entry in st.session_state.page_fault_log[-5:]:
                st.info(log_entry)

    st.subheader("Address Conversion")

    with st.form("address_conversion_form"):
        if direction is Direction.VIRTUAL_TO_PHYSICAL:
            address_label = "Virtual Address"
            convert_button_label = "Convert to Physical Address"
        else:
            address_label = "Physical Address"
            convert_button_label = "Convert to Virtual Address"

        address_input = st.text_input(address_label, help="Enter a hexadecimal address (e.g., 0x2A or 2A)",
                                      key="address_input")
        convert_submitted = st.form_submit_button(convert_button_label)

    if convert_submitted and address_input:
        try:
            result = translate(direction, address_input, config, table)
        except PagingError as e:
            st.session_state.show_last_result = False
            st.error(f"Error in conversion: {e}")
        else:
            st.session_state.address_results.append(result)
            st.session_state.show_last_result = True
            if result.faulted:
                # Rerun so the page table above shows the replacement
                st.session_state.page_fault_log.append(result.describe())
                set_table(result.table)
                st.session_state.last_replacement = replacement_frame(result.table, result)
                st.rerun()

    # Details of the most recent conversion survive the rerun after a page fault
    if st.session_state.show_last_result:
        result = st.session_state.address_results[-1]
        st.success("Address conversion successful!")
        st.markdown("### Conversion Details")
        st.markdown(f"**Original Address:** `{result.original_hex}`")
        st.markdown(f"**Converted Address:** `{result.converted_hex}`")
        st.markdown(f"**Virtual Address (Binary):** {highlight_binary(result.virtual_parts)}",
                    unsafe_allow_html=True)
        st.markdown(f"**Physical Address (Binary):** {highlight_binary(result.physical_parts)}",
                    unsafe_allow_html=True)

        if result.faulted:
            st.warning("⚠️ Page fault occurred!")
            if result.evicted_page is not None:
                st.info(f"Page 0x{result.evicted_page:X} (binary: "
                        f"{table.virtual_binary(result.evicted_page)}) was replaced using FIFO")
            else:
                st.info("No eviction needed, a free frame was available")

    if st.session_state.address_results:
        st.subheader("Conversion History")

        # Display most recent conversions first
        results = st.session_state.address_results
        for i, result in enumerate(reversed(results[-5:])):
            with st.expander(f"Conversion #{len(results) - i}"):
                if result.direction is Direction.VIRTUAL_TO_PHYSICAL:
                    st.write(f"Virtual Address {result.virtual_hex} → Physical Address {result.physical_hex}")
                else:
                    st.write(f"Physical Address {result.physical_hex} → Virtual Address {result.virtual_hex}")
                if result.faulted:
                    st.write(result.describe())
