"""pandas views of the page table for display"""

import pandas as pd

from .codec import to_binary


def page_table_frame(table):
    """Create a DataFrame for the page table"""
    fifo_order = list(table.fifo_queue)
    rows = []
    for entry in table:
        in_queue = entry.virtual_page in fifo_order
        queue_pos = fifo_order.index(entry.virtual_page) + 1 if in_queue else None

        rows.append({
            "Page Index": entry.virtual_page,
            "Virtual Page": table.virtual_binary(entry.virtual_page),
            "Physical Frame": table.physical_binary(entry.virtual_page) if entry.present else "Not Present",
            "Present Bit": "1" if entry.present else "0",
            "Arrival Order": entry.arrival_order,
            "In FIFO Queue": f"Yes (Position {queue_pos})" if in_queue else "No",
        })
    return pd.DataFrame(rows)


def replacement_frame(table, result):
    """Page table with a Status column marking the evicted and the newly loaded page"""
    frame = page_table_frame(table)
    status = pd.Series("", index=frame.index)
    if result.faulted:
        status.loc[frame["Page Index"] == result.virtual_page] = "ADDED TO MEMORY"
    if result.evicted_page is not None:
        status.loc[frame["Page Index"] == result.evicted_page] = "REPLACED OUT"
    frame["Status"] = status
    return frame


def address_map_frame(table):
    """Base virtual address of every page and the physical base it maps to"""
    config = table.config
    rows = []
    for entry in table:
        virtual_base = entry.virtual_page * config.page_bytes
        if entry.present:
            physical_base = to_binary(entry.frame * config.page_bytes,
                                      config.physical_address_bits)
        else:
            physical_base = "Page Fault"
        rows.append({
            "Virtual Page": table.virtual_binary(entry.virtual_page),
            "Virtual Address": to_binary(virtual_base, config.virtual_address_bits),
            "Physical Address": physical_base,
        })
    return pd.DataFrame(rows)


def fifo_queue_label(table):
    """Render the FIFO queue, oldest first"""
    return " → ".join(f"Page {table.virtual_binary(page)}" for page in table.fifo_queue)


def highlight_changes(row):
    """Row style used with DataFrame.style.apply for replacement_frame"""
    if row["Status"] == "REPLACED OUT":
        return ["border: 2px solid #FF0000"] * len(row)
    elif row["Status"] == "ADDED TO MEMORY":
        return ["border: 2px solid #008000"] * len(row)
    return [""] * len(row)
