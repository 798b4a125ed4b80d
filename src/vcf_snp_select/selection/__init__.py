"""Two-stage SNP selection: fixed windows, then LD block sub-windows."""

from .ld_block import (
    BlockMembers,
    BlockSubSelector,
    LDBlockAssigner,
    LDBlockSelection,
    filter_ld_blocks,
    select_by_ld_block,
)
from .window import WindowSelector, select_by_window

__all__ = [
    "BlockMembers",
    "BlockSubSelector",
    "LDBlockAssigner",
    "LDBlockSelection",
    "filter_ld_blocks",
    "WindowSelector",
    "select_by_ld_block",
    "select_by_window",
]
