"""LD block reference intervals."""

from .ld_blocks import (
    BlockMatch,
    LDBlockFormatError,
    LDBlockIndex,
    LDBlockLoader,
    load_ld_blocks,
)

__all__ = [
    "BlockMatch",
    "LDBlockFormatError",
    "LDBlockIndex",
    "LDBlockLoader",
    "load_ld_blocks",
]
