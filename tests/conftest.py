"""Pytest configuration and fixtures for vcf-snp-select tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.vcf_generator import (  # noqa: E402
    SyntheticVariant,
    VCFGenerator,
    make_e2e_variants,
    make_record,
    write_ld_blocks,
)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def e2e_vcf(tmp_path) -> Path:
    return VCFGenerator.generate_file(make_e2e_variants(), tmp_path / "e2e.vcf")


@pytest.fixture
def vcf_factory(tmp_path):
    """Write a VCF built from SyntheticVariants into tmp_path."""

    def _make(variants: list[SyntheticVariant], name: str = "input.vcf") -> Path:
        return VCFGenerator.generate_file(variants, tmp_path / name)

    return _make


@pytest.fixture
def ld_block_factory(tmp_path):
    """Write an LD block file into tmp_path."""

    def _make(blocks: list[tuple[str, int, int]], name: str = "ld_blocks.txt") -> Path:
        return write_ld_blocks(tmp_path / name, blocks)

    return _make
