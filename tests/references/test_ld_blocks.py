"""Tests for LD block file loading and interval lookup.

Tests for:
- Parsing whitespace-delimited block files (plain and gzipped)
- Sorting by chromosome and numeric start
- Rejecting malformed rows
- First-match lookup, including block boundaries and overlapping blocks
"""

import gzip

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st


class TestLDBlockLoader:
    """Tests for LDBlockLoader.load."""

    def test_loads_and_sorts_blocks(self, ld_block_factory):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockLoader

        path = ld_block_factory([("A02", 5, 10), ("A01", 1000, 2000), ("A01", 200, 300)])
        blocks = LDBlockLoader().load(path)

        assert blocks == [
            LDBlock("A01", 200, 300),
            LDBlock("A01", 1000, 2000),
            LDBlock("A02", 5, 10),
        ]

    def test_start_is_sorted_numerically(self, ld_block_factory):
        from vcf_snp_select.references.ld_blocks import LDBlockLoader

        path = ld_block_factory([("A01", 1000, 1100), ("A01", 900, 950)])
        assert [b.start for b in LDBlockLoader().load(path)] == [900, 1000]

    def test_keeps_file_order_when_not_sorting(self, ld_block_factory):
        from vcf_snp_select.references.ld_blocks import LDBlockLoader

        path = ld_block_factory([("A02", 5, 10), ("A01", 1, 2)])
        assert [b.chrom for b in LDBlockLoader().load(path, sort=False)] == ["A02", "A01"]

    def test_accepts_spaces_extra_columns_and_comments(self, tmp_path):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockLoader

        path = tmp_path / "blocks.txt"
        path.write_text("# chrom start end\n\nA01  100   500  12 SNPs\n")

        assert LDBlockLoader().load(path) == [LDBlock("A01", 100, 500)]

    def test_reads_gzipped_file(self, tmp_path):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import load_ld_blocks

        path = tmp_path / "blocks.txt.gz"
        with gzip.open(path, "wt") as f:
            f.write("D01\t10\t20\n")

        assert load_ld_blocks(path) == [LDBlock("D01", 10, 20)]

    def test_missing_file_raises(self, tmp_path):
        from vcf_snp_select.references.ld_blocks import LDBlockLoader

        with pytest.raises(FileNotFoundError):
            LDBlockLoader().load(tmp_path / "missing.txt")

    @pytest.mark.parametrize(
        "row,message",
        [
            ("A01\t100", "expected 'chrom start end'"),
            ("A01\tabc\t500", "must be integers"),
            ("A01\t500\t100", "must be greater than start"),
            ("A01\t500\t500", "must be greater than start"),
        ],
    )
    def test_malformed_rows_raise(self, tmp_path, row, message):
        from vcf_snp_select.references.ld_blocks import LDBlockFormatError, LDBlockLoader

        path = tmp_path / "blocks.txt"
        path.write_text(f"A01\t1\t2\n{row}\n")

        with pytest.raises(LDBlockFormatError) as exc_info:
            LDBlockLoader().load(path)
        assert message in str(exc_info.value)
        assert "blocks.txt:2" in str(exc_info.value)


class TestLDBlockIndex:
    """Tests for LDBlockIndex.find."""

    def test_block_boundaries_are_inclusive(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex([LDBlock("A01", 100, 500)])

        assert index.find("A01", 100).block == LDBlock("A01", 100, 500)
        assert index.find("A01", 500).block == LDBlock("A01", 100, 500)
        assert index.find("A01", 99) is None
        assert index.find("A01", 501) is None

    def test_unknown_chromosome(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        assert LDBlockIndex([LDBlock("A01", 100, 500)]).find("D05", 200) is None

    def test_gap_between_blocks(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex([LDBlock("A01", 100, 200), LDBlock("A01", 300, 400)])

        assert index.find("A01", 250) is None
        assert index.find("A01", 300).index == 1

    def test_nested_block_goes_to_enclosing_earlier_block(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex([LDBlock("A01", 100, 1000), LDBlock("A01", 200, 300)])
        match = index.find("A01", 250)

        assert match.index == 0
        assert match.key == ("A01", 0)

    def test_long_earlier_block_behind_short_one(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex(
            [LDBlock("A01", 100, 150), LDBlock("A01", 120, 900), LDBlock("A01", 130, 140)]
        )

        assert index.find("A01", 145).block == LDBlock("A01", 100, 150)
        assert index.find("A01", 600).block == LDBlock("A01", 120, 900)

    def test_len_counts_all_blocks(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex([LDBlock("A01", 1, 2), LDBlock("A02", 1, 2)])
        assert len(index) == 2

    @given(
        blocks=st.lists(
            st.tuples(
                st.sampled_from(["A01", "A02"]),
                st.integers(min_value=1, max_value=5000),
                st.integers(min_value=1, max_value=3000),
            ),
            max_size=30,
        ),
        queries=st.lists(
            st.tuples(st.sampled_from(["A01", "A02"]), st.integers(min_value=1, max_value=9000)),
            max_size=30,
        ),
    )
    @settings(max_examples=200, deadline=None)
    def test_matches_linear_first_match_scan(self, blocks, queries):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.references.ld_blocks import LDBlockIndex, sort_blocks

        ld_blocks = sort_blocks(LDBlock(c, s, s + length) for c, s, length in blocks)
        index = LDBlockIndex(ld_blocks, presorted=True)

        for chrom, pos in queries:
            expected = next((b for b in ld_blocks if b.contains(chrom, pos)), None)
            match = index.find(chrom, pos)
            assert (match.block if match else None) == expected
