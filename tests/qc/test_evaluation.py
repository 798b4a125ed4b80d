"""Tests for the selection evaluation tables."""

import pytest

from fixtures.vcf_generator import SyntheticVariant, make_record


class TestHelpers:
    @pytest.mark.parametrize(
        "af,expected",
        [(0.1, 0.1), (0.9, pytest.approx(0.1)), (0.5, 0.5), (0.0, 0.0), (1.0, 0.0)],
    )
    def test_minor_allele_frequency(self, af, expected):
        from vcf_snp_select.qc.evaluation import minor_allele_frequency

        assert minor_allele_frequency(make_record(info={"AF": af})) == expected

    def test_missing_af_counts_as_half(self):
        from vcf_snp_select.qc.evaluation import minor_allele_frequency

        assert minor_allele_frequency(make_record(info={"DP": 10})) == 0.5

    @pytest.mark.parametrize(
        "maf,expected", [(0.0, 0), (0.05, 0), (0.1, 10), (0.25, 20), (0.49, 40), (0.5, 50)]
    )
    def test_maf_bin(self, maf, expected):
        from vcf_snp_select.qc.evaluation import maf_bin

        assert maf_bin(maf) == expected

    def test_order_chromosomes_puts_preferred_first(self):
        from vcf_snp_select.qc.evaluation import order_chromosomes

        assert order_chromosomes(["chrZ", "D01", "A01", "chrB"], ["A01", "A02", "D01"]) == [
            "A01",
            "D01",
            "chrB",
            "chrZ",
        ]

    def test_percent_of_zero_is_zero(self):
        from vcf_snp_select.qc.evaluation import percent

        assert percent(5, 0) == 0.0


class TestGenomeCoverage:
    def test_counts_windows_and_covered_windows(self):
        from vcf_snp_select.qc.evaluation import compute_genome_coverage

        input_records = [make_record(pos=p) for p in (100, 15000, 25000, 39000)]
        output_records = [make_record(pos=100), make_record(pos=25000)]

        [row] = compute_genome_coverage(input_records, output_records, 10000)

        assert row.chrom == "A01"
        assert row.length == 39000
        assert row.total_windows == 4
        assert row.covered_windows == 2
        assert row.coverage == 50.0

    def test_window_boundary_position(self):
        from vcf_snp_select.qc.evaluation import compute_genome_coverage

        records = [make_record(pos=10000)]
        [row] = compute_genome_coverage(records, records, 10000)

        assert row.total_windows == 1
        assert row.covered_windows == 1

    def test_chromosome_missing_from_output_is_uncovered(self):
        from vcf_snp_select.qc.evaluation import compute_genome_coverage

        rows = compute_genome_coverage(
            [make_record("A01", 500), make_record("A02", 500)],
            [make_record("A01", 500)],
            10000,
            chromosome_order=("A01", "A02"),
        )

        assert [(r.chrom, r.covered_windows) for r in rows] == [("A01", 1), ("A02", 0)]


class TestMAFDistribution:
    def test_bins_input_and_output(self):
        from vcf_snp_select.qc.evaluation import compute_maf_distribution

        input_records = [
            make_record(info={"AF": 0.05}),
            make_record(info={"AF": 0.2}),
            make_record(info={"AF": 0.8}),
            make_record(info={"AF": 0.5}),
        ]
        output_records = [make_record(info={"AF": 0.2})]

        bins = {b.lower: b for b in compute_maf_distribution(input_records, output_records)}

        assert sorted(bins) == [0, 10, 20, 30, 40, 50]
        assert bins[0].input_count == 1
        assert bins[20].input_count == 1
        assert bins[10].input_count == 1
        assert bins[50].input_count == 1
        assert bins[20].output_count == 1
        assert bins[20].output_percent == 100.0
        assert bins[0].input_percent == 25.0
        assert bins[0].upper == 10

    def test_empty_output(self):
        from vcf_snp_select.qc.evaluation import compute_maf_distribution

        bins = compute_maf_distribution([make_record()], [])
        assert all(b.output_count == 0 and b.output_percent == 0.0 for b in bins)


class TestChromosomeRetention:
    def test_retention_per_chromosome(self):
        from vcf_snp_select.qc.evaluation import compute_chromosome_retention

        rows = compute_chromosome_retention(
            [make_record("A01", 1), make_record("A01", 2), make_record("D01", 1)],
            [make_record("A01", 1)],
            chromosome_order=("A01", "D01"),
        )

        assert [(r.chrom, r.input_count, r.output_count) for r in rows] == [
            ("A01", 2, 1),
            ("D01", 1, 0),
        ]
        assert rows[0].retention == 50.0
        assert rows[1].retention == 0.0


class TestLDCoverage:
    def test_counts_covered_blocks(self):
        from vcf_snp_select.models import LDBlock
        from vcf_snp_select.qc.evaluation import compute_ld_coverage
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        index = LDBlockIndex(
            [LDBlock("A01", 100, 500), LDBlock("A01", 1000, 2000), LDBlock("A02", 1, 50)]
        )
        output_records = [
            make_record(pos=150),
            make_record(pos=300),
            make_record(pos=1500),
            make_record(pos=5000),
        ]

        coverage = compute_ld_coverage(output_records, index)

        assert coverage.total_blocks == 3
        assert coverage.covered_blocks == 2
        assert coverage.snps_in_blocks == 3
        assert coverage.coverage == pytest.approx(200 / 3)
        assert coverage.mean_snps_per_block == 1.5

    def test_no_blocks(self):
        from vcf_snp_select.qc.evaluation import compute_ld_coverage
        from vcf_snp_select.references.ld_blocks import LDBlockIndex

        coverage = compute_ld_coverage([make_record()], LDBlockIndex([]))
        assert coverage.coverage == 0.0
        assert coverage.mean_snps_per_block == 0.0


class TestEvaluateSelection:
    def test_report_from_files(self, vcf_factory, ld_block_factory):
        from vcf_snp_select.config import SelectConfig
        from vcf_snp_select.qc.evaluation import evaluate_selection

        input_path = vcf_factory(
            [
                SyntheticVariant("A01", 100),
                SyntheticVariant("A01", 200),
                SyntheticVariant("A01", 15000),
                SyntheticVariant("A02", 300),
            ]
        )
        output_path = vcf_factory(
            [SyntheticVariant("A01", 100), SyntheticVariant("A02", 300)], name="output.vcf"
        )
        blocks = ld_block_factory([("A01", 50, 250)])

        report = evaluate_selection(
            input_path, output_path, SelectConfig(ld_window_size=5000), ld_block_path=blocks
        )

        assert report.input_snps == 4
        assert report.selected_snps == 2
        assert report.reduction_rate == 50.0
        assert report.total_windows == 3
        assert report.covered_windows == 2
        assert report.ld_coverage.covered_blocks == 1
        assert report.ld_window_size == 5000

        data = report.to_dict()
        assert data["summary"] == {"input_snps": 4, "selected_snps": 2, "reduction_rate": 50.0}
        assert data["parameters"]["ld_block_path"] == str(blocks)
        assert data["maf_distribution"][1]["bin"] == "10-20%"
        assert data["ld_block_coverage"]["coverage"] == 100.0

    def test_overlapping_blocks_count_under_sorted_first_match(
        self, vcf_factory, ld_block_factory
    ):
        from vcf_snp_select.qc.evaluation import evaluate_selection

        selected = vcf_factory(
            [SyntheticVariant("A01", 200), SyntheticVariant("A01", 400)], name="selected.vcf"
        )
        # In file order 400 would land in the first row; sorted, both SNPs fall in 100-500
        blocks = ld_block_factory([("A01", 300, 900), ("A01", 100, 500)])

        report = evaluate_selection(selected, selected, ld_block_path=blocks)

        assert report.ld_coverage.total_blocks == 2
        assert report.ld_coverage.covered_blocks == 1
        assert report.ld_coverage.snps_in_blocks == 2

    def test_chromosome_length_uses_largest_position_of_either_file(self, vcf_factory):
        from vcf_snp_select.qc.evaluation import evaluate_selection

        input_path = vcf_factory([SyntheticVariant("A01", 100), SyntheticVariant("A01", 25000)])
        output_path = vcf_factory([SyntheticVariant("A01", 100)], name="output.vcf")

        [row] = evaluate_selection(input_path, output_path).coverage

        assert row.length == 25000
        assert row.total_windows == 3
        assert row.covered_windows == 1

    def test_without_ld_blocks(self, e2e_vcf, vcf_factory):
        from vcf_snp_select.qc.evaluation import evaluate_selection

        output_path = vcf_factory([], name="empty.vcf")
        report = evaluate_selection(e2e_vcf, output_path)

        assert report.selected_snps == 0
        assert report.reduction_rate == 100.0
        assert report.ld_coverage is None
        assert "ld_block_coverage" not in report.to_dict()

    def test_empty_input(self, vcf_factory):
        from vcf_snp_select.qc.evaluation import evaluate_selection

        empty = vcf_factory([], name="empty.vcf")
        report = evaluate_selection(empty, empty)

        assert report.reduction_rate == 0.0
        assert report.window_coverage == 0.0
        assert report.coverage == []
