"""vcf-snp-select: window and LD block based SNP subset selection for VCF files."""

__version__ = "1.1.0"
