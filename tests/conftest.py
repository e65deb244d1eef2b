"""Pytest configuration and fixtures for vcf2rdf tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.vcf_generator import (  # noqa: E402
    SyntheticVariant,
    VCFGenerator,
    make_dbsnp_like_vcf_file,
    make_malformed_number_r_vcf_file,
    make_missing_values_vcf_file,
    make_multi_contig_vcf_file,
)

GRCH37_CHR1 = "http://identifiers.org/hco/1/GRCh37"


@pytest.fixture
def vcf_generator():
    """Provide VCFGenerator class for tests."""
    return VCFGenerator


@pytest.fixture
def synthetic_variant_factory():
    """Factory for creating SyntheticVariant instances."""

    def _factory(**kwargs):
        defaults = {
            "chrom": "1",
            "pos": 100,
            "ref": "A",
            "alt": ["G"],
        }
        defaults.update(kwargs)
        return SyntheticVariant(**defaults)

    return _factory


@pytest.fixture
def dbsnp_like_vcf_file(tmp_path):
    """Generate a VCF file with one record per mutation class."""
    return make_dbsnp_like_vcf_file(tmp_path)


@pytest.fixture
def multi_contig_vcf_file(tmp_path):
    """Generate a VCF file with records on chromosomes 1 and 2."""
    return make_multi_contig_vcf_file(tmp_path)


@pytest.fixture
def malformed_number_r_vcf_file(tmp_path):
    """Generate a VCF file with a short Number=R INFO value."""
    return make_malformed_number_r_vcf_file(tmp_path)


@pytest.fixture
def chr1_config_file(tmp_path) -> Path:
    """TOML configuration mapping chromosome 1 to GRCh37."""
    path = tmp_path / "config.toml"
    path.write_text(
        f"""
info = ["DP", "AF", "AD", "DB", "ANN", "GL"]

[namespaces]

[reference.1]
name = "1"
reference = "{GRCH37_CHR1}"
"""
    )
    return path


@pytest.fixture
def missing_values_vcf_file(tmp_path):
    """Generate a VCF file with "." entries inside INFO arrays."""
    return make_missing_values_vcf_file(tmp_path)
