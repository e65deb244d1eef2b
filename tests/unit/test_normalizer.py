"""Tests for allele normalization and mutation classification."""

import pytest

from vcf2rdf.models import VariantRecord
from vcf2rdf.normalizer import (
    InvalidRefAltError,
    MutationClass,
    classify_mutation,
    decompose_alleles,
    iter_alterations,
    normalize_alteration,
    remove_shared_prefix,
)


class TestRemoveSharedPrefix:
    """Test shared-prefix trimming."""

    def test_no_shared_prefix(self):
        assert remove_shared_prefix("T", "C") == ("T", "C", 0)

    def test_anchor_base_removed(self):
        assert remove_shared_prefix("C", "CT") == ("", "T", 1)

    def test_identical_alleles(self):
        assert remove_shared_prefix("ACG", "ACG") == ("", "", 3)

    def test_only_leading_bases_trimmed(self):
        """Shared suffixes are kept."""
        assert remove_shared_prefix("ACTC", "AC") == ("TC", "", 2)
        assert remove_shared_prefix("GATC", "GTTC") == ("ATC", "TTC", 1)


class TestClassifyMutation:
    """Test mutation classification of trimmed pairs."""

    @pytest.mark.parametrize(
        "ref,alt,expected",
        [
            ("T", "C", MutationClass.SNV),
            ("", "T", MutationClass.INSERTION),
            ("T", "", MutationClass.DELETION),
            ("CT", "AG", MutationClass.MNV),
            ("G", "AT", MutationClass.INDEL),
            ("GA", "T", MutationClass.INDEL),
        ],
    )
    def test_classes(self, ref, alt, expected):
        assert classify_mutation(ref, alt) is expected

    def test_both_empty_raises(self):
        with pytest.raises(InvalidRefAltError, match="must not be empty"):
            classify_mutation("", "")


class TestNormalizeAlteration:
    """Test positions and alleles after normalization."""

    @pytest.mark.parametrize(
        "pos,ref,alt,exp_pos,exp_ref,exp_alt,exp_class,exp_begin,exp_end",
        [
            (1000, "T", "C", 1000, "T", "C", MutationClass.SNV, 1000, 1000),
            (1000, "AT", "AC", 1001, "T", "C", MutationClass.SNV, 1001, 1001),
            (1000, "CT", "C", 1001, "T", "", MutationClass.DELETION, 1001, 1001),
            (1000, "ACTC", "AC", 1002, "TC", "", MutationClass.DELETION, 1002, 1003),
            (1000, "C", "CT", 1001, "", "T", MutationClass.INSERTION, 1000, 1001),
            (1000, "AC", "ACTG", 1002, "", "TG", MutationClass.INSERTION, 1001, 1002),
            (1000, "CG", "CAT", 1001, "G", "AT", MutationClass.INDEL, 1001, 1001),
            (1000, "ACGT", "ACATA", 1002, "GT", "ATA", MutationClass.INDEL, 1002, 1003),
            (1000, "CT", "AG", 1000, "CT", "AG", MutationClass.MNV, 1000, 1001),
            (1000, "ACT", "AAG", 1001, "CT", "AG", MutationClass.MNV, 1001, 1002),
        ],
    )
    def test_normalization_cases(
        self, pos, ref, alt, exp_pos, exp_ref, exp_alt, exp_class, exp_begin, exp_end
    ):
        variant = normalize_alteration(pos, ref, alt)

        assert variant.position == exp_pos
        assert variant.reference == exp_ref
        assert variant.alternate == exp_alt
        assert variant.mutation_class is exp_class
        assert (variant.begin, variant.end) == (exp_begin, exp_end)

    @pytest.mark.parametrize(
        "pos,ref,alt",
        [
            (1000, "T", "C"),
            (1000, "AT", "AC"),
            (1000, "CT", "C"),
            (1000, "ACTC", "AC"),
            (1000, "C", "CT"),
            (1000, "AC", "ACTG"),
            (1000, "CG", "CAT"),
            (1000, "ACGT", "ACATA"),
            (1000, "CT", "AG"),
            (1000, "ACT", "AAG"),
            (1000, "T", "."),
            (1000, "AAAT", "AAAAT"),
        ],
    )
    def test_normalization_is_idempotent(self, pos, ref, alt):
        variant = normalize_alteration(pos, ref, alt)
        again = normalize_alteration(variant.position, variant.reference, variant.alternate)

        assert again == variant
        assert not (
            variant.reference
            and variant.alternate
            and variant.reference[0] == variant.alternate[0]
        )

    @pytest.mark.parametrize("ref,alt", [("", ""), (".", "."), ("A", "A"), ("ACG", "ACG")])
    def test_nothing_left_raises(self, ref, alt):
        with pytest.raises(InvalidRefAltError):
            normalize_alteration(1000, ref, alt)

    def test_missing_allele_is_empty(self):
        """A "." alternate behaves like an empty allele."""
        variant = normalize_alteration(1000, "T", ".")
        assert variant.mutation_class is MutationClass.DELETION
        assert variant.alternate == ""

    def test_lowercase_bases_compared_as_given(self):
        variant = normalize_alteration(1000, "at", "ac")
        assert variant.reference == "t"
        assert variant.position == 1001


class TestDecomposeAlleles:
    """Test splitting records into per-allele pairs."""

    def test_multiallelic(self):
        pairs = decompose_alleles(500, ["C", "CACA", "CACG"])

        assert [(p.reference, p.alternate, p.allele_index) for p in pairs] == [
            ("C", "CACA", 0),
            ("C", "CACG", 1),
        ]
        assert all(p.position == 500 for p in pairs)

    def test_no_alternate(self):
        pairs = decompose_alleles(500, ["T"])
        assert len(pairs) == 1
        assert pairs[0].alternate == "."

    def test_empty_allele_list(self):
        assert decompose_alleles(500, []) == []


class TestIterAlterations:
    """Test per-allele normalization of a record."""

    def test_errors_are_per_allele(self):
        record = VariantRecord(chrom="1", position=100, alleles=["A", "A", "G"])
        alterations = list(iter_alterations(record))

        assert len(alterations) == 2
        assert alterations[0].normalized is None
        assert isinstance(alterations[0].error, InvalidRefAltError)
        assert alterations[1].normalized.mutation_class is MutationClass.SNV
        assert alterations[1].allele_index == 1

    def test_independent_normalization(self):
        """Each alternate is trimmed against the full reference."""
        record = VariantRecord(chrom="1", position=10018, alleles=["C", "CACA", "G"])
        first, second = (a.normalized for a in iter_alterations(record))

        assert first.mutation_class is MutationClass.INSERTION
        assert first.position == 10019
        assert second.mutation_class is MutationClass.SNV
        assert second.position == 10018
