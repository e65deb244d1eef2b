"""Allele normalization: shared-prefix trimming and mutation classification."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .models import RawAllelePair, VariantRecord

MISSING_ALLELE = "."


class InvalidRefAltError(ValueError):
    """Raised when both reference and alternate are empty after trimming."""

    def __init__(self, message: str = "Both reference and alternate must not be empty."):
        super().__init__(message)


class MutationClass(str, Enum):
    """Mutation classes, named after their gvo: type."""

    SNV = "SNV"
    INSERTION = "Insertion"
    DELETION = "Deletion"
    MNV = "MNV"
    INDEL = "Indel"


@dataclass(frozen=True)
class NormalizedVariant:
    """Canonical, minimal representation of a single alteration."""

    position: int
    reference: str
    alternate: str
    mutation_class: MutationClass

    @property
    def begin(self) -> int:
        if self.mutation_class is MutationClass.INSERTION:
            return self.position - 1
        return self.position

    @property
    def end(self) -> int:
        if self.mutation_class is MutationClass.INSERTION:
            return self.position
        if self.mutation_class is MutationClass.SNV:
            return self.position
        return self.position + len(self.reference) - 1


@dataclass(frozen=True)
class Alteration:
    """A raw allele pair together with its normalization outcome."""

    raw: RawAllelePair
    normalized: NormalizedVariant | None
    error: InvalidRefAltError | None = None

    @property
    def allele_index(self) -> int:
        return self.raw.allele_index


def _strip_missing(allele: str) -> str:
    return "" if allele == MISSING_ALLELE else allele


def remove_shared_prefix(reference: str, alternate: str) -> tuple[str, str, int]:
    """Strip the longest common prefix of two alleles.

    Returns:
        Tuple of (trimmed_reference, trimmed_alternate, prefix_length)
    """
    n = 0
    for r, a in zip(reference, alternate):
        if r != a:
            break
        n += 1
    return reference[n:], alternate[n:], n


def classify_mutation(reference: str, alternate: str) -> MutationClass:
    """
    Classify an already trimmed REF/ALT pair.

    Args:
        reference: Trimmed reference allele
        alternate: Trimmed alternate allele

    Returns:
        The mutation class

    Raises:
        InvalidRefAltError: If both alleles are empty
    """
    r, a = len(reference), len(alternate)

    if r == 0 and a == 0:
        raise InvalidRefAltError()
    if r == 1 and a == 1:
        return MutationClass.SNV
    if r == 0:
        return MutationClass.INSERTION
    if a == 0:
        return MutationClass.DELETION
    if r == a:
        return MutationClass.MNV
    return MutationClass.INDEL


def normalize_alteration(position: int, reference: str, alternate: str) -> NormalizedVariant:
    """
    Reduce a REF/ALT pair to its minimal representation.

    The shared leading nucleotides are removed and the position is advanced
    by the number of removed bases. A literal "." on either side counts as
    an empty allele.

    Args:
        position: 1-based position of the first reference base
        reference: Reference allele
        alternate: Alternate allele

    Returns:
        NormalizedVariant with position, trimmed alleles and mutation class

    Raises:
        InvalidRefAltError: If nothing is left of either allele after trimming
    """
    reference, alternate, n = remove_shared_prefix(
        _strip_missing(reference), _strip_missing(alternate)
    )
    mutation_class = classify_mutation(reference, alternate)

    return NormalizedVariant(
        position=position + n,
        reference=reference,
        alternate=alternate,
        mutation_class=mutation_class,
    )


def decompose_alleles(position: int, alleles: list[str]) -> list[RawAllelePair]:
    """
    Decompose a record's allele list into one pair per alternate allele.

    A record with no alternate allele yields a single pair whose alternate
    is ".", which normalization rejects.

    Args:
        position: 1-based record position
        alleles: Ordered alleles, reference first

    Returns:
        List of RawAllelePair in allele order
    """
    if not alleles:
        return []

    reference = alleles[0]
    alternates = alleles[1:] or [MISSING_ALLELE]

    return [
        RawAllelePair(position=position, reference=reference, alternate=alt, allele_index=i)
        for i, alt in enumerate(alternates)
    ]


def iter_alterations(record: VariantRecord) -> Iterator[Alteration]:
    """Yield every alternate allele of a record, each normalized independently."""
    for pair in decompose_alleles(record.position, record.alleles):
        try:
            normalized = normalize_alteration(pair.position, pair.reference, pair.alternate)
        except InvalidRefAltError as e:
            yield Alteration(raw=pair, normalized=None, error=e)
        else:
            yield Alteration(raw=pair, normalized=normalized)
