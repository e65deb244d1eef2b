"""Data models for VCF records handed to the RDF pipeline."""

from dataclasses import dataclass, field

from .info import InfoField


@dataclass
class Sequence:
    """Reference sequence a chromosome is mapped to."""

    name: str | None = None
    reference: str | None = None


@dataclass
class RawAllelePair:
    """One (reference, alternate) pair taken from a record, before normalization."""

    position: int
    reference: str
    alternate: str
    allele_index: int


@dataclass
class VariantRecord:
    """Represents a single VCF record with all of its alleles."""

    chrom: str
    position: int
    alleles: list[str]
    identifier: str | None = None
    qual: float | None = None
    filters: list[str] = field(default_factory=list)
    info: list[InfoField] = field(default_factory=list)

    @property
    def reference(self) -> str:
        return self.alleles[0] if self.alleles else ""

    @property
    def alternates(self) -> list[str]:
        return self.alleles[1:]

    def __str__(self) -> str:
        alts = ",".join(self.alternates) or "."
        return f"{self.chrom}:{self.position} {self.identifier or '.'} {self.reference}>{alts}"
