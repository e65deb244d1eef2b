"""FALDO location encoding for normalized variants.

Mapping from mutation class to location shape:

- SNV:             faldo:ExactPosition at the substituted base
- Insertion:       faldo:InBetweenPosition between the flanking bases
- Deletion, Indel: faldo:Region bounded by in-between positions just
                   outside the affected span
- MNV:             faldo:Region with exact begin/end positions

Reference: Bolleman JT et al. FALDO: a semantic standard for describing the
location of nucleotide and protein feature annotation. J Biomed Semantics.
2016;7:39. DOI: 10.1186/s13326-016-0067-z
"""

from dataclasses import dataclass

from .namespace import format_iri
from .normalizer import MutationClass, NormalizedVariant


@dataclass(frozen=True)
class ExactPosition:
    position: int
    reference: str | None = None


@dataclass(frozen=True)
class InBetweenPosition:
    after: int
    before: int
    reference: str | None = None


@dataclass(frozen=True)
class Region:
    begin: InBetweenPosition | int
    end: InBetweenPosition | int
    reference: str | None = None


FaldoLocation = ExactPosition | InBetweenPosition | Region


def encode_location(
    variant: NormalizedVariant, reference_uri: str | None
) -> FaldoLocation | None:
    """
    Map a normalized variant to its FALDO location.

    Args:
        variant: Normalized variant
        reference_uri: IRI of the reference sequence

    Returns:
        The location, or None when there is no reference IRI to anchor it to
    """
    if not reference_uri:
        return None

    cls = variant.mutation_class
    begin, end = variant.begin, variant.end

    if cls is MutationClass.SNV:
        return ExactPosition(begin, reference_uri)

    if cls is MutationClass.INSERTION:
        return InBetweenPosition(begin, end, reference_uri)

    if cls is MutationClass.MNV:
        return Region(begin, end, reference_uri)

    return Region(
        InBetweenPosition(begin - 1, begin, reference_uri),
        InBetweenPosition(end, end + 1, reference_uri),
        reference_uri,
    )


def _reference_line(reference: str | None, indent: str) -> list[str]:
    if reference is None:
        return []
    return [f"{indent}faldo:reference {format_iri(reference)}"]


def _node_lines(location, indent: str) -> list[str]:
    """Predicate-object lines for a location node, without separators."""
    if isinstance(location, ExactPosition):
        return [
            f"{indent}a faldo:ExactPosition",
            f"{indent}faldo:position {location.position}",
            *_reference_line(location.reference, indent),
        ]

    if isinstance(location, InBetweenPosition):
        return [
            f"{indent}a faldo:InBetweenPosition",
            f"{indent}faldo:after {location.after}",
            f"{indent}faldo:before {location.before}",
            *_reference_line(location.reference, indent),
        ]

    lines = [f"{indent}a faldo:Region"]
    for predicate, bound in (("faldo:begin", location.begin), ("faldo:end", location.end)):
        if isinstance(bound, InBetweenPosition):
            nested = " ;\n".join(_node_lines(bound, indent + "  "))
            lines.append(f"{indent}{predicate} [\n{nested}\n{indent}]")
        else:
            lines.append(f"{indent}{predicate} {bound}")
    lines.extend(_reference_line(location.reference, indent))
    return lines


def render_location(location: FaldoLocation, indent: str = "  ") -> str:
    """Render the faldo:location predicate and its blank node object as Turtle."""
    body = " ;\n".join(_node_lines(location, indent + "  "))
    return f"{indent}faldo:location [\n{body}\n{indent}]"
