"""INFO field typing, cardinality and Turtle literal rendering."""

import math
import re
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

XSD_DOUBLE = "http://www.w3.org/2001/XMLSchema#double"

MISSING_VALUE = "."

REFERENCE_ALTERNATE_COMMENT = (
    "This field contains two values, the first is the value for the reference allele "
    "and the second is the value for the alternate allele."
)
GENOTYPE_COMMENT = "The field has one value for each possible genotype."

PERCENT_ENCODINGS = {
    "%3A": ":",
    "%3B": ";",
    "%3D": "=",
    "%25": "%",
    "%2C": ",",
    "%0D": "\r",
    "%0A": "\n",
    "%09": "\t",
}
PERCENT_PATTERN = re.compile("|".join(PERCENT_ENCODINGS), re.IGNORECASE)

LITERAL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class InfoCardinalityError(RuntimeError):
    """Raised when INFO values do not match their declared cardinality."""

    pass


class InfoType(str, Enum):
    FLAG = "Flag"
    INTEGER = "Integer"
    FLOAT = "Float"
    STRING = "String"

    @classmethod
    def from_header(cls, type_spec: str | None) -> "InfoType":
        """Map a header Type= value to an InfoType (Character is read as String)."""
        try:
            return cls(type_spec)
        except ValueError:
            return cls.STRING


class CardinalityKind(str, Enum):
    FIXED = "Fixed"
    PER_ALTERNATE_ALLELE = "A"
    PER_ALLELE = "R"
    PER_GENOTYPE = "G"
    OTHER = "."


@dataclass(frozen=True)
class Cardinality:
    """Number of values an INFO key carries, relative to alleles or genotypes."""

    kind: CardinalityKind
    number: int | None = None

    @classmethod
    def fixed(cls, n: int) -> "Cardinality":
        return cls(CardinalityKind.FIXED, n)

    @classmethod
    def from_number(cls, number_spec: str | None) -> "Cardinality":
        """Build a cardinality from a header Number= value."""
        if number_spec == "A":
            return cls(CardinalityKind.PER_ALTERNATE_ALLELE)
        if number_spec == "R":
            return cls(CardinalityKind.PER_ALLELE)
        if number_spec == "G":
            return cls(CardinalityKind.PER_GENOTYPE)
        try:
            return cls.fixed(int(number_spec))
        except (TypeError, ValueError):
            return cls(CardinalityKind.OTHER)


@dataclass
class InfoField:
    """Typed values of one INFO key on one record."""

    key: str
    values: list = field(default_factory=list)
    typ: InfoType = InfoType.STRING
    cardinality: Cardinality = field(default_factory=lambda: Cardinality.fixed(1))


@dataclass
class RenderedInfo:
    """Literal tokens for rdf:value plus an optional rdf:comment."""

    tokens: list[str]
    comment: str | None = None


def decode_percent(value: str) -> str:
    """Decode the percent-encoded characters VCF reserves in INFO strings."""
    if "%" not in value:
        return value
    return PERCENT_PATTERN.sub(lambda m: PERCENT_ENCODINGS[m.group(0).upper()], value)


def escape_literal(value: str) -> str:
    return "".join(LITERAL_ESCAPES.get(c, c) for c in value)


def quote_literal(value: str) -> str:
    return f'"{escape_literal(value)}"'


def format_float(value: float) -> str:
    """Format a float using its shortest single-precision representation."""
    return str(np.float32(value))


def format_value(value, typ: InfoType) -> str:
    """Format a value as plain text, without Turtle quoting."""
    if typ is InfoType.FLAG:
        return "true" if value else "false"
    if typ is InfoType.FLOAT:
        return format_float(value)
    if typ is InfoType.INTEGER:
        return str(int(value))
    return str(value)


def to_literal(value, typ: InfoType) -> str:
    """Render a single value as a Turtle literal."""
    if typ is InfoType.STRING:
        return quote_literal(str(value))
    if typ is InfoType.FLOAT and not math.isfinite(value):
        text = "NaN" if math.isnan(value) else ("INF" if value > 0 else "-INF")
        return f'"{text}"^^<{XSD_DOUBLE}>'
    return format_value(value, typ)


def _literals(values: list, typ: InfoType) -> list[str]:
    # None is a "." entry inside a multi-value field
    return [to_literal(v, typ) for v in values if v is not None]


def render_info(info: InfoField, allele_index: int) -> RenderedInfo:
    """
    Select and render the values of an INFO field for one alternate allele.

    Args:
        info: INFO field of the record
        allele_index: Zero-based index of the alternate allele being written

    Returns:
        RenderedInfo with literal tokens and an optional comment

    Raises:
        InfoCardinalityError: If a Number=R field lacks the reference or
            alternate value
    """
    values = info.values
    kind = info.cardinality.kind

    if kind is CardinalityKind.FIXED:
        n = 1 if info.typ is InfoType.FLAG else (info.cardinality.number or 0)
        return RenderedInfo(_literals(values[:n], info.typ))

    if kind is CardinalityKind.PER_ALTERNATE_ALLELE:
        if allele_index < len(values):
            return RenderedInfo(_literals([values[allele_index]], info.typ))
        return RenderedInfo([])

    if kind is CardinalityKind.PER_ALLELE:
        if len(values) < allele_index + 2:
            raise InfoCardinalityError(
                f"INFO/{info.key} is declared Number=R but has {len(values)} value(s); "
                f"cannot obtain values for reference and alternate allele {allele_index + 1}"
            )
        pair = ",".join(
            MISSING_VALUE if v is None else format_value(v, info.typ)
            for v in (values[0], values[allele_index + 1])
        )
        return RenderedInfo([quote_literal(pair)], REFERENCE_ALTERNATE_COMMENT)

    tokens = _literals(values, info.typ)
    if kind is CardinalityKind.PER_GENOTYPE:
        return RenderedInfo(tokens, GENOTYPE_COMMENT)
    return RenderedInfo(tokens)
