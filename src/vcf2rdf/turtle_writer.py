"""Turtle serialization of variant records as FALDO-located alterations."""

import logging
import math
import re
from enum import Enum
from typing import BinaryIO

from .faldo import encode_location, render_location
from .info import format_float, quote_literal, render_info
from .models import Sequence, VariantRecord
from .namespace import Namespace, format_iri
from .normalizer import MISSING_ALLELE, Alteration, iter_alterations

logger = logging.getLogger(__name__)

BUFFER_SIZE = 40 * 1024
GENERIC_TYPE = "Variation"

IUPAC_ALLELE = re.compile(r"\A[ACGTURYKMSWBDHVN]+\Z")


class OutputWriteError(Exception):
    """Raised when the output sink fails; the I/O error is chained as the cause."""

    pass


class SubjectStrategy(str, Enum):
    """How the subject of each statement is built."""

    ID = "id"
    LOCATION = "location"
    REFERENCE = "reference"
    NORMALIZED_LOCATION = "normalized-location"
    NORMALIZED_REFERENCE = "normalized-reference"
    NONE = "none"


class HeaderState(Enum):
    NOT_WRITTEN = "not_written"
    WRITTEN = "written"


def format_subject(
    strategy: SubjectStrategy,
    record: VariantRecord,
    sequence: Sequence | None,
    alteration: Alteration,
) -> str | None:
    """
    Build the subject IRI text for one allele.

    Args:
        strategy: Subject strategy selected at configuration time
        record: Record the allele belongs to
        sequence: Sequence the record's chromosome maps to
        alteration: The allele, raw and normalized

    Returns:
        Unbracketed IRI, or None when a blank node should be used
    """
    if strategy is SubjectStrategy.ID:
        if not record.identifier or record.identifier == MISSING_ALLELE:
            return None
        return record.identifier

    if sequence is None:
        return None

    if strategy in (SubjectStrategy.LOCATION, SubjectStrategy.REFERENCE):
        raw = alteration.raw
        position, reference, alternate = raw.position, raw.reference, raw.alternate
    elif strategy in (
        SubjectStrategy.NORMALIZED_LOCATION,
        SubjectStrategy.NORMALIZED_REFERENCE,
    ):
        normalized = alteration.normalized
        if normalized is None:
            return None
        position, reference, alternate = (
            normalized.position,
            normalized.reference,
            normalized.alternate,
        )
    else:
        return None

    if strategy in (SubjectStrategy.LOCATION, SubjectStrategy.NORMALIZED_LOCATION):
        if not sequence.name:
            return None
        return f"{sequence.name}-{position}-{reference}-{alternate}"

    if not sequence.reference:
        return None
    return f"{sequence.reference}#{position}-{reference}-{alternate}"


class TurtleWriter:
    """Append-only Turtle writer emitting one statement per alternate allele.

    The namespace preamble is written once, right before the first statement.
    """

    def __init__(
        self,
        output: BinaryIO,
        namespace: Namespace | None = None,
        subject: SubjectStrategy = SubjectStrategy.NONE,
        classify: bool = True,
        buffer_size: int = BUFFER_SIZE,
    ):
        self.output = output
        self.namespace = namespace or Namespace()
        self.subject = subject
        self.classify = classify
        self.buffer_size = buffer_size
        self.header_state = HeaderState.NOT_WRITTEN
        self.statements_written = 0
        self.alleles_skipped = 0
        self._buffer: list[str] = []
        self._buffered = 0

    def __enter__(self) -> "TurtleWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.flush()

    def write_record(self, record: VariantRecord, sequence: Sequence | None) -> int:
        """
        Write a statement for every convertible alternate allele of a record.

        Alleles with empty or non-nucleotide bases, alleles that cannot be
        normalized and alleles without a reference sequence IRI are skipped
        with a warning.

        Returns:
            Number of statements written for this record

        Raises:
            InfoCardinalityError: If INFO values contradict their declared Number
            OutputWriteError: If writing to the output fails
        """
        written = 0

        for alteration in iter_alterations(record):
            statement = self._statement(record, sequence, alteration)
            if statement is None:
                self.alleles_skipped += 1
                continue

            if self.header_state is HeaderState.NOT_WRITTEN:
                self._write(self.namespace.preamble())
                self.header_state = HeaderState.WRITTEN

            self._write(statement)
            written += 1

        self.statements_written += written
        return written

    def _statement(
        self, record: VariantRecord, sequence: Sequence | None, alteration: Alteration
    ) -> str | None:
        raw = alteration.raw
        reference = "" if raw.reference == MISSING_ALLELE else raw.reference
        alternate = "" if raw.alternate == MISSING_ALLELE else raw.alternate

        if not reference:
            logger.warning("Reference bases must not be empty. %s", record)
            return None
        if not alternate:
            logger.warning("Alternate bases must not be empty. %s", record)
            return None
        if not IUPAC_ALLELE.match(reference):
            logger.warning("Reference bases contain non-nucleotide characters. %s", record)
            return None
        if not IUPAC_ALLELE.match(alternate):
            logger.warning("Alternate bases contain non-nucleotide characters. %s", record)
            return None

        normalized = alteration.normalized
        if normalized is None:
            logger.warning("%s %s", alteration.error, record)
            return None

        location = encode_location(normalized, sequence.reference if sequence else None)
        if location is None:
            logger.warning("Reference sequence IRI not found for %s", record.chrom)
            return None

        subject = format_subject(self.subject, record, sequence, alteration)
        rdf_type = normalized.mutation_class.value if self.classify else GENERIC_TYPE

        lines = [f"{format_iri(subject) if subject else '[]'} a gvo:{rdf_type}"]

        if record.identifier and record.identifier != MISSING_ALLELE:
            lines.append(f"  dct:identifier {quote_literal(record.identifier)}")

        lines.append(render_location(location))
        lines.append(f"  gvo:ref {quote_literal(normalized.reference)}")
        lines.append(f"  gvo:alt {quote_literal(normalized.alternate)}")

        if record.qual is not None and math.isfinite(record.qual):
            lines.append(f"  gvo:qual {format_float(record.qual)}")

        if record.filters:
            lines.append("  gvo:filter " + ", ".join(quote_literal(f) for f in record.filters))

        info_nodes = self._info_nodes(record, alteration.allele_index)
        if info_nodes:
            lines.append("  gvo:info " + ", ".join(info_nodes))

        return " ;\n".join(lines) + " .\n\n"

    def _info_nodes(self, record: VariantRecord, allele_index: int) -> list[str]:
        nodes = []
        for info in record.info:
            rendered = render_info(info, allele_index)
            if not rendered.tokens:
                continue

            parts = [
                f"    rdfs:label {quote_literal(info.key)}",
                f"    rdf:value {', '.join(rendered.tokens)}",
            ]
            if rendered.comment:
                parts.append(f"    rdf:comment {quote_literal(rendered.comment)}")

            nodes.append("[\n" + " ;\n".join(parts) + "\n  ]")
        return nodes

    def _write(self, text: str) -> None:
        self._buffer.append(text)
        self._buffered += len(text)
        if self._buffered >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered statements to the output."""
        if self._buffer:
            data = "".join(self._buffer).encode("utf-8")
            self._buffer.clear()
            self._buffered = 0
            try:
                self.output.write(data)
            except OSError as e:
                raise OutputWriteError(f"Failed to write output: {e}") from e

        try:
            self.output.flush()
        except OSError as e:
            raise OutputWriteError(f"Failed to flush output: {e}") from e
