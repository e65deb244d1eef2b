"""VCF to Turtle conversion loop."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

from .config import Config
from .models import VariantRecord
from .turtle_writer import SubjectStrategy, TurtleWriter

logger = logging.getLogger(__name__)


@dataclass
class ConvertConfig:
    """Configuration for a conversion run."""

    subject: SubjectStrategy = SubjectStrategy.NONE
    classify: bool = True
    rehearsal: bool = False


@dataclass
class ConversionResult:
    """Counts collected over a conversion run."""

    records: int = 0
    statements: int = 0
    skipped: int = 0
    rehearsal: bool = False

    def to_dict(self) -> dict:
        return {
            "records": self.records,
            "statements": self.statements,
            "skipped": self.skipped,
            "rehearsal": self.rehearsal,
        }


def convert(
    records: Iterable[VariantRecord],
    output: BinaryIO,
    config: Config,
    options: ConvertConfig | None = None,
) -> ConversionResult:
    """Convert records to Turtle, one statement per alternate allele.

    Records are processed one at a time to completion. Records on contigs
    missing from the reference table are skipped with a single warning per
    contig. In rehearsal mode the run stops after the first record.

    Args:
        records: Records in file order.
        output: Binary sink the Turtle document is appended to.
        config: User configuration (namespaces and reference table).
        options: Conversion options.

    Returns:
        ConversionResult with record and statement counts.

    Raises:
        InfoCardinalityError: If INFO metadata contradicts the record values.
        OutputWriteError: If writing to the output fails.
    """
    options = options or ConvertConfig()
    result = ConversionResult(rehearsal=options.rehearsal)
    missing_contigs: set[str] = set()

    with TurtleWriter(
        output,
        namespace=config.namespace,
        subject=options.subject,
        classify=options.classify,
    ) as writer:
        for record in records:
            result.records += 1

            if record.chrom not in config.reference:
                if record.chrom not in missing_contigs:
                    logger.warning(
                        "Chromosome %s is not in the reference table; its records are ignored",
                        record.chrom,
                    )
                    missing_contigs.add(record.chrom)
                result.skipped += max(len(record.alternates), 1)
            else:
                writer.write_record(record, config.sequence(record.chrom))

            if options.rehearsal:
                logger.info("Rehearsal mode: stopping after the first record")
                break

        result.statements = writer.statements_written
        result.skipped += writer.alleles_skipped

    logger.debug(
        "Converted %d records into %d statements (%d alleles skipped)",
        result.records,
        result.statements,
        result.skipped,
    )
    return result
