"""VCF reading: header definitions and typed records via cyvcf2."""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from cyvcf2 import VCF

from .info import MISSING_VALUE, Cardinality, InfoField, InfoType, decode_percent
from .models import VariantRecord

logger = logging.getLogger(__name__)

STDIN = "-"


class VCFHeaderParser:
    """Parser for VCF header information."""

    def parse_info_fields(self, header_lines: list[str]) -> dict[str, dict[str, str]]:
        """Parse INFO field definitions from header lines."""
        return self._parse_structured(header_lines, re.compile(r"##INFO=<(.+)>"))

    def parse_filter_fields(self, header_lines: list[str]) -> dict[str, dict[str, str]]:
        """Parse FILTER definitions from header lines."""
        return self._parse_structured(header_lines, re.compile(r"##FILTER=<(.+)>"))

    def parse_contigs(self, header_lines: list[str]) -> dict[str, dict[str, str]]:
        """Parse contig definitions from header lines."""
        return self._parse_structured(header_lines, re.compile(r"##contig=<(.+)>"))

    def _parse_structured(
        self, header_lines: list[str], pattern: re.Pattern
    ) -> dict[str, dict[str, str]]:
        fields = {}

        for line in header_lines:
            match = pattern.match(line)
            if match:
                field_def = self._parse_field_definition(match.group(1))
                if field_def:
                    fields[field_def["ID"]] = {k: v for k, v in field_def.items() if k != "ID"}

        return fields

    def _parse_field_definition(self, field_string: str) -> dict[str, str] | None:
        """Parse a field definition string like 'ID=AC,Number=A,Type=Integer,Description="..."'"""
        field_def = {}

        # Handle quoted descriptions that may contain commas
        parts = []
        current_part = ""
        in_quotes = False

        for char in field_string:
            if char == '"':
                in_quotes = not in_quotes
                current_part += char
            elif char == "," and not in_quotes:
                parts.append(current_part)
                current_part = ""
            else:
                current_part += char

        if current_part:
            parts.append(current_part)

        for part in parts:
            if "=" in part:
                key, value = part.split("=", 1)
                if value.startswith('"') and value.endswith('"') and len(value) >= 2:
                    value = value[1:-1]
                field_def[key] = value

        return field_def if "ID" in field_def else None


def extract_info(info, key: str, typ: InfoType, cardinality: Cardinality) -> InfoField | None:
    """
    Read one INFO key from a cyvcf2 INFO mapping as a typed field.

    Flags are always reported (True or False). Other keys absent from the
    record yield None. String values are split on commas and percent-decoded.
    A "." entry inside a multi-value field is kept as None.
    """
    value = info.get(key)

    if typ is InfoType.FLAG:
        return InfoField(key, [bool(value)], typ, cardinality)

    if value is None:
        return None

    if typ is InfoType.STRING:
        values = [
            None if v == MISSING_VALUE else decode_percent(v) for v in str(value).split(",")
        ]
    elif isinstance(value, (tuple, list)):
        values = list(value)
    else:
        values = [value]

    return InfoField(key, values, typ, cardinality)


class VCFReader:
    """Streaming reader yielding VariantRecord objects from a VCF/BCF file."""

    def __init__(self, vcf_path: Path | str, info_keys: list[str] | None = None):
        self.vcf_path = str(vcf_path)

        if self.vcf_path != STDIN and not Path(self.vcf_path).exists():
            raise FileNotFoundError(f"VCF file not found: {self.vcf_path}")

        self._vcf = VCF(self.vcf_path)

        header_lines = self._vcf.raw_header.splitlines()
        header_parser = VCFHeaderParser()
        self.info_definitions = header_parser.parse_info_fields(header_lines)
        self.filters = header_parser.parse_filter_fields(header_lines)
        self.contigs = header_parser.parse_contigs(header_lines)

        self.info_keys = list(info_keys) if info_keys is not None else list(self.info_definitions)
        self._info_types = self._resolve_info_types(self.info_keys)

    def _resolve_info_types(self, keys: list[str]) -> dict[str, tuple[InfoType, Cardinality]]:
        types = {}
        for key in keys:
            definition = self.info_definitions.get(key)
            if definition is None:
                logger.warning("INFO/%s is not defined in the header; reading it as a string", key)
                types[key] = (InfoType.STRING, Cardinality.fixed(1))
            else:
                types[key] = (
                    InfoType.from_header(definition.get("Type")),
                    Cardinality.from_number(definition.get("Number")),
                )
        return types

    def __enter__(self) -> "VCFReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[VariantRecord]:
        return self.records()

    def records(self) -> Iterator[VariantRecord]:
        """Iterate over all records in file order."""
        for variant in self._vcf:
            yield self.to_record(variant)

    def to_record(self, variant) -> VariantRecord:
        """Convert a cyvcf2 variant into a VariantRecord."""
        info = []
        for key in self.info_keys:
            typ, cardinality = self._info_types[key]
            field = extract_info(variant.INFO, key, typ, cardinality)
            if field is not None:
                info.append(field)

        filters = [f for f in (variant.FILTERS or []) if f and f != "."]

        return VariantRecord(
            chrom=variant.CHROM,
            position=variant.POS,
            alleles=[variant.REF, *variant.ALT],
            identifier=variant.ID if variant.ID and variant.ID != "." else None,
            qual=variant.QUAL,
            filters=filters,
            info=info,
        )

    def count(self) -> int:
        """Count records by reading the file once from the start."""
        if self.vcf_path == STDIN:
            return sum(1 for _ in self._vcf)

        vcf = VCF(self.vcf_path)
        try:
            return sum(1 for _ in vcf)
        finally:
            vcf.close()

    def close(self) -> None:
        self._vcf.close()
