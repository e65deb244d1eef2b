"""Configuration file support for vcf2rdf."""

import json
import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .assembly import Assembly
from .models import Sequence
from .namespace import Namespace

logger = logging.getLogger(__name__)

# Turtle PN_PREFIX, ASCII subset; the empty name is the default prefix
PREFIX_NAME = re.compile(r"\A(?:[A-Za-z](?:[A-Za-z0-9_.-]*[A-Za-z0-9_-])?)?\Z")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class Config:
    """User configuration: namespaces, INFO keys and the sequence reference table."""

    base: str | None = None
    namespaces: dict[str, str] = field(default_factory=dict)
    info: list[str] | None = None
    reference: dict[str, Sequence | None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        validate_config(data)

        reference = {}
        for contig, entry in data.get("reference", {}).items():
            if entry:
                reference[contig] = Sequence(name=entry.get("name"), reference=entry.get("reference"))
            else:
                reference[contig] = None

        return cls(
            base=data.get("base"),
            namespaces=dict(data.get("namespaces", {})),
            info=list(data["info"]) if "info" in data else None,
            reference=reference,
        )

    @property
    def namespace(self) -> Namespace:
        return Namespace.from_config(self.base, self.namespaces)

    def sequence(self, contig: str) -> Sequence | None:
        return self.reference.get(contig)

    def has_missing_references(self) -> bool:
        return any(seq is None or not seq.reference for seq in self.reference.values())


def _require_str(value: Any, name: str) -> None:
    if not isinstance(value, str):
        raise ConfigValidationError(f"{name} must be a string, got {type(value).__name__}")


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    if config_dict.get("base") is not None:
        _require_str(config_dict["base"], "base")

    namespaces = config_dict.get("namespaces", {})
    if not isinstance(namespaces, dict):
        raise ConfigValidationError(
            f"namespaces must be a table, got {type(namespaces).__name__}"
        )
    for prefix, iri in namespaces.items():
        if not PREFIX_NAME.match(prefix):
            raise ConfigValidationError(f"namespaces.{prefix} is not a valid prefix name")
        _require_str(iri, f"namespaces.{prefix}")

    if "info" in config_dict:
        info = config_dict["info"]
        if not isinstance(info, list):
            raise ConfigValidationError(f"info must be a list, got {type(info).__name__}")
        for key in info:
            _require_str(key, "info entries")

    reference = config_dict.get("reference", {})
    if not isinstance(reference, dict):
        raise ConfigValidationError(f"reference must be a table, got {type(reference).__name__}")
    for contig, entry in reference.items():
        if not isinstance(entry, dict):
            raise ConfigValidationError(
                f"reference.{contig} must be a table, got {type(entry).__name__}"
            )
        for key in ("name", "reference"):
            if key in entry:
                _require_str(entry[key], f"reference.{contig}.{key}")


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML configuration file.

    Returns:
        Config instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If any configuration value is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    config = Config.from_dict(toml_data)

    if config.has_missing_references():
        logger.warning(
            "Some reference of sequences are empty. Records on these chromosomes are ignored."
        )

    return config


def _toml_str(value: str) -> str:
    # JSON string escapes are valid TOML basic-string escapes
    return json.dumps(value, ensure_ascii=False)


def _toml_key(key: str) -> str:
    if key and all(c.isalnum() or c in "-_" for c in key):
        return key
    return _toml_str(key)


def generate_config(
    info_keys: list[str], contigs: list[str], assembly: Assembly | None = None
) -> str:
    """Render a commented TOML configuration template for a VCF.

    Args:
        info_keys: INFO keys defined in the VCF header.
        contigs: Contig IDs defined in the VCF header.
        assembly: Optional built-in assembly used to fill in sequence names
            and reference IRIs.

    Returns:
        TOML document text.
    """
    lines = [
        "# Set base IRI if needed.",
        '# base = "http://example.org/"',
        "",
        "# Remove unnecessary keys to convert.",
        "info = [",
        *(f"  {_toml_str(key)}," for key in info_keys),
        "]",
        "",
        "# Additional namespaces.",
        "[namespaces]",
        "",
    ]

    for contig in contigs:
        sequence = assembly.find_sequence(contig) if assembly else None
        lines.append(f"[reference.{_toml_key(contig)}]")
        if sequence is None:
            lines.append(f"name = {_toml_str(contig)}")
            lines.append('# reference = ""')
        else:
            lines.append(f"name = {_toml_str(sequence.name)}")
            lines.append(f"reference = {_toml_str(sequence.reference)}")
        lines.append("")

    return "\n".join(lines)
