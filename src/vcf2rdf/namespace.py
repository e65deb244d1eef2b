"""RDF namespaces and IRI formatting."""

import re
from dataclasses import dataclass, field

DCT = "http://purl.org/dc/terms/"
FALDO = "http://biohackathon.org/resource/faldo#"
GVO = "http://genome-variation.org/resource#"
HCO = "http://identifiers.org/hco/"
OBO = "http://purl.obolibrary.org/obo/"
RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
SIO = "http://semanticscience.org/resource/"

DEFAULT_PREFIXES = {
    "dct": DCT,
    "faldo": FALDO,
    "gvo": GVO,
    "hco": HCO,
    "obo": OBO,
    "rdf": RDF,
    "rdfs": RDFS,
    "sio": SIO,
}

# Characters not allowed inside an IRIREF
IRI_FORBIDDEN = re.compile(r'[\x00-\x20<>"{}|^`\\]')


def format_iri(value: str) -> str:
    """Wrap a value in angle brackets, percent-encoding characters illegal in an IRI."""
    escaped = IRI_FORBIDDEN.sub(lambda m: "".join(f"%{b:02X}" for b in m.group(0).encode()), value)
    return f"<{escaped}>"


@dataclass
class Namespace:
    """Base IRI and prefix table written at the top of a Turtle document."""

    base: str | None = None
    prefixes: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PREFIXES))

    @classmethod
    def from_config(cls, base: str | None, namespaces: dict[str, str] | None) -> "Namespace":
        """Create a namespace from configuration, merged over the defaults."""
        prefixes = dict(DEFAULT_PREFIXES)
        if namespaces:
            prefixes.update(namespaces)
        return cls(base=base, prefixes=prefixes)

    def preamble(self) -> str:
        """Render @base/@prefix lines, prefix names right-aligned, sorted by name."""
        max_len = max((len(k) for k in self.prefixes), default=0)
        lines = []

        if self.base:
            lines.append(f"@base {'':>{max_len + 4}}{format_iri(self.base)} .")

        for prefix in sorted(self.prefixes):
            lines.append(f"@prefix {prefix:>{max_len}}: {format_iri(self.prefixes[prefix])} .")

        return "\n".join(lines) + "\n\n"
