"""vcf2rdf: Convert VCF variant records to FALDO-based RDF (Turtle)."""

__version__ = "0.1.0"
