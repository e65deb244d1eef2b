"""vcf2rdf: VCF to RDF (Turtle) converter CLI."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from . import __version__
from .assembly import AssemblyName, get_assembly
from .config import ConfigValidationError, generate_config, load_config
from .converter import ConvertConfig, convert
from .info import InfoCardinalityError
from .turtle_writer import OutputWriteError, SubjectStrategy
from .vcf_parser import VCFReader


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(name="vcf2rdf", help="Convert VCF variant records to RDF (Turtle)")
console = Console(stderr=True)


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool, log_file: Path | None = None) -> None:
    """Configure logging on stderr based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("vcf2rdf").setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logging.getLogger("vcf2rdf").addHandler(file_handler)


def _check_input(vcf_path: Path) -> None:
    if str(vcf_path) != "-" and not vcf_path.exists():
        console.print(f"[red]Error: VCF file not found: {vcf_path}[/red]")
        raise typer.Exit(1)


@app.command(name="convert")
def convert_command(
    vcf_path: Path = typer.Argument(..., help="Path to VCF/BCF file ('-' for stdin)"),
    config_file: Path = typer.Option(..., "--config", "-c", help="TOML configuration file"),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write Turtle to file (default: stdout)")
    ] = None,
    subject: SubjectStrategy = typer.Option(
        SubjectStrategy.NONE, "--subject", "-s", help="How to build statement subjects"
    ),
    classify: bool = typer.Option(
        True, "--classify/--no-classify", help="Type each allele with its mutation class"
    ),
    rehearsal: bool = typer.Option(
        False, "--rehearsal", help="Stop after the first record (check configuration)"
    ),
    summary: bool = typer.Option(False, "--summary", help="Print conversion counts as JSON"),
    log_file: Annotated[Path | None, typer.Option("--log", help="Write log to file")] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report warnings and errors"),
) -> None:
    """Convert a VCF file to Turtle.

    Each alternate allele becomes one statement with a FALDO location. Records on
    chromosomes without a reference IRI in the configuration are skipped.
    """
    setup_logging(verbose, quiet, log_file)
    _check_input(vcf_path)

    try:
        config = load_config(config_file)
    except (FileNotFoundError, ConfigValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    options = ConvertConfig(subject=subject, classify=classify, rehearsal=rehearsal)

    try:
        with VCFReader(vcf_path, info_keys=config.info) as reader:
            if output is None:
                result = convert(reader, sys.stdout.buffer, config, options)
            else:
                with open(output, "wb") as sink:
                    result = convert(reader, sink, config, options)
    except InfoCardinalityError as e:
        console.print(f"[red]Error: Malformed INFO metadata: {e}[/red]")
        raise typer.Exit(1) from None
    except OutputWriteError as e:
        console.print(f"[red]Error: {e} (caused by {e.__cause__!r})[/red]")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if summary:
        console.print(json.dumps(result.to_dict(), indent=2))
    elif not quiet:
        console.print(
            f"[green]✓[/green] Wrote {result.statements:,} statements "
            f"from {result.records:,} records ({result.skipped:,} alleles skipped)"
        )


generate_app = typer.Typer(help="Generate files that help with conversion")
app.add_typer(generate_app, name="generate")


@generate_app.command("config")
def generate_config_command(
    vcf_path: Path = typer.Argument(..., help="Path to VCF/BCF file"),
    assembly: Annotated[
        AssemblyName | None,
        typer.Option("--assembly", "-a", help="Fill in sequence references from an assembly"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write configuration to file")
    ] = None,
) -> None:
    """Generate a TOML configuration template from a VCF header."""
    _check_input(vcf_path)

    try:
        with VCFReader(vcf_path) as reader:
            text = generate_config(
                reader.info_keys,
                list(reader.contigs),
                get_assembly(assembly) if assembly else None,
            )
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if output:
        output.write_text(text)
        console.print(f"[green]✓[/green] Configuration written to {output}")
    else:
        print(text)


stat_app = typer.Typer(help="Obtain VCF statistics")
app.add_typer(stat_app, name="stat")


@stat_app.command("count")
def count_command(
    vcf_path: Path = typer.Argument(..., help="Path to VCF/BCF file"),
) -> None:
    """Count records in a VCF file."""
    _check_input(vcf_path)

    try:
        with VCFReader(vcf_path, info_keys=[]) as reader:
            print(reader.count())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


if __name__ == "__main__":
    app()
