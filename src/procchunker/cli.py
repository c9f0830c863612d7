"""Command line interface for procchunker."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from procchunker.config import AppConfig
from procchunker.errors import ChunkingError
from procchunker.ingestion.factory import create_chunker
from procchunker.ingestion.markup import convert_docx_to_html
from procchunker.ingestion.sections import classify_sections
from procchunker.ingestion.word_loader import WordChunker
from procchunker.runner import ChunkRunner


console = Console()
app = typer.Typer(help="procchunker - split procedure documents into retrieval chunks")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


@app.command()
def chunk(
    inputs: List[Path] = typer.Argument(
        ..., help="Documents or directories to chunk.", resolve_path=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write chunks as JSON lines to this file"
    ),
    target_words: int = typer.Option(AppConfig().target_words, help="Target words per chunk"),
    overlap_words: int = typer.Option(AppConfig().overlap_words, help="Words repeated between chunks"),
    flat: bool = typer.Option(False, "--flat", help="Ignore section structure"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Chunk one or more Word or PDF procedures."""
    _setup_logging(verbose)
    try:
        config = AppConfig(
            target_words=target_words,
            overlap_words=overlap_words,
            section_aware=not flat,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    stats = ChunkRunner(config).run(inputs)
    if not stats.processed_files:
        console.print("[yellow]No documents found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("Number")
    table.add_column("Chunks")
    table.add_column("Status")
    for path in stats.processed_files:
        chunks = stats.chunks.get(path, [])
        if chunks:
            table.add_row(str(path.name), chunks[0].document_number, str(len(chunks)), "chunked")
        elif path in stats.errors:
            table.add_row(str(path.name), "", "0", f"[red]{stats.errors[path]}[/red]")
        else:
            table.add_row(str(path.name), "", "0", "[yellow]skipped[/yellow]")
    console.print(table)

    if output is not None:
        _ensure_parent(output)
        with output.open("w", encoding="utf-8") as handle:
            for chunks in stats.chunks.values():
                for item in chunks:
                    handle.write(json.dumps(item.to_dict(), ensure_ascii=False) + "\n")
        console.print(f"Wrote {stats.total_chunks} chunks to [bold]{output}[/bold]")

    console.print(
        f"Chunked: {stats.chunked}, skipped: {stats.skipped}, failed: {stats.failed}"
    )


@app.command()
def inspect(
    document: Path = typer.Argument(..., help="Document to inspect", exists=True, dir_okay=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show header metadata and detected section structure."""
    _setup_logging(verbose)
    try:
        chunker = create_chunker(document)
    except ChunkingError as exc:
        raise typer.BadParameter(str(exc)) from exc

    metadata = chunker.document_metadata
    console.print(f"[bold]Title:[/bold] {metadata.document_title}")
    console.print(f"[bold]Number:[/bold] {metadata.document_number}")
    console.print(f"[bold]Effective:[/bold] {metadata.effective_date}")
    console.print(f"[bold]Revision:[/bold] {metadata.revision}")

    if not isinstance(chunker, WordChunker):
        return

    result = classify_sections(convert_docx_to_html(chunker.data))
    console.print(f"[bold]Strategy:[/bold] {result.strategy} (confidence {result.confidence:.2f})")
    if not result.sections:
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Marker")
    table.add_column("Title")
    table.add_column("Words")
    for section in result.sections:
        table.add_row(
            section.heading.marker or "",
            section.section_title,
            str(len(section.content.split())),
        )
    console.print(table)
