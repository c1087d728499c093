"""CLI command for validating files of PKCS#11 URIs.

Each file holds one URI per line; blank lines and lines starting with ``#``
are skipped.

Usage:
    pk11uri validate uris.txt
    pk11uri validate --recursive configs/
    pk11uri validate --format json uris.txt
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypedDict

import typer

if TYPE_CHECKING:
    from rich.console import Console

    from pk11uri.core.parser import Parser


class ValidationResult(TypedDict):
    file: str
    line: int
    uri: str
    valid: bool
    error: dict[str, Any] | None
    advisories: list[str]


app = typer.Typer(help="Validate files containing PKCS#11 URIs")


@app.callback(invoke_without_command=True)
def validate(
    paths: list[Path] = typer.Argument(
        ...,
        help="Files (one URI per line) or directories to validate",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Recursively search directories for .txt files",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show the full diagnostic for each invalid URI",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
) -> None:
    """Validate every PKCS#11 URI found in the given files.

    Exits with code 1 if any URI is invalid.
    """
    import orjson
    from rich.console import Console

    from pk11uri.core.parser import get_parser

    console = Console(soft_wrap=True)

    # Collect all files to validate
    files_to_validate: list[Path] = []
    for path in paths:
        if path.is_file():
            files_to_validate.append(path)
        elif path.is_dir():
            pattern = "**/*.txt" if recursive else "*.txt"
            files_to_validate.extend(sorted(path.glob(pattern)))
        else:
            console.print(f"[red]Path not found:[/red] {path}")

    if not files_to_validate:
        console.print("[yellow]No files found to validate[/yellow]")
        raise typer.Exit(code=1)

    parser = get_parser()
    results: list[ValidationResult] = []
    for file_path in files_to_validate:
        results.extend(
            _validate_file(
                file_path, parser, verbose, None if output_format == "json" else console
            )
        )

    passed = sum(1 for r in results if r["valid"])
    failed = len(results) - passed

    if output_format == "json":
        typer.echo(orjson.dumps(results, option=orjson.OPT_INDENT_2).decode())
    else:
        console.print()
        console.print("[bold]Summary:[/bold]")
        console.print(f"  [green]Passed:[/green] {passed}")
        console.print(f"  [red]Failed:[/red] {failed}")
        console.print(f"  [blue]Total:[/blue]  {len(results)}")

    if failed > 0:
        raise typer.Exit(code=1)


def _validate_file(
    file_path: Path,
    parser: Parser,
    verbose: bool,
    console: Console | None,
) -> list[ValidationResult]:
    """Validate each URI line of a single file; console None means quiet."""
    from rich.text import Text

    from pk11uri.core.advisories import emit
    from pk11uri.core.diagnostics import ParseError
    from pk11uri.observability.logging import LogContext

    results: list[ValidationResult] = []
    for number, line in enumerate(file_path.read_text(encoding="utf-8").splitlines(), start=1):
        uri = line.strip()
        if not uri or uri.startswith("#"):
            continue

        result: ValidationResult = {
            "file": str(file_path),
            "line": number,
            "uri": uri,
            "valid": False,
            "error": None,
            "advisories": [],
        }
        location = f"{file_path}:{number}"

        with LogContext(uri=uri):
            try:
                outcome = parser.inspect(uri)
            except ParseError as e:
                result["error"] = e.to_dict()
                if console is not None:
                    console.print(Text.assemble(("✗ ", "red"), f"{location}: {e.violation}"))
                    if verbose:
                        console.print(Text(e.render()))
            else:
                emit(outcome.advisories)
                result["valid"] = True
                result["advisories"] = [str(a) for a in outcome.advisories]
                if console is not None:
                    console.print(Text.assemble(("✓ ", "green"), location))

        results.append(result)
    return results
