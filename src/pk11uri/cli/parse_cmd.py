"""CLI command for parsing a single PKCS#11 URI.

Usage:
    pk11uri parse "pkcs11:object=my-key;type=private?pin-source=file:/etc/token"
    pk11uri parse --format json "pkcs11:token=my-token"
    pk11uri parse --no-validation "pkcs11:token=a;token=b"
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from rich.console import Console

    from pk11uri.core.parser import ParseOutcome

app = typer.Typer(help="Parse a PKCS#11 URI and show its attributes")


@app.callback(invoke_without_command=True)
def parse_uri(
    uri: str = typer.Argument(
        ...,
        help="PKCS#11 URI to parse (quote it for the shell)",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
    no_validation: bool = typer.Option(
        False,
        "--no-validation",
        help="Skip grammar, enumeration and duplicate checks",
    ),
) -> None:
    """Parse a PKCS#11 URI.

    Prints every attribute found, standard and vendor-specific, followed by
    any advisories. Exits with code 1 if the URI is invalid.
    """
    import orjson
    from rich.console import Console

    from pk11uri.config import settings
    from pk11uri.core.diagnostics import ParseError
    from pk11uri.core.parser import Parser

    console = Console(soft_wrap=True)
    parser = Parser(
        validation=settings.validation and not no_validation,
        advisories=settings.advisories,
    )

    try:
        outcome = parser.inspect(uri)
    except ParseError as e:
        if output_format == "json":
            typer.echo(orjson.dumps({"valid": False, "error": e.to_dict()}).decode())
        else:
            console.print("[red]✗ Invalid PKCS#11 URI[/red]")
            typer.echo(e.render())
        raise typer.Exit(code=1) from e

    if output_format == "json":
        payload = {
            "valid": True,
            "attributes": outcome.mapping.to_dict(),
            "advisories": [a.to_dict() for a in outcome.advisories],
        }
        typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return

    _print_outcome(outcome, console)


def _print_outcome(outcome: ParseOutcome, console: Console) -> None:
    """Render the mapping as a table, then the advisories."""
    from rich.table import Table
    from rich.text import Text

    from pk11uri.core.registry import get_registry

    mapping = outcome.mapping
    table = Table(title="PKCS#11 URI attributes")
    table.add_column("Attribute", style="cyan")
    table.add_column("Component")
    table.add_column("Value", style="green")

    for definition in get_registry():
        value = mapping.get(definition.name)
        if value is not None:
            table.add_row(definition.name, definition.component.value, Text(value))
    for name in mapping.vendor_names():
        for value in mapping.vendor(name) or []:
            table.add_row(Text(name), "vendor", Text(value))

    console.print("[green]✓ Valid PKCS#11 URI[/green]")
    console.print(table)

    for advisory in outcome.advisories:
        console.print(Text(str(advisory), style="yellow"))
