"""CLI commands for pk11uri.

Provides command-line interface using Typer:
- pk11uri parse: Parse a single PKCS#11 URI and show its attributes
- pk11uri validate: Validate files containing one PKCS#11 URI per line

Usage:
    pk11uri --help
    pk11uri parse "pkcs11:token=my-token;object=my-certificate;type=cert"
    pk11uri validate --format json uris.txt
"""

import typer

from pk11uri.cli.parse_cmd import app as parse_app
from pk11uri.cli.validate_cmd import app as validate_app

# Main CLI application
app = typer.Typer(
    name="pk11uri",
    help="pk11uri: parse and validate PKCS#11 URIs (RFC 7512)",
    no_args_is_help=True,
)

# Add subcommands
app.add_typer(parse_app, name="parse")
app.add_typer(validate_app, name="validate")


@app.callback()
def callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (defaults to PK11URI_LOG_LEVEL)",
    ),
    log_json: bool | None = typer.Option(
        None,
        "--log-json/--no-log-json",
        help="Emit JSON log lines (defaults to PK11URI_LOG_JSON)",
    ),
) -> None:
    """pk11uri: parse and validate PKCS#11 URIs (RFC 7512)."""
    from pk11uri.config import settings
    from pk11uri.observability.logging import configure_logging

    configure_logging(
        json_format=settings.log_json if log_json is None else log_json,
        level=log_level or settings.log_level,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
