"""`oxpkg cat` command: write one entry to stdout (pretty XML by default)."""

from __future__ import annotations

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run


def register(app: typer.Typer) -> None:
    @app.command("cat")
    def cat(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        entry: str = typer.Argument(..., help="Entry name, e.g. /word/document.xml."),
        compact: bool = typer.Option(False, "--compact", help="Emit the compact form stored in the archive."),
    ) -> None:
        """Print an entry."""
        uri = package_uri(package, entry)
        fs = filesystem()
        with package_errors():
            if compact:
                pkg = run(fs.cache.open(uri.location))
                data = pkg.entry_bytes_for_save(uri.entry_name)
            else:
                data = run(fs.read_file(uri))
        typer.echo(data, nl=False)
