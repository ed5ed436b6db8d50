"""`oxpkg inspect` command.

Prints the entry inventory (name, kind, content type, size, sha256) as a
table, or writes it as CSV with `--csv`. `--relationships` switches to the
relationship table.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run
from oxpkg.io.inventory import entry_inventory, relationships_table, write_inventory_csv


def register(app: typer.Typer) -> None:
    @app.command("inspect")
    def inspect(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        csv: Optional[str] = typer.Option(None, "--csv", help="Write the table as CSV to this path."),
        relationships: bool = typer.Option(False, "--relationships", help="Show relationships instead of entries."),
    ) -> None:
        """Summarize package entries."""
        uri = package_uri(package)
        fs = filesystem()
        with package_errors():
            pkg = run(fs.cache.open(uri.location))
            df = relationships_table(pkg) if relationships else entry_inventory(pkg)

        if csv:
            write_inventory_csv(Path(csv), df)
            typer.echo(csv)
        else:
            typer.echo(df.to_string(index=False))
