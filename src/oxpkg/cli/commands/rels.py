"""`oxpkg rels` command.

Prints the relationship records of one part, or of the package itself
(`/_rels/.rels`) when no entry is given. One tab-separated line per record:
`id  type  target_name`, with `(external)` appended for external targets.
"""

from __future__ import annotations

from typing import Optional

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run


def register(app: typer.Typer) -> None:
    @app.command("rels")
    def rels(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        entry: Optional[str] = typer.Argument(None, help="Owning part; omit for package-level relationships."),
    ) -> None:
        """Show relationship records."""
        uri = package_uri(package, entry or "/")
        fs = filesystem()
        with package_errors():
            pkg = run(fs.cache.open(uri.location))
            records = pkg.package_relationships() if uri.is_root else pkg.relationships_of(uri.entry_name)

        for rec in records:
            line = f"{rec.id}\t{rec.type}\t{rec.target_name}"
            if rec.external:
                line += "\t(external)"
            typer.echo(line)
