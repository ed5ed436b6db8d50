"""`oxpkg put`, `oxpkg rm` and `oxpkg mv` commands.

Each command edits the package in place: the change is applied to the
in-memory package, which is then re-serialized and written back to the file.
"""

from __future__ import annotations

from pathlib import Path

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run


def register(app: typer.Typer) -> None:
    @app.command("put")
    def put(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        entry: str = typer.Argument(..., help="Entry name to create or replace."),
        src: str = typer.Argument(..., help="Local file whose bytes become the entry."),
    ) -> None:
        """Create or replace an entry."""
        src_p = Path(src)
        if not src_p.is_file():
            raise typer.BadParameter(f"source file not found: {src}")
        uri = package_uri(package, entry)
        fs = filesystem()
        with package_errors():
            run(fs.write_file(uri, src_p.read_bytes()))
        typer.echo(uri.entry_name)

    @app.command("rm")
    def rm(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        path: str = typer.Argument(..., help="Entry name, or directory with --recursive."),
        recursive: bool = typer.Option(False, "--recursive", "-r", help="Remove every entry below PATH."),
    ) -> None:
        """Remove entries."""
        uri = package_uri(package, path)
        fs = filesystem()
        with package_errors():
            removed = run(fs.delete(uri, recursive=recursive))
        for name in removed:
            typer.echo(name)

    @app.command("mv")
    def mv(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        old: str = typer.Argument(..., help="Current entry (or directory) name."),
        new: str = typer.Argument(..., help="New entry (or directory) name."),
    ) -> None:
        """Rename an entry or directory within the package."""
        src = package_uri(package, old)
        dst = package_uri(package, new)
        fs = filesystem()
        with package_errors():
            moves = run(fs.rename(src, dst))
        for old_name, new_name in moves:
            typer.echo(f"{old_name} -> {new_name}")
