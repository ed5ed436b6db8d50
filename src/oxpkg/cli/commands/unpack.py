"""`oxpkg unpack` and `oxpkg pack` commands.

- unpack: write every entry of a package under a directory (pretty XML unless
  `--compact`)
- pack: build a package file from such a directory
"""

from __future__ import annotations

from pathlib import Path

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run
from oxpkg.io.unpacked import pack_directory, unpack_package


def register(app: typer.Typer) -> None:
    @app.command("unpack")
    def unpack(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        out_dir: str = typer.Argument(..., help="Directory to extract entries into."),
        compact: bool = typer.Option(False, "--compact", help="Write the compact stored form of XML entries."),
    ) -> None:
        """Extract a package into a directory."""
        uri = package_uri(package)
        fs = filesystem()
        with package_errors():
            pkg = run(fs.cache.open(uri.location))
        written = unpack_package(pkg, Path(out_dir), pretty=not compact)
        typer.echo(f"{len(written)} entries -> {out_dir}")

    @app.command("pack")
    def pack(
        src_dir: str = typer.Argument(..., help="Directory holding [Content_Types].xml and the parts."),
        out_file: str = typer.Argument(..., help="Output package file."),
    ) -> None:
        """Build a package file from a directory."""
        try:
            with package_errors():
                pkg = pack_directory(Path(src_dir))
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        out = Path(out_file)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(pkg.to_archive_bytes())
        typer.echo(str(out))
