"""`oxpkg ls` command.

Lists the immediate children of a directory inside a package (directories
first, then files, each group sorted by name; directories end in `/`), or with
`--recursive` every entry name at or below the path.
"""

from __future__ import annotations

import typer

from oxpkg.cli.commands._session import filesystem, package_errors, package_uri, run
from oxpkg.core import paths
from oxpkg.core.errors import NotFound
from oxpkg.core.paths import NodeKind


def register(app: typer.Typer) -> None:
    @app.command("ls")
    def ls(
        package: str = typer.Argument(..., help="Path to a .docx/.pptx/.xlsx package."),
        path: str = typer.Argument("/", help="Directory inside the package."),
        recursive: bool = typer.Option(False, "--recursive", "-r", help="List every entry below PATH."),
    ) -> None:
        """List package contents."""
        uri = package_uri(package, path)
        fs = filesystem()
        with package_errors():
            if recursive:
                pkg = run(fs.cache.open(uri.location))
                names = paths.entries_under(pkg.all_entry_names(), uri.entry_name, recursive=True)
                if not names:
                    raise NotFound(uri.entry_name)
                for name in names:
                    typer.echo(name)
                return

            children = run(fs.list_children(uri))

        ordered = sorted(children, key=lambda item: (item[1] is NodeKind.FILE, item[0]))
        for name, kind in ordered:
            typer.echo(name + "/" if kind is NodeKind.DIRECTORY else name)
