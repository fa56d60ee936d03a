"""Command-line interface for inspecting and editing stored trees."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.table import Table

from gitree_core.blob import Blob
from gitree_core.config import GitreeConfig, StoreConfig, load_config
from gitree_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from gitree_core.errors import GitreeError
from gitree_core.oid import Oid
from gitree_core.store import DulwichObjectStore, open_store
from gitree_core.tree import (
    BlobEntry,
    Tree,
    blob_ref_with_mode,
    create_tree,
    load_tree,
    lookup_entry,
    persist_tree,
    remove_from_tree,
    update_tree,
)

app = typer.Typer(
    name="gitree",
    help="Content-addressed directory trees over a git object store.",
)

config_app = typer.Typer(help="Manage gitree configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GitreeConfig | None = None
_store_path: str | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Never imported by write-tree
_SKIP_DIRS = {".git", ".gitree"}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "level": record.levelname.lower(),
                "logger": record.name,
                "message": record.getMessage(),
            }
        )


def _get_config() -> GitreeConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(cfg: GitreeConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _store_config() -> StoreConfig:
    """The configured store, with --store forcing a disk store at that path."""
    store_cfg = _get_config().store
    if _store_path is not None:
        store_cfg = store_cfg.model_copy(update={"backend": "disk", "path": _store_path})
    return store_cfg


def _open_store() -> DulwichObjectStore:
    return open_store(_store_config())


def _parse_oid(value: str) -> Oid:
    try:
        return Oid.parse(value)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _load_or_fail(store: DulwichObjectStore, oid: Oid) -> Tree:
    tree = await load_tree(store, oid)
    if tree is None:
        raise GitreeError(f"tree {oid.hex} not found")
    return tree


def _run(coro):
    """Run *coro*, reporting gitree errors as a clean exit code."""
    try:
        return asyncio.run(coro)
    except GitreeError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _is_executable(path: Path) -> bool:
    return bool(path.stat().st_mode & 0o111)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to gitree.yaml")
    ] = None,
    store: Annotated[
        str | None, typer.Option("--store", "-s", help="Object directory (overrides config)")
    ] = None,
) -> None:
    """Global options."""
    global _config, _store_path
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _store_path = store
    _configure_logging(_config)


@app.command()
def init() -> None:
    """Create the object directory if it does not exist."""
    store_cfg = _store_config()
    open_store(store_cfg).close()
    if store_cfg.backend == "memory":
        rprint("[yellow]Memory backend configured;[/yellow] objects are discarded on exit.")
        return
    rprint(f"[green]Object store ready[/green] at {store_cfg.path}")


@app.command("write-tree")
def write_tree(
    directory: Annotated[str, typer.Argument(help="Directory to import")] = ".",
) -> None:
    """Import a directory into the store and print its tree id."""
    root = Path(directory).resolve()
    if not root.is_dir():
        rprint(f"[red]Error:[/red] {root} is not a directory")
        raise typer.Exit(1)

    async def _import() -> Tree:
        with _open_store() as store:
            tree = create_tree(store)
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
                for fname in sorted(filenames):
                    fpath = Path(dirpath) / fname
                    if fpath.is_symlink() or not fpath.is_file():
                        continue
                    rel = fpath.relative_to(root).as_posix()
                    entry = blob_ref_with_mode(Blob(fpath.read_bytes()), _is_executable(fpath))
                    tree = await update_tree(tree, rel, entry)
            return await persist_tree(tree, _get_config().serializer)

    tree = _run(_import())
    if tree.oid is None:
        rprint("[yellow]Directory is empty; no tree written.[/yellow]")
        return
    typer.echo(tree.oid.hex)


@app.command()
def ls(
    tree_id: Annotated[str, typer.Argument(help="Tree id (a unique prefix is enough)")],
    path: Annotated[str, typer.Argument(help="Path inside the tree")] = "",
) -> None:
    """List the entries of a stored tree."""
    oid = _parse_oid(tree_id)

    async def _list():
        with _open_store() as store:
            tree = await _load_or_fail(store, oid)
            return await lookup_entry(tree, path)

    entry = _run(_list())
    if entry is None:
        rprint(f"[red]Error:[/red] no entry at {path!r}")
        raise typer.Exit(1)

    table = Table(title=f"{tree_id}:{path}" if path else tree_id)
    table.add_column("Mode", style="dim")
    table.add_column("Type")
    table.add_column("Id", style="cyan")
    table.add_column("Name")

    if isinstance(entry, BlobEntry):
        blob = entry.ref.obj
        table.add_row(f"{entry.mode:06o}", "blob", blob.oid.hex if blob.oid else "-", path)
    else:
        for name, child in entry.ref.obj.entries.items():
            kind = "blob" if isinstance(child, BlobEntry) else "tree"
            child_oid = getattr(child.ref, "oid", None)
            table.add_row(f"{child.mode:06o}", kind, child_oid.hex if child_oid else "-", name)
    rprint(table)


@app.command()
def cat(
    tree_id: Annotated[str, typer.Argument(help="Tree id (a unique prefix is enough)")],
    path: Annotated[str, typer.Argument(help="Path of the file inside the tree")],
) -> None:
    """Print the contents of a file in a stored tree."""
    oid = _parse_oid(tree_id)

    async def _cat():
        with _open_store() as store:
            tree = await _load_or_fail(store, oid)
            return await lookup_entry(tree, path)

    entry = _run(_cat())
    if not isinstance(entry, BlobEntry):
        rprint(f"[red]Error:[/red] no file at {path!r}")
        raise typer.Exit(1)
    typer.echo(entry.ref.obj.data, nl=False)


@app.command()
def add(
    tree_id: Annotated[str, typer.Argument(help="Tree id (a unique prefix is enough)")],
    path: Annotated[str, typer.Argument(help="Destination path inside the tree")],
    file: Annotated[str, typer.Argument(help="Local file whose contents to store")],
    executable: Annotated[
        bool, typer.Option("--executable", "-x", help="Record the file as executable")
    ] = False,
) -> None:
    """Write a file into a stored tree and print the new tree id."""
    oid = _parse_oid(tree_id)
    source = Path(file)
    if not source.is_file():
        rprint(f"[red]Error:[/red] {file} is not a file")
        raise typer.Exit(1)

    async def _add() -> Tree:
        with _open_store() as store:
            tree = await _load_or_fail(store, oid)
            entry = blob_ref_with_mode(Blob(source.read_bytes()), executable)
            tree = await update_tree(tree, path, entry)
            return await persist_tree(tree, _get_config().serializer)

    tree = _run(_add())
    typer.echo(tree.oid.hex)


@app.command()
def rm(
    tree_id: Annotated[str, typer.Argument(help="Tree id (a unique prefix is enough)")],
    path: Annotated[str, typer.Argument(help="Path to remove")],
) -> None:
    """Remove a path from a stored tree and print the new tree id."""
    oid = _parse_oid(tree_id)

    async def _rm() -> Tree:
        with _open_store() as store:
            tree = await _load_or_fail(store, oid)
            tree = await remove_from_tree(tree, path)
            return await persist_tree(tree, _get_config().serializer)

    tree = _run(_rm())
    if tree.oid is None:
        rprint("[yellow]Tree is now empty; nothing written.[/yellow]")
        return
    typer.echo(tree.oid.hex)


# ---------------------------------------------------------------------------
# Config commands
# ---------------------------------------------------------------------------


@config_app.command("init")
def config_init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
) -> None:
    """Write a default gitree.yaml to the current directory."""
    target = Path("gitree.yaml")
    if target.exists() and not force:
        rprint("[yellow]gitree.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration."""
    cfg = _get_config()
    typer.echo(yaml.safe_dump(cfg.model_dump(), sort_keys=False))


if __name__ == "__main__":
    app()
