"""Command-line interface for chrisvfs."""

from __future__ import annotations

import asyncio
import locale
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click

from chrisvfs import (
    AuthenticationError,
    ChrisClient,
    ChrisContext,
    ChrisVFSError,
    DownloadFileInfo,
    DownloadResult,
    ListingItem,
    UploadFileInfo,
    UploadResult,
)
from chrisvfs.config import get_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TYPE_CHARS = {"dir": "d", "file": "-", "link": "l"}
_TYPE_COLORS = {"dir": "blue", "link": "cyan"}


def get_client(context_path: Path | None = None) -> ChrisClient:
    """Create a ChrisClient from the environment and the saved context."""
    settings = get_config()
    context = ChrisContext(context_path or settings.context_path).load()
    return ChrisClient(
        settings.url,
        settings.token,
        context=context,
        page_limit=settings.page_limit,
        timeout=settings.timeout,
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


def _run(ctx: click.Context, action: Callable[[ChrisClient], Awaitable[T]]) -> T:
    """Run one async client action and turn library errors into exit code 1."""

    async def runner() -> T:
        client = get_client(ctx.obj.get("context_path"))
        try:
            return await action(client)
        finally:
            await client.close()

    try:
        return asyncio.run(runner())
    except AuthenticationError as e:
        _fail(f"Authentication failed: {e}")
    except (ChrisVFSError, ValueError) as e:
        _fail(f"Error: {e}")


@click.group()
@click.version_option(package_name="chrisvfs")
@click.option(
    "--context",
    "context_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Session context file (default: ~/.chrisvfs/context.json)",
)
@click.option("-v", "--verbose", count=True, help="Log more (-vv for debug)")
@click.pass_context
def main(ctx: click.Context, context_path: Path | None, verbose: int) -> None:
    """ChRIS filesystem CLI - work with ChRIS files like a shell."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug(f"Keeping the default collation: {e}")
    ctx.ensure_object(dict)
    ctx.obj["context_path"] = context_path


@main.command()
@click.option("--url", envvar="CHRIS_URL", help="ChRIS API URL")
@click.option("--username", "-u", prompt=True, envvar="CHRIS_USERNAME", help="ChRIS username")
@click.option(
    "--password",
    "-p",
    prompt=True,
    hide_input=True,
    envvar="CHRIS_PASSWORD",
    help="ChRIS password",
)
@click.pass_context
def login(ctx: click.Context, url: str | None, username: str, password: str) -> None:
    """Login to ChRIS and save the session."""

    async def action(client: ChrisClient) -> None:
        await client.login(username, password, url=url)

    _run(ctx, action)
    click.echo(click.style("Login successful!", fg="green"))


@main.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Forget the saved token."""

    async def action(client: ChrisClient) -> None:
        await client.logout()

    _run(ctx, action)
    click.echo("Logged out.")


@main.command()
@click.pass_context
def pwd(ctx: click.Context) -> None:
    """Print the current ChRIS directory."""

    async def action(client: ChrisClient) -> str:
        return client.pwd()

    click.echo(_run(ctx, action))


@main.command()
@click.argument("path", default="")
@click.pass_context
def cd(ctx: click.Context, path: str) -> None:
    """Change the current ChRIS directory (home if PATH is omitted)."""

    async def action(client: ChrisClient) -> str:
        return await client.cd(path)

    click.echo(_run(ctx, action))


@main.command("ls")
@click.argument("path", default="")
@click.option("--long", "-l", "long_format", is_flag=True, help="Long listing format")
@click.option("--human", "-h", is_flag=True, help="Human readable sizes")
@click.option(
    "--sort",
    "sort_field",
    type=click.Choice(["name", "type", "size", "owner", "date"]),
    default="name",
    help="Field to sort by (default: name)",
)
@click.option("--reverse", "-r", is_flag=True, help="Reverse the sort order")
@click.pass_context
def list_path(
    ctx: click.Context,
    path: str,
    long_format: bool,
    human: bool,
    sort_field: str,
    reverse: bool,
) -> None:
    """List directories, files and links.

    PATH: Path to list, relative to the current directory

    Examples:

        chrisvfs ls

        chrisvfs ls -l uploads

        chrisvfs ls /home/chris/feeds --sort date -r
    """

    async def action(client: ChrisClient) -> Any:
        return await client.ls(path, sort_field=sort_field, reverse=reverse)

    listing = _run(ctx, action)

    for diagnostic in listing.diagnostics:
        click.echo(
            click.style(
                f"warning: could not list {diagnostic.kind.value} at {diagnostic.path}: "
                f"{diagnostic.message}",
                fg="yellow",
            ),
            err=True,
        )

    if not listing.items:
        click.echo(f"(empty folder: {listing.path})")
        return

    for item in listing.items:
        if long_format:
            click.echo(_format_long(item, human=human))
        else:
            click.echo(_format_name(item))


@main.command()
@click.argument("src")
@click.argument("dest")
@click.pass_context
def mv(ctx: click.Context, src: str, dest: str) -> None:
    """Move or rename SRC to DEST.

    If DEST is a directory (or ends with /), SRC is moved into it.
    """

    async def action(client: ChrisClient) -> Any:
        return await client.mv(src, dest)

    result = _run(ctx, action)
    if not result.success:
        _fail(result.error or f"Failed to move {src} to {dest}")
    click.echo(click.style(f"Moved {result.source} to {result.destination}", fg="green"))


@main.command()
@click.argument("src")
@click.argument("dest")
@click.option("--recursive", "-r", is_flag=True, help="Copy directories and their contents")
@click.pass_context
def cp(ctx: click.Context, src: str, dest: str, recursive: bool) -> None:
    """Copy SRC to DEST.

    If DEST is a directory (or ends with /), SRC is copied into it.
    """

    async def action(client: ChrisClient) -> Any:
        return await client.cp(src, dest, recursive=recursive)

    result = _run(ctx, action)
    if not result.success:
        for path in result.failed:
            click.echo(click.style("✗ ", fg="red") + path, err=True)
        _fail(result.error or f"Failed to copy {src} to {dest}")
    click.echo(click.style(f"Copied {result.source} to {result.destination}", fg="green"))


@main.command()
@click.argument("path")
@click.option("--recursive", "-r", is_flag=True, help="Remove directories and their contents")
@click.pass_context
def rm(ctx: click.Context, path: str, recursive: bool) -> None:
    """Remove a file, link or (with -r) directory."""

    async def action(client: ChrisClient) -> Any:
        return await client.rm(path, recursive=recursive)

    result = _run(ctx, action)
    if not result.success:
        _fail(result.error or f"Failed to remove: {result.path}")
    click.echo(click.style(f"Removed {result.type or 'item'}: {result.path}", fg="green"))


@main.command()
@click.argument("path")
@click.pass_context
def touch(ctx: click.Context, path: str) -> None:
    """Create an empty file."""

    async def action(client: ChrisClient) -> bool:
        return await client.touch(path)

    if not _run(ctx, action):
        _fail(f"Failed to create file: {path}")
    click.echo(click.style(f"Created file: {path}", fg="green"))


@main.command()
@click.argument("path")
@click.pass_context
def mkdir(ctx: click.Context, path: str) -> None:
    """Create a folder."""

    async def action(client: ChrisClient) -> bool:
        return await client.mkdir(path)

    if not _run(ctx, action):
        _fail(f"Failed to create directory: {path}")
    click.echo(click.style(f"Created directory: {path}", fg="green"))


@main.command()
@click.argument("path")
@click.pass_context
def cat(ctx: click.Context, path: str) -> None:
    """Print the content of a file."""

    async def action(client: ChrisClient) -> bytes:
        return await client.cat(path)

    click.echo(_run(ctx, action), nl=False)


@main.command()
@click.argument("local", type=click.Path(exists=True, path_type=Path))
@click.argument("remote", default="")
@click.pass_context
def upload(ctx: click.Context, local: Path, remote: str) -> None:
    """Upload a local file or directory.

    A directory keeps its name: uploading ./scans to /home/chris/data
    creates /home/chris/data/scans.

    Examples:

        chrisvfs upload scan.dcm

        chrisvfs upload ./scans uploads
    """

    async def action(client: ChrisClient) -> Any:
        record = client.plan_upload(local, remote)
        click.echo(f"Uploading {len(record.files)} file(s), {_format_size(record.total_size)}...")
        with click.progressbar(length=len(record.files), label="Uploading") as bar:

            def progress(index: int, info: UploadFileInfo, result: UploadResult) -> None:
                bar.update(1)

            return await client.push(record, progress=progress)

    summary = _run(ctx, action)

    for result in summary.results:
        if result.success:
            click.echo(click.style("✓ ", fg="green") + f"{result.host_path} -> {result.chris_path}")
        else:
            click.echo(
                click.style("✗ ", fg="red") + f"{result.host_path}: {result.error}",
                err=True,
            )

    total = summary.total_files
    if summary.success:
        click.echo(
            click.style(
                f"\nAll {total} file(s) uploaded successfully "
                f"({_format_size(summary.uploaded_size)}, {_format_size(int(summary.speed))}/s)",
                fg="green",
            )
        )
    else:
        click.echo(f"\n{summary.uploaded_count}/{total} file(s) uploaded.", err=True)
        sys.exit(1)


@main.command()
@click.argument("remote")
@click.argument("local", type=click.Path(path_type=Path), default=".")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing local files")
@click.pass_context
def download(ctx: click.Context, remote: str, local: Path, force: bool) -> None:
    """Download a remote file or directory.

    A directory keeps its name unless REMOTE ends with /, in which case its
    contents go straight into LOCAL.

    Examples:

        chrisvfs download uploads/scan.dcm

        chrisvfs download uploads ./data
    """

    async def action(client: ChrisClient) -> Any:
        record = await client.plan_download(remote, local, force=force)
        click.echo(f"Downloading {len(record.files)} file(s), {_format_size(record.total_size)}...")
        with click.progressbar(length=len(record.files), label="Downloading") as bar:

            def progress(index: int, info: DownloadFileInfo, result: DownloadResult) -> None:
                bar.update(1)

            return await client.pull(record, progress=progress)

    summary = _run(ctx, action)

    for result in summary.results:
        if result.success:
            click.echo(click.style("✓ ", fg="green") + f"{result.chris_path} -> {result.host_path}")
        else:
            click.echo(
                click.style("✗ ", fg="red") + f"{result.chris_path}: {result.error}",
                err=True,
            )

    total = summary.total_files
    if summary.success:
        click.echo(
            click.style(
                f"\nAll {total} file(s) downloaded successfully "
                f"({_format_size(summary.downloaded_size)}, {_format_size(int(summary.speed))}/s)",
                fg="green",
            )
        )
    else:
        click.echo(f"\n{summary.downloaded_count}/{total} file(s) downloaded.", err=True)
        sys.exit(1)


def _format_name(item: ListingItem) -> str:
    """Color a name by type."""
    color = _TYPE_COLORS.get(item.type)
    name = f"{item.name}/" if item.type == "dir" else item.name
    return click.style(name, fg=color) if color else name


def _format_long(item: ListingItem, *, human: bool = False) -> str:
    """One ``ls -l`` style line."""
    size = _format_size(item.size) if human else str(item.size)
    date = item.date.replace("T", " ")[:19]
    line = f"{_TYPE_CHARS[item.type]} {item.owner:<10} {size:<8} {date} {_format_name(item)}"
    if item.type == "link" and item.target:
        line += f" -> {item.target}"
    return line


def _format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}" if unit != "B" else f"{size_bytes} {unit}"
        size_bytes /= 1024  # type: ignore[assignment]
    return f"{size_bytes:.1f} TB"


if __name__ == "__main__":
    main()
