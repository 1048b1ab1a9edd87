"""Interactive console -- manage routes and inspect media without the web UI."""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.table import Table

from .config.settings import cfg
from .media.cache import MediaCache
from .media.classify import classify_name
from .media.library import DirectoryLibrary
from .media.uploads import UploadStore
from .state.route_table import RouteTable

console = Console()

_HELP = (
    "[bold]/routes[/bold]                      list routes\n"
    "[bold]/add[/bold] <route> <path> \\[name]   add a route\n"
    "[bold]/rm[/bold] <route>                  delete a route\n"
    "[bold]/media[/bold]                       list discoverable media\n"
    "[bold]/refresh[/bold]                     rescan media on next listing\n"
    "[bold]/quit[/bold]                        exit"
)


class RouteShell:
    """Command dispatcher for the console loop."""

    def __init__(self, table: RouteTable, cache: MediaCache) -> None:
        self._table = table
        self._cache = cache

    async def handle(self, line: str) -> bool:
        """Run one command line; returns ``False`` when the loop should stop."""
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            return True
        if not argv:
            return True
        cmd, args = argv[0].lower(), argv[1:]

        if cmd in ("/quit", "/exit"):
            return False
        if cmd == "/routes":
            self._print_routes()
        elif cmd == "/add":
            self._add(args)
        elif cmd == "/rm":
            self._remove(args)
        elif cmd == "/media":
            await self._print_media()
        elif cmd == "/refresh":
            self._cache.invalidate()
            console.print("[dim]media cache cleared[/dim]")
        else:
            console.print(_HELP)
        return True

    def _print_routes(self) -> None:
        routes = self._table.list()
        if not routes:
            console.print("[dim]no routes[/dim]")
            return
        table = Table("route", "name", "kind", "target")
        for r in routes:
            table.add_row(f"/{r.route}", r.display_name, r.kind.value, r.target_path)
        console.print(table)

    def _add(self, args: list[str]) -> None:
        if len(args) < 2:
            console.print("usage: /add <route> <path> \\[name]")
            return
        target = Path(args[1]).expanduser().resolve()
        name = " ".join(args[2:])
        result = self._table.add(args[0], str(target), name, classify_name(target.name))
        style = "green" if result else "red"
        console.print(f"[{style}]{result.message}[/{style}]")

    def _remove(self, args: list[str]) -> None:
        if not args:
            console.print("usage: /rm <route>")
            return
        result = self._table.delete(args[0])
        style = "green" if result else "red"
        console.print(f"[{style}]{result.message}[/{style}]")

    async def _print_media(self) -> None:
        files = await self._cache.list()
        if not files:
            console.print("[dim]no media found[/dim]")
            return
        table = Table("name", "type", "path")
        for f in files:
            table.add_row(f.display_name, f.to_dict()["type"], f"/{f.virtual_path}")
        console.print(table)


async def _main() -> None:
    cfg.ensure_dirs()
    console.print(
        "[bold green]mediagate[/bold green] console\n"
        "Type [bold]/help[/bold] for commands, [bold]/quit[/bold] to exit.\n"
    )
    uploads = UploadStore(cfg.uploads_dir)
    shell = RouteShell(
        RouteTable(cfg.routes_path),
        MediaCache(DirectoryLibrary(cfg.library_dirs), uploads),
    )

    history_path = cfg.data_dir / ".console_history"
    prompt_session: PromptSession[str] = PromptSession(history=FileHistory(str(history_path)))

    while True:
        try:
            line = await asyncio.to_thread(prompt_session.prompt, HTML("<b>mediagate &gt;</b> "))
        except (EOFError, KeyboardInterrupt):
            break
        if not await shell.handle(line.strip()):
            break
    console.print("[dim]Goodbye.[/dim]")


def main() -> None:
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
