"""QuickResearch CLI — the user interface.

Commands:
    quickresearch ask      — Research one question and print the answer
    quickresearch chat     — Interactive session with raw view, call log and cleanup
    quickresearch version  — Show version
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from quickresearch.utils import setup_logging

# Initialize logging on import
setup_logging()

app = typer.Typer(
    name="quickresearch",
    help="🔎 QuickResearch — concise, authoritative answers from the research service",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_CHAT_HELP = (
    "[bold green]QuickResearch Chat[/]\n"
    "[dim]Type a question and press Enter. Commands: "
    "[bold]/raw[/bold] toggle raw data · [bold]/log[/bold] API call log · "
    "[bold]/objects[/bold] pending objects · [bold]/delete[/bold] delete all objects · "
    "[bold]exit[/bold] to quit.[/]"
)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Verbose structured logs on stderr"),
):
    """Global options."""
    if debug:
        setup_logging(level="debug")


# ── Rendering ─────────────────────────────────────────────────


def _render_state(state, show_raw: bool | None = None) -> None:
    """Print the answer/error panel and, if enabled, the raw payload."""
    if state.error:
        console.print(Panel(Text(state.error, style="red"), title="[bold red]⚠ Error[/]", border_style="red"))
        return

    if state.answer:
        console.print(Panel(Text(state.answer), title="[bold green]📝 Answer[/]", border_style="green"))

    show = state.show_raw if show_raw is None else show_raw
    if show and state.raw_payload is not None:
        console.print(Panel(JSON.from_data(state.raw_payload), title="[bold dim]Raw Data[/]", border_style="dim"))


def _render_call_log(entries) -> None:
    if not entries:
        console.print("[dim]No API calls yet.[/]")
        return

    tbl = Table(title="API Call Log", show_header=True, padding=(0, 2))
    tbl.add_column("Time", style="dim", width=12)
    tbl.add_column("Method", style="cyan", width=8)
    tbl.add_column("URL", style="white")
    tbl.add_column("Response", style="green")

    for entry in entries:
        method_style = {"POST": "yellow", "GET": "cyan", "DELETE": "red"}.get(entry.method, "white")
        response = str(entry.response_body)
        if len(response) > 80:
            response = response[:77] + "..."
        tbl.add_row(
            entry.timestamp.strftime("%H:%M:%S"),
            f"[{method_style}]{entry.method}[/]",
            Text(entry.url),
            Text(response, style="red" if entry.is_error else ""),
        )
    console.print(tbl)


def _render_delete_outcomes(outcomes) -> None:
    if not outcomes:
        console.print("[dim]No objects to delete.[/]")
        return
    failed = [o for o in outcomes if not o.success]
    for o in failed:
        console.print(Text(f"⚠ {o.object_name}: {o.error}", style="yellow"))
    console.print(f"[dim]🗑 Deleted {len(outcomes) - len(failed)}/{len(outcomes)} object(s).[/]")


# ── quickresearch ask ─────────────────────────────────────────


@app.command()
def ask(
    question: str = typer.Argument(..., help="Your question"),
    raw: bool = typer.Option(False, "--raw", "-r", help="Show the raw response payload"),
    log: bool = typer.Option(False, "--log", "-l", help="Show the API call log"),
    keep: bool = typer.Option(False, "--keep", help="Do not delete the remote object afterwards"),
):
    """🔎 Research a question and print a one-paragraph answer."""
    ok = asyncio.run(_ask(question, raw=raw, show_log=log, keep=keep))
    if not ok:
        raise typer.Exit(code=1)


async def _ask(question: str, raw: bool = False, show_log: bool = False, keep: bool = False) -> bool:
    from quickresearch.research.session import ResearchSession

    session = ResearchSession()
    try:
        with console.status("[dim]Researching...[/]", spinner="dots"):
            state = await session.submit(question)
        _render_state(state, show_raw=raw)

        if not keep and session.object_count:
            _render_delete_outcomes(await session.delete_all())

        if show_log:
            _render_call_log(session.call_log)
        return not state.error
    finally:
        await session.close()


# ── quickresearch chat ────────────────────────────────────────


@app.command()
def chat(
    keep: bool = typer.Option(False, "--keep", help="Leave remote objects in place on exit"),
):
    """💬 Interactive research session."""
    asyncio.run(_chat(keep=keep))


async def _chat(keep: bool = False):
    from quickresearch.research.session import ResearchSession

    session = ResearchSession()
    console.print(Panel(_CHAT_HELP, border_style="green"))

    turn = 0
    try:
        while True:
            try:
                query = console.input("[bold cyan]Question:[/] ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print("\n[dim]Session ended.[/]")
                break

            if not query:
                continue

            command = query.lower()
            if command in ("exit", "quit", "q"):
                console.print("[dim]Goodbye.[/]")
                break
            if command == "/raw":
                shown = session.toggle_raw()
                console.print(f"[dim]Raw data {'shown' if shown else 'hidden'}.[/]")
                _render_state(session.state)
                continue
            if command == "/log":
                _render_call_log(session.call_log)
                continue
            if command == "/objects":
                console.print(f"[dim]{session.object_count} object(s) pending deletion.[/]")
                continue
            if command == "/delete":
                with console.status("[dim]Deleting objects...[/]", spinner="dots"):
                    outcomes = await session.delete_all()
                _render_delete_outcomes(outcomes)
                continue

            turn += 1
            with console.status("[dim]Researching...[/]", spinner="dots"):
                state = await session.submit(query)
            _render_state(state)
            console.print()

        if not keep and session.object_count:
            _render_delete_outcomes(await session.delete_all())
    finally:
        await session.close()

    console.print(f"[dim]{turn} question(s) asked.[/]")


# ── quickresearch version ─────────────────────────────────────


@app.command()
def version():
    """📦 Show QuickResearch version."""
    from quickresearch import __version__
    console.print(f"[bold cyan]🔎 QuickResearch[/] v{__version__}")


# ── Entry point ───────────────────────────────────────────────

if __name__ == "__main__":
    app()
