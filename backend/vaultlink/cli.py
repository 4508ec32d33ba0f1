"""CLI tool for vaultlink"""

import asyncio
import time

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="vaultlink",
    help="vaultlink - file tools and search over a remote Obsidian vault",
)
console = Console()


def _run_tool(name: str, arguments: dict) -> dict:
    """Run one tool against a fresh client and exit on failure"""
    from .client import VaultClient
    from .tools import call_tool

    async def _call():
        async with VaultClient() as client:
            return await call_tool(client, name, arguments)

    result = asyncio.run(_call())
    if not result.success:
        console.print(f"[red]✗ {result.error}[/red]")
        raise typer.Exit(code=1)
    return result.data


@app.command()
def doctor():
    """Run environment self-checks"""
    from .client import VaultClient
    from .config import get_settings
    from .errors import describe_error

    settings = get_settings()

    console.print("\n[bold]vaultlink Doctor[/bold]\n")

    table = Table(show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    all_passed = True

    # 1. API key
    key_ok = bool(settings.obsidian_api_key)
    table.add_row(
        "API Key",
        "[green]✓[/green]" if key_ok else "[red]✗[/red]",
        "Configured" if key_ok else "OBSIDIAN_API_KEY is empty",
    )
    if not key_ok:
        all_passed = False

    # 2. Root listing
    async def _list_root():
        async with VaultClient() as client:
            return await client.list_vault("")

    try:
        files, folders = asyncio.run(_list_root())
        api_ok = True
        api_message = f"{len(files)} files, {len(folders)} folders at root"
    except Exception as e:
        api_ok = False
        api_message = describe_error(e)
    table.add_row(
        "Vault API",
        "[green]✓[/green]" if api_ok else "[red]✗[/red]",
        f"{settings.obsidian_base_url} - {api_message}",
    )
    if not api_ok:
        all_passed = False

    console.print(table)

    if all_passed:
        console.print("\n[green]✓ All checks passed![/green]\n")
    else:
        console.print("\n[red]✗ Some checks failed.[/red]\n")
        raise typer.Exit(code=1)


@app.command()
def find(
    query: str = typer.Argument(..., help="Partial filename, typos allowed"),
    exact: bool = typer.Option(False, "--exact", "-e", help="Disable fuzzy subsequence matches"),
    max_results: int = typer.Option(10, "--max-results", "-n"),
):
    """Find files by name"""
    data = _run_tool("find_files", {"query": query, "fuzzy": not exact, "max_results": max_results})

    table = Table(show_header=True)
    table.add_column("Path", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Match")
    for match in data["matches"]:
        table.add_row(escape(match["path"]), f"{match['score']:.2f}", match["match_type"])

    console.print(table)
    console.print(f"{data['total_matches']} matches")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text or regex to look for"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", "-c"),
    regex: bool = typer.Option(False, "--regex", "-r"),
    max_results: int = typer.Option(100, "--max-results", "-n"),
):
    """Search note contents"""
    data = _run_tool(
        "search",
        {
            "query": query,
            "case_sensitive": case_sensitive,
            "regex": regex,
            "max_results": max_results,
        },
    )

    for match in data["matches"]:
        console.print(f"[cyan]{escape(match['file'])}[/cyan]:[yellow]{match['line']}[/yellow]")
        if "context_before" in match:
            console.print(f"  [dim]{escape(match['context_before'])}[/dim]", highlight=False)
        console.print(f"  {escape(match['content'])}", highlight=False)
        if "context_after" in match:
            console.print(f"  [dim]{escape(match['context_after'])}[/dim]", highlight=False)
    console.print(f"\n{data['total_matches']} matches")


@app.command()
def stats():
    """Walk the whole vault and show its size"""
    from .client import VaultClient
    from .config import get_settings
    from .vault import walk_vault

    async def _walk():
        async with VaultClient() as client:
            return await walk_vault(client)

    start = time.perf_counter()
    with console.status("Walking vault..."):
        walked = asyncio.run(_walk())
    duration = time.perf_counter() - start

    extension = get_settings().note_extension
    notes = [f for f in walked.files if f.endswith(extension)]

    table = Table(show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Total Files", str(len(walked.files)))
    table.add_row(f"Notes ({extension})", str(len(notes)))
    table.add_row("Failed Folders", str(len(walked.failures)))
    table.add_row("Walk Time", f"{duration:.2f}s")
    console.print(table)

    for failure in walked.failures[:5]:
        console.print(f"  [yellow]- {failure.folder}: {failure.message}[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h"),
    port: int = typer.Option(3000, "--port", "-p"),
    reload: bool = typer.Option(False, "--reload", "-r"),
):
    """Start the API server"""
    import uvicorn

    console.print("\n[bold]Starting vaultlink server[/bold]")
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  Tools: http://{host}:{port}/api/tools\n")

    uvicorn.run(
        "vaultlink.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
