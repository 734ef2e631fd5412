import asyncio
import json

import typer
from rich.console import Console

from reconned.config import HOST, LOG_LEVEL, PORT
from reconned.utils.logging import setup_logging

app = typer.Typer()
console = Console()


@app.command()
def serve(
    host: str = typer.Option(HOST, "--host", help="Interface to bind"),
    port: int = typer.Option(PORT, "--port", "-p", help="Port to listen on"),
):
    """Run the HTTP API."""
    import uvicorn

    setup_logging(LOG_LEVEL)
    console.print(f"[bold green]Starting Instagram API server on http://{host}:{port}")
    uvicorn.run("reconned.api.server:app", host=host, port=port)


@app.command()
def fetch(
    usernames: list[str] = typer.Argument(help="Instagram usernames, with or without @"),
):
    """Resolve usernames once and print the snapshots as JSON."""
    from reconned.platforms.instagram.fetcher import InstagramClient
    from reconned.resolver import BatchResolver

    setup_logging(LOG_LEVEL)
    names = [u.lstrip("@") for u in usernames]

    async def _run():
        async with InstagramClient() as client:
            return await BatchResolver(client).resolve_batch(names)

    with console.status("[bold green]Fetching profiles..."):
        snapshots = asyncio.run(_run())
    console.print_json(json.dumps([s.model_dump() for s in snapshots], ensure_ascii=False))


if __name__ == "__main__":
    app()
