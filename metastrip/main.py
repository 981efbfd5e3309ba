import asyncio
from pathlib import Path

import typer

from metastrip.config.settings import Settings
from metastrip.database.connection import close_pool, init_pool
from metastrip.logging.logger import Log
from metastrip.orchestrator.orchestrator import build_orchestrator
from metastrip.remote.factory import MetadataServiceFactory
from metastrip.shell.console_shell import ConsoleShell

app = typer.Typer(help="Inspect and strip image metadata through the metadata service.")


async def run_shell(settings: Settings) -> None:
    """Open resources -> restore the saved session -> run the prompt loop."""
    uses_postgres = settings.session_store_backend.lower() == "postgres"
    if uses_postgres:
        await init_pool(settings)
    service = MetadataServiceFactory.create(settings)
    try:
        orchestrator = build_orchestrator(settings, service=service)
        await orchestrator.restore()
        await ConsoleShell(orchestrator, service, settings).run()
    finally:
        await service.aclose()
        if uses_postgres:
            await close_pool()


@app.command()
def shell(
    download_dir: Path | None = typer.Option(
        None, "--download-dir", help="Where stripped copies are saved"
    ),
    store: str | None = typer.Option(
        None, "--store", help="Session store backend: file, memory or postgres"
    ),
    provider: str | None = typer.Option(
        None, "--provider", help="Remote service adapter: http or example"
    ),
) -> None:
    """Start the interactive metadata shell."""
    settings = Settings()
    if download_dir is not None:
        settings.download_dir = str(download_dir)
    if store is not None:
        settings.session_store_backend = store
    if provider is not None:
        settings.remote_provider = provider
    Log.configure(settings.log_level)
    asyncio.run(run_shell(settings))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
