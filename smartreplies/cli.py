# smartreplies/cli.py
import asyncio
import os
import sys

import orjson
import uvicorn
from alembic.config import main as alembic_main

from smartreplies.core.logging import setup_logging


def dev() -> None:
    uvicorn.run("smartreplies.main:app", host="0.0.0.0", port=5000, reload=True)


def start() -> None:
    port = int(os.environ.get("PORT", 5000))
    uvicorn.run("smartreplies.main:app", host="0.0.0.0", port=port)


def migrate() -> None:
    alembic_main(["upgrade", "head"])


def status() -> None:
    """Print the local user's tier and remaining quota, syncing Pro status first."""
    from smartreplies.extension.context import ExtensionContext

    setup_logging(component="extension")

    async def _run() -> dict:
        context = ExtensionContext()
        try:
            await context.checkout.refresh_pro_status()
            return await context.status()
        finally:
            await context.aclose()

    sys.stdout.buffer.write(orjson.dumps(asyncio.run(_run()), option=orjson.OPT_INDENT_2) + b"\n")
