# src/authgateway/cli.py
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, List, Optional

import uvicorn

from authgateway.app.core.config import load_settings
from authgateway.app.core.logging import setup_logging

_log = logging.getLogger("authgateway.cli")


def _serve(args: argparse.Namespace) -> int:
    settings = load_settings()
    workers = args.workers or settings.workers
    port = args.port or settings.port
    _log.info("starting %d worker(s) on %s:%d", workers, args.host, port)
    uvicorn.run(
        "authgateway.app.main:create_app",
        factory=True,
        host=args.host,
        port=port,
        workers=workers,
        log_level=settings.log_level.lower(),
    )
    return 0


async def _init_db() -> None:
    from authgateway.app.db.session import build_engine, check_connection, init_models

    settings = load_settings()
    engine = build_engine(settings.database_url)
    try:
        await check_connection(engine)
        await init_models(engine)
    finally:
        await engine.dispose()
    _log.info("database schema ready")


async def _consume(queue_name: str) -> None:
    from authgateway.app.queue.client import AmqpQueueClient

    settings = load_settings()
    client = AmqpQueueClient(settings.queue)

    async def log_message(content: Any) -> None:
        _log.info("received from %s: %s", queue_name, content)

    await client.connect()
    try:
        await client.consume_messages(queue_name, log_message)
        # runs until cancelled (Ctrl+C)
        await asyncio.Future()
    finally:
        await client.disconnect()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="authgateway", description="Cognito auth gateway")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None, help="defaults to PORT (3333)")
    serve.add_argument("--workers", type=int, default=None, help="defaults to APP_CLUSTERS (1)")

    sub.add_parser("init-db", help="create the local user tables")

    consume = sub.add_parser("consume", help="log every message arriving on a queue")
    consume.add_argument("queue", help="queue name, e.g. user-signup-queue")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "serve":
        return _serve(args)
    if args.command == "init-db":
        asyncio.run(_init_db())
        return 0
    if args.command == "consume":
        try:
            asyncio.run(_consume(args.queue))
        except KeyboardInterrupt:
            _log.info("consumer stopped")
        return 0
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
