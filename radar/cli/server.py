"""CLI for running the radar relay server."""

import argparse
import asyncio
import signal
import sys

from radar import __version__
from radar.config import settings
from radar.logger import define_log_level, logger
from radar.ws.server import RadarWebSocketServer


async def run_server(args) -> int:
    """Run WebSocket server until a shutdown signal arrives"""
    server = RadarWebSocketServer(host=args.host, port=args.port)

    loop = asyncio.get_running_loop()
    shutdown_requested = False

    def handle_shutdown():
        nonlocal shutdown_requested
        if not shutdown_requested:
            shutdown_requested = True
            logger.info("Shutdown requested")
            loop.create_task(server.shutdown())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handle_shutdown)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    try:
        await server.start_server()
        return 0
    except OSError as e:
        logger.error(f"Could not listen on {args.host}:{args.port}: {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radar-server",
        description="Real-time presence and messaging relay",
        epilog="""
Examples:
  radar-server                      # Listen on the configured host/port
  radar-server --port 9000          # Specify port
  radar-server --host 127.0.0.1     # Local connections only
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"Signal Radar {__version__}"
    )
    parser.add_argument(
        "--host", default=settings.host,
        help=f"Server host address (default: {settings.host})",
    )
    parser.add_argument(
        "--port", type=int, default=settings.port,
        help=f"Server port (default: {settings.port}, env PORT)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI main entry point"""
    args = create_parser().parse_args(argv)

    define_log_level("DEBUG" if args.debug else settings.log_level)

    try:
        return asyncio.run(run_server(args))
    except KeyboardInterrupt:
        logger.info("Operation interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
