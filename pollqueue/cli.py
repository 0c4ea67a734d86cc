"""CLI interface for pollqueue."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn
import yaml
from dotenv import load_dotenv

from pollqueue.api.app import create_app
from pollqueue.api.server import BrokerServer
from pollqueue.core.config import Config, load_config
from pollqueue.core.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the pollqueue command."""
    parser = argparse.ArgumentParser(description="pollqueue - in-memory message broker with long polling")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (overrides server.host)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="Port to listen on (overrides server.port)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Load configuration and apply command-line overrides.

    An explicit ``--config`` must exist. Without one, ``config.yaml`` in the
    working directory is used when present and built-in defaults otherwise.
    """
    if args.config is not None:
        config = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = Config()

    server_overrides = {}
    if args.host is not None:
        server_overrides["host"] = args.host
    if args.port is not None:
        server_overrides["port"] = args.port
    if server_overrides:
        config = config.model_copy(
            update={"server": config.server.model_copy(update=server_overrides)}
        )
    if args.verbose:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": "DEBUG"})}
        )
    return config


async def run_server(config: Config) -> None:
    """Serve the broker until SIGINT or SIGTERM.

    uvicorn installs its own signal handlers while serving; BrokerServer
    logs the signal and releases long-polling consumers before draining.
    """
    app = create_app(config)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
        log_config=None,
    )
    server = BrokerServer(uvicorn_config, registry=app.state.registry)

    logger.info(f"Queue API server starting on http://{config.server.host}:{config.server.port}")
    logger.info(f"  POST http://{config.server.host}:{config.server.port}/api/orders")
    logger.info(f"  GET  http://{config.server.host}:{config.server.port}/api/orders?timeout=5000")

    await server.serve()


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    # Load .env BEFORE config so ${VAR} expansion works
    load_dotenv()

    config = resolve_config(args)
    setup_logging(
        level=config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
        file_enabled=config.logging.file_enabled,
    )

    await run_server(config)


def run() -> None:
    """Entry point for the pollqueue console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Startup failed: {e}. Re-run with -v for details.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
