#!/usr/bin/env python3
"""
typegraph CLI - Main entry point.

Usage:
    typegraph init                                  # Write a default typegraph.yaml
    typegraph serve myapp.spec:registry             # Serve a registry over HTTP
    typegraph query myapp.spec:registry '["viewer", "id"]'
    typegraph query --url http://localhost:8000/graph '["viewer", "id"]'
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import httpx

from ..config import DEFAULT_CONFIG_PATH, Settings, load_settings
from ..core.errors import SpecError
from ..core.registry import SpecRegistry
from ..runtime.executor import handle_graph

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_registry(target: str) -> SpecRegistry:
    """
    Import a registry from "module:attribute".

    The attribute may be a SpecRegistry or a zero-argument callable
    returning one.

    Raises:
        SpecError: If the target cannot be loaded
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise SpecError(f'Spec target must look like "module:attribute", got "{target}"')

    # Same behaviour as uvicorn's --app-dir default
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SpecError(f'Could not import "{module_name}": {e}') from e

    try:
        value = getattr(module, attr)
    except AttributeError:
        raise SpecError(f'Module "{module_name}" has no attribute "{attr}"') from None

    if callable(value) and not isinstance(value, SpecRegistry):
        value = value()
    if not isinstance(value, SpecRegistry):
        raise SpecError(f'"{target}" is not a SpecRegistry')
    return value


def cmd_init(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    config_path = Path(args.config)

    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists. Use --force to overwrite.")
        return 1

    Settings(ui=True).save(config_path)
    print(f"Created {config_path}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve a registry with uvicorn."""
    import uvicorn

    from ..app import GraphApp

    settings = load_settings(args.config)
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.ui:
        settings.ui = True
    configure_logging(settings.log_level)

    try:
        registry = load_registry(args.spec)
    except SpecError as e:
        print(f"Error: {e}")
        return 1

    graph_app = GraphApp(registry, settings)
    logger.info(f"Serving {args.spec} on http://{settings.host}:{settings.port}{settings.path}")
    uvicorn.run(graph_app.app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Resolve a call tree locally or against a running server."""
    settings = load_settings(args.config)
    configure_logging(args.log_level or "WARNING")

    try:
        graph = json.loads(args.graph)
    except ValueError as e:
        print(f"Error: call tree is not valid JSON: {e}")
        return 1

    if args.url:
        result = _query_remote(args.url, graph, timeout=settings.request_timeout)
        if result is None:
            return 1
    else:
        if not args.spec:
            print("Error: either a spec target or --url is required.")
            return 1
        try:
            registry = load_registry(args.spec)
        except SpecError as e:
            print(f"Error: {e}")
            return 1
        result = asyncio.run(handle_graph(graph, registry, timeout=settings.request_timeout))

    print(json.dumps(result, indent=2))
    return 0 if "data" in result else 1


def _query_remote(url: str, graph: Any, timeout: Optional[float]) -> Optional[dict]:
    try:
        response = httpx.post(url, json=graph, timeout=timeout or 30.0)
    except httpx.HTTPError as e:
        print(f"Error: request to {url} failed: {e}")
        return None

    if response.status_code != 200:
        print(f"Error: {url} returned {response.status_code}: {response.text}")
        return None
    return response.json()


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="typegraph",
        description="typegraph - typed call-tree query engine",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Path to typegraph.yaml")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write a default typegraph.yaml")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Serve a spec registry over HTTP")
    serve_parser.add_argument("spec", help='Registry target, e.g. "myapp.spec:registry"')
    serve_parser.add_argument("--host", help="Bind host")
    serve_parser.add_argument("--port", "-p", type=int, help="Bind port")
    serve_parser.add_argument("--ui", action="store_true", help="Enable the explorer page")

    # query
    query_parser = subparsers.add_parser("query", help="Resolve a call tree and print the result")
    query_parser.add_argument("spec", nargs="?", help='Registry target, e.g. "myapp.spec:registry"')
    query_parser.add_argument("graph", help="JSON call tree")
    query_parser.add_argument("--url", "-u", help="Send the call tree to a running server instead")
    query_parser.add_argument("--log-level", help="Logging level (default: WARNING)")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "serve": cmd_serve,
        "query": cmd_query,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
