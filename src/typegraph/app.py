"""
typegraph application - main entry point for serving a spec registry.

Usage:
    from typegraph import GraphApp, SpecRegistry

    registry = SpecRegistry.from_dicts(types, queries)
    graph_app = GraphApp(registry)

    app = graph_app.app
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import create_graph_router
from .config import Settings, load_settings
from .core.registry import SpecRegistry

logger = logging.getLogger(__name__)


class GraphApp:
    """
    FastAPI application around one spec registry.

    Features:
    - Graph endpoint (GET/POST) at settings.path
    - Registry description at {path}/__spec
    - Optional explorer page at {path}/ui
    - CORS and a /health endpoint
    """

    def __init__(
        self,
        registry: SpecRegistry,
        settings: Optional[Settings] = None,
        *,
        title: str = "typegraph",
    ):
        """
        Initialize application.

        Args:
            registry: Spec registry to serve
            settings: Server settings (default: typegraph.yaml + environment)
            title: FastAPI app title
        """
        self.registry = registry
        self.settings = settings or load_settings()
        self.title = title

        self.app = self._create_app()

        # Store reference on app for handlers and tests
        self.app.state.graph_app = self

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        app = FastAPI(
            title=self.title,
            description="typegraph - typed call-tree query engine",
            version="1.0.0",
        )

        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

        app.include_router(create_graph_router(self.registry, self.settings))

        @app.get("/health")
        async def health():
            return {"status": "ok"}

        @app.get("/__status")
        async def status():
            """Summary of the served registry."""
            return {
                "types": len(self.registry.types),
                "queries": len(self.registry.root),
                "path": self.settings.path,
                "ui": self.settings.ui,
            }

        logger.info(
            f"Graph endpoint at {self.settings.path} "
            f"({len(self.registry.root)} queries, {len(self.registry.types)} types)"
        )
        if self.settings.ui:
            logger.info(f"Explorer available at {self.settings.sub_path('ui')}")

        return app


def create_app(registry: SpecRegistry, settings: Optional[Settings] = None) -> FastAPI:
    """Convenience function returning only the FastAPI app."""
    return GraphApp(registry, settings).app
