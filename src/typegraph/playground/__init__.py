"""
typegraph explorer - static page for trying call trees in a browser.

Usage:
    from typegraph.playground import get_explorer_html
    html = get_explorer_html(graph_url="/graph")

The page is served by the graph router at {path}/ui when settings.ui is on.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

# Directory holding index.html
# Can be overridden via TYPEGRAPH_EXPLORER_DIR environment variable
_dir_override = os.environ.get("TYPEGRAPH_EXPLORER_DIR")
EXPLORER_PATH = Path(_dir_override) if _dir_override else Path(__file__).parent


def get_explorer_html(
    *,
    graph_url: str = "/graph",
    spec_url: str = "/graph/__spec",
    title: str = "typegraph explorer",
) -> str:
    """
    Get explorer HTML with injected configuration.

    Args:
        graph_url: URL of the graph endpoint
        spec_url: URL of the registry description endpoint
        title: Page title

    Returns:
        HTML string

    Raises:
        FileNotFoundError: If the explorer page is not available
    """
    index_path = EXPLORER_PATH / "index.html"

    if not index_path.exists():
        raise FileNotFoundError(
            f"Explorer not found at {index_path}. "
            "Make sure index.html is included in the package."
        )

    html = index_path.read_text()

    config_script = f"""
    <script>
        window.TYPEGRAPH_CONFIG = {json.dumps({"graphUrl": graph_url, "specUrl": spec_url})};
    </script>
"""
    html = html.replace("</head>", f"{config_script}</head>")
    html = html.replace("{{title}}", title)
    return html


def is_bundled() -> bool:
    """Check if the explorer page is available."""
    return (EXPLORER_PATH / "index.html").exists()


__all__ = [
    "get_explorer_html",
    "is_bundled",
    "EXPLORER_PATH",
]
