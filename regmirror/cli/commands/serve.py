# regmirror/cli/commands/serve.py
"""
API server command.

Usage:
    regmirror serve              # Start on the configured host/port
    regmirror serve --port 3000  # Custom port
    regmirror serve --host 0.0.0.0 -o ./fake-registry
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from regmirror.api import create_app
from regmirror.cli.ui import ui
from regmirror.cli.utils import CONFIG_OPTION, load_cli_config
from regmirror.logging.logger import get_logger

logger = get_logger(__name__)


def command(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to bind to. Defaults to api.host from config.",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on. Defaults to api.port from config.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Mirror directory to serve. Defaults to mirror.output_path from config.",
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Serve the mirror over HTTP.

    API Documentation:
        Once running, visit http://localhost:8000/docs for interactive docs.
    """
    cfg = load_cli_config(config)
    bind_host = host or cfg.api.host
    bind_port = port or cfg.api.port
    mirror_path = output or Path(cfg.mirror.output_path)

    ui.header("Registry API", f"http://{bind_host}:{bind_port}")
    ui.info(f"Serving mirror from {mirror_path.resolve()}")
    ui.info(f"API docs: http://{bind_host}:{bind_port}/docs")
    ui.info("Press Ctrl+C to stop")

    uvicorn.run(
        create_app(mirror_path),
        host=bind_host,
        port=bind_port,
        log_level=cfg.logging.level.lower(),
    )
