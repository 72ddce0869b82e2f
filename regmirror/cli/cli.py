# regmirror/cli/cli.py
"""
Main regmirror CLI.

Commands:
    build   Mirror one commit or a commit range from the upstream repository
    merge   Merge a single manifest file into a mirror
    serve   Serve a mirror over HTTP
    config  Show the resolved configuration
"""

from __future__ import annotations

import typer

from regmirror.cli.commands import build, config, merge, serve

app = typer.Typer(
    help="regmirror - versioned mirror of a component registry",
    no_args_is_help=True,
)

app.command("build")(build.command)
app.command("merge")(merge.command)
app.command("serve")(serve.command)
app.command("config")(config.command)


if __name__ == "__main__":
    app()
