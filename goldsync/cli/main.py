"""Main entry point for the goldsync command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from goldsync.core.config import ConfigManager
from goldsync.core.logging import configure_logging

from .formatters import create_formatter
from .history import register as register_history_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for goldsync."""

    app = typer.Typer(add_completion=False, help="goldsync command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level for diagnostics written to stderr (defaults to the configured level).",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            help="Path to a goldsync TOML config file.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        config = ConfigManager(config_path).get_config()
        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "no_color": no_color,
                "config": config,
            }
        )
        configure_logging(log_level or config.logging.level, file_path=config.logging.file)

    register_history_commands(app)
    return app


app = create_app()
