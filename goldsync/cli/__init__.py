"""goldsync command line interface."""

from goldsync.cli.main import app, create_app

__all__ = ["app", "create_app"]
