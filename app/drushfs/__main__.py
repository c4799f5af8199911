"""Allow running drushfs as ``python -m drushfs``."""

from drushfs.cli.main import app

app()
