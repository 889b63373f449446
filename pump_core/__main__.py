"""Allow ``python -m pump_core``."""

from pump_core.cli import app

app(prog_name="pump")
