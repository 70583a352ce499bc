"""Allow ``python -m perf_wizard``."""

from .cli import app

if __name__ == "__main__":
    app()
