"""Allow running git_smart with ``python -m git_smart``."""

from .main import cli

if __name__ == "__main__":
    cli()
