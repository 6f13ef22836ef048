"""Allow ``python -m modctl``."""

from modctl.cli.main import app

if __name__ == "__main__":
    app()
