"""
Entry point for `python -m reportvault`.

Launches the dashboard (TUI) by default, or CLI mode when any flags are given.
"""

from __future__ import annotations

import sys


def main():
    # Any command-line argument implies CLI mode.
    if len(sys.argv) > 1:
        from .cli import run_cli
        run_cli()
    else:
        from .core.config import load_config
        from .ui.app import run_gui

        config = load_config()
        kwargs = {"identity": config.get("identity", "")}
        if config.get("organization"):
            kwargs["organization"] = config["organization"]
        run_gui(**kwargs)


if __name__ == "__main__":
    main()
