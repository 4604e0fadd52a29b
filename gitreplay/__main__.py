"""Entry point for running gitreplay as a module.

    python -m gitreplay SOURCE TARGET NAME EMAIL
"""

from . import cli

if __name__ == "__main__":
    cli._main()
