"""
Package entry point.

Allows running the application via:

    python -m cineplanner

This simply forwards execution to cineplanner.cli.main().
"""

from cineplanner.cli import main

if __name__ == "__main__":
    main()
