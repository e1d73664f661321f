"""
Package entry point.

Allows running the application via:

    python -m badgerbase

This simply forwards execution to badgerbase.cli.main().
"""

from badgerbase.cli import main

if __name__ == "__main__":
    main()
