"""Main entry point for running the application."""

from zsnapfree.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
