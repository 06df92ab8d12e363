"""
Main entry point for the marketmate package when executed as a module.

This allows running the package with `python -m marketmate`.
"""

from marketmate.cli import main

if __name__ == '__main__':
    main()
