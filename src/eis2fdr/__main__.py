"""
Entry point for running eis2fdr as a module.

Usage:
    python -m eis2fdr convert /path/to/log.csv flight.fdr
    python -m eis2fdr inspect /path/to/log.csv
"""

from .cli import main

if __name__ == "__main__":
    main()
