"""
Entry point for running mcpsol as a module.

Starts the ProgramTools bridge via:
    python -m mcpsol
"""

from mcpsol.server import main

if __name__ == "__main__":
    main()
