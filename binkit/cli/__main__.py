"""
Entry point for running binkit CLI as a module.

Usage: python -m binkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
