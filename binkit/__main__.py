"""
Entry point for running binkit as a module.

Usage: python -m binkit [command] [options]
"""

from binkit.cli.parser import main

if __name__ == "__main__":
    main()
