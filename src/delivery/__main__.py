"""
Entry point for running KidQuest as a module.

Usage:
    python -m src.delivery play mathematics 1
    python -m src.delivery status
    python -m src.delivery --help
"""
from .kidquest_cli import main

if __name__ == "__main__":
    main()
