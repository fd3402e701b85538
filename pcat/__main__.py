"""Allows `python -m pcat -p 4 CMD [ARGS]...`."""
from .cli import _main

if __name__ == "__main__":
    _main()
