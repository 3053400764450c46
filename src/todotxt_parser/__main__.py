"""Allow running the CLI with ``python -m todotxt_parser``."""

from .cli import main

if __name__ == "__main__":
    main()
