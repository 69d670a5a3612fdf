"""Console entry point: run the reviewbot CLI (LLM review of local git changes)."""

import sys

from .cli import main as cli_main


def main() -> int:
    """Run the CLI with ``sys.argv`` and return its exit code."""
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
