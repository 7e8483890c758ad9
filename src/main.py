"""Run script.

Lets the CLI run with `python src/main.py` during development, next to the
`aem-edge-functions` console script.
"""

from __future__ import annotations

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
