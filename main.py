#!/usr/bin/env python3
"""CruxTimer — entry point.

Run with:
    python main.py
    python -m cruxtimer
"""

from cruxtimer.__main__ import main


if __name__ == "__main__":
    main()
