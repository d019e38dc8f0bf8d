#!/usr/bin/env python3
"""QueueTimer — entry point.

Run with:
    python main.py
    python -m queuetimer
"""

from queuetimer.__main__ import main


if __name__ == "__main__":
    main()
