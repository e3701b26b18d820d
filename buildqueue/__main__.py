#!/usr/bin/env python3
"""
Entry point for running as module: python -m buildqueue
"""

import sys
import asyncio

from buildqueue.app import main


def run() -> None:
    """Console script entry point."""
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    run()
