#!/usr/bin/env python3
"""
Launcher for running the cleanup tool from a checkout.
Equivalent to the installed `azs-cleanup` command.
"""
import sys

from azs_cleanup.cleanup import main


if __name__ == "__main__":
    sys.exit(main())
