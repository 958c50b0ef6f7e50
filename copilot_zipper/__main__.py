# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Module entry point for running the zipper CLI."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
