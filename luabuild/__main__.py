# SPDX-License-Identifier: MIT
"""Allow running luabuild as a module: python -m luabuild"""

import sys

from luabuild.cli import main

if __name__ == "__main__":
    sys.exit(main())
