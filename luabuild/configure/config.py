# SPDX-License-Identifier: MIT
"""Program discovery for the configure step.

Locates compilers and archivers on PATH.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def find_program(name: str) -> Path | None:
    """Locate a program on PATH.

    A name containing a path separator is only checked for being an
    executable file (shutil.which handles that case).

    Args:
        name: Program name or path (e.g. 'gcc', '/opt/cross/bin/cc').

    Returns:
        Path to the executable, or None when it cannot be found.
    """
    result = shutil.which(name)
    if result is None:
        logger.debug("Program not found: %s", name)
        return None
    logger.debug("Found %s at %s", name, result)
    return Path(result)
