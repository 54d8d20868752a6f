# SPDX-License-Identifier: MIT
"""Core pieces: the compiler invocation descriptor, defines and errors."""
