# SPDX-License-Identifier: MIT
"""Build settings, program discovery and dependency probing."""
