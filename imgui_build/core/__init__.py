# SPDX-License-Identifier: MIT
"""Core data model: features, target, compile units and the file-set resolver."""
