# SPDX-License-Identifier: MIT
"""Native build interface and toolchain base class."""
