# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Build information injected by the container image."""

import os

commit_hash = os.getenv("COMMIT_HASH", "no hash")
version = os.getenv("VERSION", "0.1.0")


def get_version() -> str:
    """Version shown in the openapi documentation, eg. 0.1.0 (3f2a1c9)"""
    return f"{version} ({commit_hash})"
