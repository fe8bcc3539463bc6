# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Calls to the other services through the configured client"""

import httpx

from common import config as conf


def _send(method: str, url: str, config: conf.Config, **kwargs) -> httpx.Response:
    """
    Sends the request with the client of the config.
    A failed connection only reports '[Errno -2] Name or service not known',
    so the url is added as note before the httpx.ConnectError is raised again.
    """
    try:
        return config.get_http_client().request(method, url, **kwargs)
    except httpx.ConnectError as e:
        e.add_note(f"Could not connect for {method} {url} ({config.enable_ssl_verification=})")
        raise


def get(url: str, config: conf.Config) -> httpx.Response:
    return _send("GET", url, config)


def post(url: str, payload: dict, config: conf.Config) -> httpx.Response:
    """Posts the payload as json"""
    return _send("POST", url, config, json=payload)
