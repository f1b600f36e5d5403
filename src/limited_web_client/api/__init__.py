# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Rate-limited JSON API client."""

from .client import FORM_CONTENT_TYPE, WebApiClient
from .config import DEFAULT_LIMIT_TIMEOUT_MS, WebApiClientOpts

__all__ = [
    "DEFAULT_LIMIT_TIMEOUT_MS",
    "FORM_CONTENT_TYPE",
    "WebApiClient",
    "WebApiClientOpts",
]
