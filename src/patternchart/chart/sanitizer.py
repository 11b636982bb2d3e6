#!/usr/bin/env python3
"""
PATTERNCHART SANITIZER - Chart Naming Rules
-------------------------------------------
Helm chart names are lowercase, limited to [a-z0-9-] and, since they
usually double as release names, bounded to 53 characters.
"""

import re

MAX_CHART_NAME_LENGTH = 53

_INVALID_RUN = re.compile(r"[^a-z0-9-]+")
_DASH_RUN = re.compile(r"-{2,}")


def sanitize_chart_name(name: str) -> str:
    """
    Normalizes a free-form name into a Helm chart name.
    Returns an empty string when nothing usable is left.

    >>> sanitize_chart_name("My App!")
    'my-app'
    """
    if not name:
        return ""
    cleaned = _INVALID_RUN.sub("-", name.strip().lower())
    cleaned = _DASH_RUN.sub("-", cleaned).strip("-")
    return cleaned[:MAX_CHART_NAME_LENGTH].rstrip("-")
