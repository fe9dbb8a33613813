"""Exam code display labels.

Filter controls show exam codes with a stage prefix (``PT`` for
preliminary papers, ``Mains`` for IFS mains).  The upstream service only
understands the raw code, so the prefix is stripped again when a filter
value comes back.
"""

from __future__ import annotations

import re

_PT_CODE = re.compile(r"^(CMS|ESE|NDA|CDS)", re.IGNORECASE)
_IFS_CODE = re.compile(r"IFS", re.IGNORECASE)

_PREFIXES = ("PT ", "Mains ")


def format_exam_code(code: str) -> str:
    """Prefix a raw exam code with its stage label, if it has one."""
    if code.startswith("CMS") or code.startswith("ESE"):
        return f"PT {code}"
    if "IFS" in code and "Mains" in code:
        return f"Mains {code}"
    if _PT_CODE.match(code):
        return f"PT {code}"
    if _IFS_CODE.search(code) and not code.startswith("PT"):
        return f"Mains {code}"
    return code


def extract_raw_exam_code(display_code: str) -> str:
    """Strip a stage prefix added by format_exam_code."""
    raw = display_code.strip()
    for prefix in _PREFIXES:
        if raw.startswith(prefix):
            return raw[len(prefix):]
    return raw
