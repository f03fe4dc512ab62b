"""
Conversion of provider change records into :class:`FileChange` objects.

The domain of a file is derived from its path. Files below
``src/domains/<name>/`` belong to ``<name>``, files below
``src/infrastructure/`` belong to ``infrastructure`` and everything else
belongs to its top-level directory (or ``root`` when the path is empty).
"""

from __future__ import annotations

from typing import Iterable, List

from vc_change_engine.grouping.group_model import FileChange
from vc_change_engine.vcs.provider import GitFileChange


SOURCE_ROOT = "src"
DOMAINS_DIR = "domains"
INFRASTRUCTURE_DIR = "infrastructure"
ROOT_DOMAIN = "root"


def extract_domain(path: str) -> str:
    parts = path.split("/")
    if parts[0] == SOURCE_ROOT and len(parts) > 1:
        if parts[1] == DOMAINS_DIR and len(parts) > 2 and parts[2]:
            return parts[2]
        if parts[1] == INFRASTRUCTURE_DIR:
            return INFRASTRUCTURE_DIR
    return parts[0] or ROOT_DOMAIN


def file_type(path: str) -> str:
    """Return the lower-case extension of ``path`` including the dot.

    >>> file_type("docs/README.MD")
    '.md'
    >>> file_type("Makefile")
    ''
    """
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    ext = name.rsplit(".", 1)[1]
    return f".{ext.lower()}" if ext else ""


def to_file_changes(records: Iterable[GitFileChange]) -> List[FileChange]:
    return [
        FileChange(
            path=record.path,
            status=record.status,
            domain=extract_domain(record.path),
            file_type=file_type(record.path),
            additions=max(record.additions, 0),
            deletions=max(record.deletions, 0),
        )
        for record in records
    ]
