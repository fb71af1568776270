"""
Message catalog and error record types.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

MessageKey = Tuple[Optional[str], str]


@dataclass
class MessageInfo:
    """A default message found in source code."""
    msgid: str
    msgid_plural: Optional[str] = None
    msgctxt: Optional[str] = None
    domain: Optional[str] = None
    locations: List[Tuple[str, int]] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)

    @property
    def key(self) -> MessageKey:
        return (self.msgctxt, self.msgid)


# Populated by the extraction stage, read by the compatibility checks.
MessageCatalog = Dict[MessageKey, MessageInfo]


def catalog_for_domain(catalogs: Dict[str, MessageCatalog], domain: Optional[str]) -> MessageCatalog:
    """
    Messages a translation file is checked against.

    A file bound to a domain only sees that domain. A file without one holds
    every domain, and a message found in several domains is kept once.
    """
    if domain is not None:
        return catalogs.get(domain, {})
    merged: MessageCatalog = {}
    for catalog in catalogs.values():
        for key, message in catalog.items():
            merged.setdefault(key, message)
    return merged


def describe_key(key: MessageKey) -> str:
    """Human readable form of a catalog key."""
    msgctxt, msgid = key
    if msgctxt:
        return f'"{msgid}" (context "{msgctxt}")'
    return f'"{msgid}"'


@dataclass(frozen=True)
class ReportedError:
    """One entry collected by the error reporter."""
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message
