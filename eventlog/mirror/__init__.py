"""
Remote mirror exports.
"""

from .base import MIME_TYPE, RemoteMirror, RemoteMirrorError
from .drive import GoogleDriveMirror
from .stub import StubRemoteMirror

__all__ = [
    "MIME_TYPE",
    "RemoteMirror",
    "RemoteMirrorError",
    "GoogleDriveMirror",
    "StubRemoteMirror",
]
