"""
User Data Models

Contains caller-related data structures.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Caller:
    """
    Identity attached to a request.

    ``authenticated`` is True only when the identity comes from a verified
    bearer token; otherwise it was supplied by the caller as a plain
    ``userId`` parameter (voice-assistant fallback) and may be None.
    """
    identity: Optional[str]
    authenticated: bool = False
