from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GPodderUserCredentials:
    """Represents user's login details for gpodder.net authentication."""

    username: str
    password: str = field(repr=False)
