"""
Operator context.

Identifies who is acting. Services that mutate data receive it as an
argument and log it; there is no process-wide "current user".
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OperatorContext:
    """Identity of the acting operator for one logical application run."""
    username: str
    user_id: Optional[int] = None

    @classmethod
    def anonymous(cls) -> 'OperatorContext':
        return cls(username='anonymous')

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def __str__(self) -> str:
        return self.username
