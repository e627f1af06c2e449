"""Messaging capabilities the game consumes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List


@dataclass(frozen=True)
class Member:
    """A group participant: stable id plus the handle used for name lookups."""

    id: str
    handle: str


class Messenger(ABC):
    """Transport used by the session manager to reach groups and players."""

    @property
    @abstractmethod
    def self_id(self) -> str:
        """Participant id of the bot itself."""

    @abstractmethod
    async def get_members(self, group_id: str) -> List[Member]:
        """Current members of a group."""

    @abstractmethod
    async def send_group(self, group_id: str, payload: Any) -> bool:
        """
        Send a payload to a group.

        Payload is a plain string, a Poll or a GameResults.
        Returns False if delivery failed.
        """

    @abstractmethod
    async def send_private(self, member_id: str, payload: Any) -> bool:
        """Send a payload (a RoleCard) privately to one member."""
