"""The authenticated principal acting on a request."""

from dataclasses import dataclass
from enum import Enum


class ActorRole(Enum):
    STUDENT = "student"
    SHOP = "shop"


@dataclass(frozen=True)
class Actor:
    """Identity supplied by the authentication service.

    Trusted as-is: the domain never re-verifies credentials.
    """

    id: str
    role: ActorRole

    @classmethod
    def student(cls, student_id) -> "Actor":
        return cls(id=str(student_id), role=ActorRole.STUDENT)

    @classmethod
    def shop(cls, shop_id) -> "Actor":
        return cls(id=str(shop_id), role=ActorRole.SHOP)

    @property
    def is_student(self) -> bool:
        return self.role == ActorRole.STUDENT

    @property
    def is_shop(self) -> bool:
        return self.role == ActorRole.SHOP
