from dataclasses import dataclass

from app.models import Role


@dataclass(frozen=True)
class Identity:
    """
    Expliciete identiteit van de huidige gebruiker.

    Notities:
        - Wordt door de routes uit het bearer-token afgeleid en aan de services doorgegeven.
        - De services lezen alleen user_id en is_admin.
    """
    user_id: int
    role: str = Role.USER.value

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.id, role=user.role)
