# =============================================================================
# core/models/context.py - Per-Request Context
# =============================================================================
# Every service call that depends on "who is asking" receives a
# RequestContext explicitly. It is built once per request by the auth
# dependency and never stored globally.
# =============================================================================

from pydantic import BaseModel, ConfigDict

from .user import UserRecord, UserRole


class RequestContext(BaseModel):
    """The authenticated caller, resolved to their users row."""

    model_config = ConfigDict(frozen=True)

    user: UserRecord

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def role(self) -> UserRole | None:
        return self.user.role

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN

    @property
    def is_trainer(self) -> bool:
        return self.user.role == UserRole.TRAINER

    @property
    def is_owner(self) -> bool:
        return self.user.role == UserRole.OWNER
