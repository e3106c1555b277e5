"""
Creates the tenant administrator: a verified User holding the admin role and
the Administrator profile linked to it.
"""

from typing import Optional

from sqlalchemy import select

from ..config import get_config
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_access_models import Administrator, Role, User, role_tenants
from ..events.event_router import (
    ActionCategory,
    ChannelEvent,
    ChannelEventType,
    EventRouter,
    get_event_router,
)
from ..schemas.registration_schema import RegistrationInput
from ..utils.logger import get_logger
from ..utils.password_utils import generate_password, hash_password
from ..utils.relation_utils import verify_related
from .registration_auditor import RegistrationAuditor
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error


class AccessProvisioner:
    def __init__(
        self,
        auditor: Optional[RegistrationAuditor] = None,
        event_router: Optional[EventRouter] = None,
    ):
        self.auditor = auditor or RegistrationAuditor()
        self._event_router = event_router
        self.logger = get_logger()

    @property
    def event_router(self) -> EventRouter:
        return self._event_router or get_event_router()

    @operation()
    def create_administrator(
        self,
        ctx: RequestContext,
        data: RegistrationInput,
        role: Role,
        phone: str,
        tenant_id: Optional[str] = None,
    ) -> Administrator:
        """
        Raises:
            RegistrationError: USER_CREATE_FAILED, USER_ASSIGN_FAILED or ADMIN_CREATE_FAILED
        """
        user = self._create_user(ctx, role, phone)
        self._verify_user_role(ctx, user, role)
        administrator = self._create_administrator_record(ctx, data, user, phone)

        tenant_id = tenant_id or self._first_tenant_id(ctx, role)
        self.auditor.log_entity_created(
            ctx,
            "User",
            user.id,
            user,
            extra={"role_id": role.id, "verified": user.verified},
            tenant_id=tenant_id,
        )
        self.auditor.log_entity_created(
            ctx,
            "Administrator",
            administrator.id,
            administrator,
            extra={"user_id": user.id, "role_id": role.id},
            tenant_id=tenant_id,
        )
        self._emit_notifications(ctx, data, administrator, user, tenant_id)
        return administrator

    def _create_user(self, ctx: RequestContext, role: Role, phone: str) -> User:
        try:
            existing = ctx.session.execute(
                select(User.id).where(User.identifier == phone)
            ).first()
            if existing is not None:
                raise create_error(
                    RegistrationErrorCode.USER_CREATE_FAILED,
                    f"A user with identifier {phone} already exists",
                )

            # Never shown to anyone; sign-in is OTP based
            user = User(
                identifier=phone,
                password_hash=hash_password(generate_password()),
                verified=True,
                roles=[role],
            )
            ctx.session.add(user)
            ctx.session.flush()
            return user
        except Exception as e:
            log_error(self.logger, "AccessProvisioner", e, "User creation")
            raise wrap_error(e, RegistrationErrorCode.USER_CREATE_FAILED, "Failed to create user")

    def _verify_user_role(self, ctx: RequestContext, user: User, role: Role) -> None:
        if not verify_related(ctx.session, ctx, user.id, "roles", role.id, parent_model=User):
            raise create_error(
                RegistrationErrorCode.USER_ASSIGN_FAILED,
                f"User {user.id} does not hold role {role.id} after creation",
                user_id=user.id,
                role_id=role.id,
            )

    def _create_administrator_record(
        self, ctx: RequestContext, data: RegistrationInput, user: User, phone: str
    ) -> Administrator:
        try:
            administrator = Administrator(
                email_address=data.admin_email or phone,
                first_name=data.admin_first_name,
                last_name=data.admin_last_name,
                user=user,
            )
            ctx.session.add(administrator)
            ctx.session.flush()
        except Exception as e:
            log_error(self.logger, "AccessProvisioner", e, "Administrator creation")
            raise wrap_error(
                e, RegistrationErrorCode.ADMIN_CREATE_FAILED, "Failed to create administrator"
            )

        if not administrator.id or not administrator.user_id:
            raise create_error(
                RegistrationErrorCode.ADMIN_CREATE_FAILED,
                "Administrator was created without a linked user",
                user_id=user.id,
            )
        return administrator

    @staticmethod
    def _first_tenant_id(ctx: RequestContext, role: Role) -> Optional[str]:
        return ctx.session.execute(
            select(role_tenants.c.tenant_id).where(role_tenants.c.role_id == role.id).limit(1)
        ).scalar_one_or_none()

    def _emit_notifications(
        self,
        ctx: RequestContext,
        data: RegistrationInput,
        administrator: Administrator,
        user: User,
        tenant_id: Optional[str],
    ) -> None:
        """Fire-and-forget; routing failures are logged."""
        if not get_config().features.enable_notifications or not tenant_id:
            return

        event_context = {"correlation_id": ctx.correlation_id, "source": "registration"}
        payload = {
            "administrator_id": administrator.id,
            "user_id": user.id,
            "phone_number": user.identifier,
            "email_address": administrator.email_address,
            "first_name": administrator.first_name,
            "last_name": administrator.last_name,
            "company_name": data.company_name,
            "company_code": data.company_code,
        }
        for event_type in (ChannelEventType.ADMIN_CREATED, ChannelEventType.USER_CREATED):
            event = ChannelEvent(
                type=event_type,
                tenant_id=tenant_id,
                category=ActionCategory.SYSTEM_NOTIFICATIONS,
                context=event_context,
                data=payload,
            )
            try:
                self.event_router.route_event(event)
            except Exception as e:
                self.logger.warning(
                    f"Failed to route {event_type.value} event: {str(e)}",
                    extra={"tenant_id": tenant_id, "event_id": event.event_id},
                )
