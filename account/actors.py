# account/actors.py
from dataclasses import dataclass, field

from core.exceptions import AccessError
from fleet.models import CompanyPermission

from .models import Role


@dataclass(frozen=True)
class Actor:
    """
    The party a request acts as.

    ``id`` is the party's own id (transporter, driver, company user, pump owner,
    pump staff); for admins it is the auth user id.
    ``transporter_id`` is the transporter itself or the employer of a driver /
    company user. ``pump_owner_id`` is set for pump owners and their staff.
    """

    role: str
    id: int
    transporter_id: int | None = None
    pump_owner_id: int | None = None
    permissions: tuple = field(default_factory=tuple)
    user_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_transporter(self) -> bool:
        return self.role == Role.TRANSPORTER

    @property
    def is_driver(self) -> bool:
        return self.role == Role.DRIVER

    @property
    def is_company_user(self) -> bool:
        return self.role == Role.COMPANY_USER

    @property
    def is_pump_staff(self) -> bool:
        return self.role == Role.PUMP_STAFF

    def has_permission(self, perm: str) -> bool:
        if self.role in (Role.ADMIN, Role.TRANSPORTER):
            return True
        if self.role == Role.COMPANY_USER:
            return perm in self.permissions
        return False

    def acts_for_transporter(self, transporter_id) -> bool:
        """Transporter itself or one of its company users."""
        if self.role not in (Role.TRANSPORTER, Role.COMPANY_USER):
            return False
        return self.transporter_id == transporter_id


def transporter_actor(transporter) -> Actor:
    return Actor(role=Role.TRANSPORTER, id=transporter.pk, transporter_id=transporter.pk)


def company_user_actor(company_user) -> Actor:
    return Actor(
        role=Role.COMPANY_USER,
        id=company_user.pk,
        transporter_id=company_user.transporter_id,
        permissions=tuple(company_user.permissions or ()),
    )


def driver_actor(driver) -> Actor:
    return Actor(role=Role.DRIVER, id=driver.pk, transporter_id=driver.transporter_id)


def pump_staff_actor(staff) -> Actor:
    return Actor(role=Role.PUMP_STAFF, id=staff.pk, pump_owner_id=staff.pump_owner_id)


def pump_owner_actor(owner) -> Actor:
    return Actor(role=Role.PUMP_OWNER, id=owner.pk, pump_owner_id=owner.pk)


def admin_actor(user) -> Actor:
    return Actor(role=Role.ADMIN, id=user.pk, user_id=user.pk, permissions=tuple(CompanyPermission.values))


def actor_for_user(user) -> Actor:
    if not user or not user.is_authenticated:
        raise AccessError("Authentication required")

    prof = getattr(user, "userprofile", None)
    if prof is None:
        if user.is_superuser:
            return admin_actor(user)
        raise AccessError("No profile bound to this user")

    if prof.role == Role.ADMIN:
        return admin_actor(user)
    if prof.role == Role.TRANSPORTER and prof.transporter_id:
        actor = transporter_actor(prof.transporter)
    elif prof.role == Role.COMPANY_USER and prof.company_user_id:
        if not prof.company_user.is_active:
            raise AccessError("Company user is inactive")
        actor = company_user_actor(prof.company_user)
    elif prof.role == Role.DRIVER and prof.driver_id:
        actor = driver_actor(prof.driver)
    elif prof.role == Role.PUMP_OWNER and prof.pump_owner_id:
        actor = pump_owner_actor(prof.pump_owner)
    elif prof.role == Role.PUMP_STAFF and prof.pump_staff_id:
        actor = pump_staff_actor(prof.pump_staff)
    else:
        raise AccessError("Profile is not linked to a party", role=prof.role)

    return Actor(
        role=actor.role,
        id=actor.id,
        transporter_id=actor.transporter_id,
        pump_owner_id=actor.pump_owner_id,
        permissions=actor.permissions,
        user_id=user.pk,
    )
