from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from account.actors import (
    admin_actor,
    company_user_actor,
    driver_actor,
    pump_staff_actor,
    transporter_actor,
)
from account.models import Role, UserProfile
from core.events import InMemoryEventSink
from fleet.models import CompanyUser, Driver, DriverStatus, Transporter, Vehicle
from fuel.models import FuelCard, FuelTransaction, FuelTransactionStatus, PumpOwner, PumpStaff
from trips.services import lifecycle

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=dt_timezone.utc)

MUMBAI = (19.0760, 72.8777)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sink():
    return InMemoryEventSink()


# --- fleet ------------------------------------------------------------------

@pytest.fixture
def transporter(db):
    return Transporter.objects.create(name="Ravi", company="Ravi Roadlines", mobile="9000000001")


@pytest.fixture
def other_transporter(db):
    return Transporter.objects.create(name="Meena", company="Meena Carriers", mobile="9000000002")


@pytest.fixture
def driver(transporter):
    return Driver.objects.create(transporter=transporter, name="Suresh", mobile="9100000001", status=DriverStatus.ACTIVE)


@pytest.fixture
def other_driver(transporter):
    return Driver.objects.create(transporter=transporter, name="Vikram", mobile="9100000002", status=DriverStatus.ACTIVE)


@pytest.fixture
def vehicle(transporter, driver):
    return Vehicle.objects.create(vehicle_number="MH12AB1234", transporter=transporter, driver=driver)


@pytest.fixture
def owner(transporter):
    return transporter_actor(transporter)


@pytest.fixture
def driver_act(driver):
    return driver_actor(driver)


@pytest.fixture
def other_driver_act(other_driver):
    return driver_actor(other_driver)


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser("ops-admin", "ops@example.com", "pw")


@pytest.fixture
def admin(admin_user):
    return admin_actor(admin_user)


@pytest.fixture
def company_user_factory(transporter):
    def make(permissions, mobile="9200000001"):
        cu = CompanyUser.objects.create(transporter=transporter, name="Clerk", mobile=mobile, permissions=list(permissions))
        return company_user_actor(cu)
    return make


# --- trips ------------------------------------------------------------------

@pytest.fixture
def make_trip(owner, vehicle, driver, sink):
    def make(created_at=NOW, **kwargs):
        kwargs.setdefault("trip_type", "EXPORT")
        kwargs.setdefault("vehicle_id", vehicle.pk)
        kwargs.setdefault("driver_id", driver.pk)
        return lifecycle.create_trip(owner, now=created_at, events=sink, **kwargs)
    return make


@pytest.fixture
def record_milestones(driver_act, sink):
    def record(trip, count, start_at=NOW):
        for n in range(1, count + 1):
            lifecycle.record_milestone(
                trip,
                driver_act,
                milestone_number=n,
                latitude=MUMBAI[0] + n / 100,
                longitude=MUMBAI[1],
                now=start_at + timedelta(minutes=10 * n),
                events=sink,
            )
    return record


# --- fuel -------------------------------------------------------------------

@pytest.fixture
def pump_owner(db):
    return PumpOwner.objects.create(
        name="Patil", pump_name="Patil Highway Fuels", mobile="9300000001", latitude=MUMBAI[0], longitude=MUMBAI[1]
    )


@pytest.fixture
def other_pump_owner(db):
    return PumpOwner.objects.create(name="Khan", pump_name="Khan Petroleum", mobile="9300000002")


@pytest.fixture
def staff(pump_owner):
    return PumpStaff.objects.create(pump_owner=pump_owner, name="Anil", mobile="9400000001")


@pytest.fixture
def staff_act(staff):
    return pump_staff_actor(staff)


@pytest.fixture
def card(driver, transporter):
    return FuelCard.objects.create(card_number="FC-0001", transporter=transporter, driver=driver, balance=Decimal("1000.00"))


@pytest.fixture
def history_tx(driver, card):
    """Create finished fuel transactions directly, for fraud history."""
    counter = {"n": 0}

    def make(amount, *, created_at=NOW - timedelta(days=1), status=FuelTransactionStatus.COMPLETED, **extra):
        counter["n"] += 1
        n = counter["n"]
        return FuelTransaction.objects.create(
            transaction_code=f"FTX-HIST-{n:04d}",
            qr_code=f"hist-{n}",
            qr_code_expiry=created_at + timedelta(hours=1),
            driver=driver,
            fuel_card=card,
            vehicle_number="MH12AB1234",
            amount=Decimal(str(amount)),
            requested_amount=Decimal(str(amount)),
            status=status,
            created_at=created_at,
            **extra,
        )
    return make


# --- api --------------------------------------------------------------------

@pytest.fixture
def user_for(db):
    def make(username, role, **party):
        user = User.objects.create_user(username, f"{username}@example.com", "pw")
        UserProfile.objects.create(user=user, role=role, **party)
        return user
    return make


@pytest.fixture
def transporter_user(user_for, transporter):
    return user_for("ravi", Role.TRANSPORTER, transporter=transporter)


@pytest.fixture
def driver_user(user_for, driver):
    return user_for("suresh", Role.DRIVER, driver=driver)


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient

    return APIClient()
