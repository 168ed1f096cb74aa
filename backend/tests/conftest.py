import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="fleet-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/app.db"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["SMS_PROVIDER"] = "simulated"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")

import datetime as dt

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.domain.interfaces.sms_gateway import SmsResult
from app.infrastructure.db.base import Base
from app.domain.entities.emergency import Emergency, EMERGENCY_ACTIVE
from app.domain.entities import driver, vehicle, trip, emergency  # noqa: F401
from app.infrastructure.repositories.emergency_repo_sql import SQLEmergencyRepository
from app.infrastructure.repositories.fleet_repo_sql import SQLFleetRepository
from app.infrastructure.repositories.trip_repo_sql import SQLTripRepository
from app.services.emergency_service import EmergencyService
from app.services.notification_service import NotificationDispatcher
from app.services.trip_service import TripService

POLICE = "+911111111111"
HOSPITAL = "+912222222222"


async def count_active(session, driver_number, vehicle_number):
    res = await session.execute(
        select(func.count(Emergency.id)).where(
            Emergency.driver_number == driver_number,
            Emergency.vehicle_number == vehicle_number,
            Emergency.status == EMERGENCY_ACTIVE,
        )
    )
    return res.scalar_one()


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    async def publish(self, event, payload):
        self.sent.append((event, payload))
        return 1

    def events(self):
        return [e for e, _ in self.sent]


class RecordingSms:
    def __init__(self):
        self.messages = []
        self.fail = False

    async def send(self, phone_number, message):
        self.messages.append((phone_number, message))
        if self.fail:
            return SmsResult(success=False, id="x", error="provider down")
        return SmsResult(success=True, id=f"msg-{len(self.messages)}")

    def to(self, phone_number):
        return [m for p, m in self.messages if p == phone_number]


class FakeClock:
    def __init__(self, start=dt.datetime(2026, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += dt.timedelta(seconds=seconds)


@pytest.fixture
def db_url(tmp_path):
    path = tmp_path / "fleet.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def session_factory(db_url):
    engine = create_async_engine(db_url, poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def sms():
    return RecordingSms()


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def fleet(session):
    repo = SQLFleetRepository(session)
    await repo.create_driver(driver_number="DRV-1", name="Asha Rao", phone_number="+919876543210", license_number="L-100")
    await repo.create_driver(driver_number="DRV-2", name="Imran Khan", phone_number="+919876543211", license_number="L-200")
    await repo.create_vehicle(vehicle_number="VEH-1", type="Truck", fuel_capacity=120)
    await repo.create_vehicle(vehicle_number="VEH-2", type="Ambulance", fuel_capacity=80)
    return repo


@pytest.fixture
def trip_svc(session, fleet, sms, clock):
    return TripService(
        SQLTripRepository(session),
        fleet,
        NotificationDispatcher(sms),
        login_url="http://fleet.test/login/driver",
        clock=clock,
    )


@pytest.fixture
def emergency_svc(session, fleet, broadcaster, sms, clock):
    return EmergencyService(
        SQLEmergencyRepository(session),
        fleet,
        broadcaster,
        NotificationDispatcher(sms),
        police_phone=POLICE,
        hospital_phone=HOSPITAL,
        clock=clock,
    )


@pytest.fixture
def client(session_factory, sms):
    from app.main import app
    from app.api.v1.dependencies import notification_dispatcher
    from app.infrastructure.db.session import get_session
    from app.infrastructure.realtime.hub import ConnectionHub, get_broadcaster

    hub = ConnectionHub()

    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[notification_dispatcher] = lambda: NotificationDispatcher(sms)
    app.dependency_overrides[get_broadcaster] = lambda: hub
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
