import datetime as dt

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.domain import events
from app.domain.entities.emergency import EMERGENCY_ACTIVE, EMERGENCY_ACKNOWLEDGED
from app.infrastructure.repositories.emergency_repo_sql import SQLEmergencyRepository
from app.services.emergency_service import parse_coordinates

from conftest import POLICE, HOSPITAL, count_active

COORDS = {"latitude": 12.34, "longitude": 56.78}


async def test_trigger_creates_broadcasts_and_alerts(emergency_svc, broadcaster, sms):
    result = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS, video_url="/uploads/clip.mp4")

    assert result.created
    record = result.emergency
    assert record.status == EMERGENCY_ACTIVE
    assert (record.latitude, record.longitude) == (12.34, 56.78)
    assert record.video_url == "/uploads/clip.mp4"
    assert result.nearby_facilities

    assert broadcaster.events() == [events.RECEIVE_EMERGENCY]
    payload = broadcaster.sent[0][1]
    assert payload["id"] == record.id
    assert payload["driver"]["driverNumber"] == "DRV-1"
    assert payload["vehicle"]["vehicleNumber"] == "VEH-1"
    assert len(payload["nearbyFacilities"]) == len(result.nearby_facilities)

    assert len(sms.to(POLICE)) == 1
    assert len(sms.to(HOSPITAL)) == 1
    alert = sms.to(POLICE)[0]
    assert alert.startswith("EMERGENCY ALERT")
    assert "Asha Rao (DRV-1)" in alert
    assert "12.340000, 56.780000" in alert


async def test_retry_within_window_returns_same_record(emergency_svc, broadcaster, sms, clock, session):
    first = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    clock.advance(2)
    second = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)

    assert second.emergency.id == first.emergency.id
    assert not second.created
    assert second.message
    assert broadcaster.events() == [events.RECEIVE_EMERGENCY]
    assert len(sms.messages) == 2

    assert await count_active(session, "DRV-1", "VEH-1") == 1


async def test_retry_does_not_need_coordinates(emergency_svc):
    first = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    again = await emergency_svc.trigger("DRV-1", "VEH-1", None)
    assert again.emergency.id == first.emergency.id


async def test_new_incident_after_window(emergency_svc, clock):
    first = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    clock.advance(60)
    second = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert second.emergency.id == first.emergency.id

    clock.advance(5 * 60 + 1)
    third = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert third.created
    assert third.emergency.id != first.emergency.id


async def test_new_incident_after_acknowledgement(emergency_svc, clock):
    first = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    await emergency_svc.acknowledge(first.emergency.id)
    clock.advance(1)
    second = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert second.created
    assert second.emergency.id != first.emergency.id


async def test_dedup_is_per_pair(emergency_svc):
    a = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    b = await emergency_svc.trigger("DRV-2", "VEH-2", COORDS)
    assert a.emergency.id != b.emergency.id


@pytest.mark.parametrize("coords", [
    None,
    {},
    {"latitude": 12.34},
    {"latitude": "north", "longitude": 56.78},
    {"latitude": 95, "longitude": 56.78},
    {"latitude": 12.34, "longitude": float("nan")},
    {"latitude": True, "longitude": 56.78},
])
async def test_trigger_rejects_bad_coordinates(emergency_svc, broadcaster, sms, coords):
    with pytest.raises(ValidationError):
        await emergency_svc.trigger("DRV-1", "VEH-1", coords)
    assert broadcaster.sent == []
    assert sms.messages == []


async def test_trigger_requires_identifiers(emergency_svc):
    with pytest.raises(ValidationError):
        await emergency_svc.trigger("", "VEH-1", COORDS)


async def test_trigger_unknown_driver_creates_nothing(emergency_svc, session):
    with pytest.raises(NotFoundError):
        await emergency_svc.trigger("DRV-404", "VEH-1", COORDS)
    assert await count_active(session, "DRV-404", "VEH-1") == 0


def test_parse_coordinates_accepts_short_keys_and_strings():
    assert parse_coordinates({"lat": "12.5", "lng": "-70.25"}) == (12.5, -70.25)
    assert parse_coordinates({"latitude": 0, "longitude": 0}) == (0.0, 0.0)


async def test_alert_failure_does_not_fail_trigger(emergency_svc, sms):
    sms.fail = True
    result = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert result.created
    assert len(sms.messages) == 2


async def test_broadcast_failure_does_not_fail_trigger(emergency_svc, broadcaster):
    async def boom(event, payload):
        raise RuntimeError("socket layer down")
    broadcaster.publish = boom
    result = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert result.created


async def test_acknowledge_emits_stop_alarm_and_acknowledgement(emergency_svc, broadcaster, clock):
    created = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    clock.advance(30)
    acked = await emergency_svc.acknowledge(created.emergency.id)

    assert acked.status == EMERGENCY_ACKNOWLEDGED
    assert acked.acknowledged_at == clock.now
    assert broadcaster.events() == [events.RECEIVE_EMERGENCY, events.STOP_ALARM, events.RECEIVE_ACKNOWLEDGEMENT]

    stop = broadcaster.sent[1][1]
    assert stop == {"emergencyId": acked.id, "driverNumber": "DRV-1", "vehicleNumber": "VEH-1"}
    ack = broadcaster.sent[2][1]
    assert ack["emergencyId"] == acked.id
    assert ack["message"] == "Emergency acknowledged by manager"
    assert ack["emergency"]["status"] == EMERGENCY_ACKNOWLEDGED
    assert ack["emergency"]["driver"]["name"] == "Asha Rao"


async def test_acknowledge_cascades_to_duplicate_rows(emergency_svc, session, clock):
    repo = SQLEmergencyRepository(session)
    # rows left behind by racing or pre-dedup clients
    older = await repo.create(
        driver_number="DRV-1", vehicle_number="VEH-1", latitude=12.3, longitude=56.7,
        timestamp=clock.now, video_url=None, created_at=clock.now - dt.timedelta(hours=2),
    )
    twin = await repo.create(
        driver_number="DRV-1", vehicle_number="VEH-1", latitude=12.3, longitude=56.7,
        timestamp=clock.now, video_url=None, created_at=clock.now,
    )
    other_pair = await emergency_svc.trigger("DRV-2", "VEH-2", COORDS)

    await emergency_svc.acknowledge(older.id)

    assert await count_active(session, "DRV-1", "VEH-1") == 0
    await session.refresh(twin)
    assert twin.status == EMERGENCY_ACKNOWLEDGED
    assert (await repo.get(other_pair.emergency.id)).status == EMERGENCY_ACTIVE


async def test_acknowledge_is_idempotent(emergency_svc, broadcaster, clock):
    created = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    first = await emergency_svc.acknowledge(created.emergency.id)
    stamp = first.acknowledged_at
    clock.advance(10)
    again = await emergency_svc.acknowledge(created.emergency.id)
    assert again.status == EMERGENCY_ACKNOWLEDGED
    assert again.acknowledged_at == stamp
    assert broadcaster.events().count(events.STOP_ALARM) == 2


async def test_reacknowledging_old_incident_cascades_to_newer_one(emergency_svc, broadcaster, session, clock):
    old = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    await emergency_svc.acknowledge(old.emergency.id)
    clock.advance(60)
    new = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    assert new.created

    await emergency_svc.acknowledge(old.emergency.id)

    assert await count_active(session, "DRV-1", "VEH-1") == 0
    assert (await SQLEmergencyRepository(session).get(new.emergency.id)).status == EMERGENCY_ACKNOWLEDGED
    assert broadcaster.events().count(events.STOP_ALARM) == 2


async def test_acknowledge_unknown(emergency_svc):
    with pytest.raises(NotFoundError):
        await emergency_svc.acknowledge(12345)


async def test_list_emergencies_newest_first(emergency_svc, clock):
    a = await emergency_svc.trigger("DRV-1", "VEH-1", COORDS)
    clock.advance(1)
    b = await emergency_svc.trigger("DRV-2", "VEH-2", COORDS)
    views = await emergency_svc.list_emergencies()
    assert [v.emergency.id for v in views] == [b.emergency.id, a.emergency.id]
    assert views[0].driver.driver_number == "DRV-2"
    assert views[1].vehicle.vehicle_number == "VEH-1"


async def test_nearby_validates_input(emergency_svc):
    assert emergency_svc.nearby("12.34", "56.78")
    with pytest.raises(ValidationError):
        emergency_svc.nearby("abc", "56.78")
