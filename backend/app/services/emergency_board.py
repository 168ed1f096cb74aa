"""
Client-side view of emergencies, fed by both the list poll and push events.

Dashboards and driver devices receive the same facts twice: from the
realtime channel (unordered, may be missed) and from polling
``GET /api/emergency/all``. The board merges both into one map keyed by
emergency id, so replays and out-of-order arrival converge on the same state.
Status only moves forward for ids known to be acknowledged, either by id in
an event or by a server record: no later ACTIVE copy (a stale poll, a
replayed trigger event) brings those back. A ``stop_alarm`` also silences the
other rows of its driver/vehicle pair, but only provisionally: it may be a
late message about an older incident, so the next poll decides.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from app.domain import events
from app.domain.entities.emergency import EMERGENCY_ACTIVE, EMERGENCY_ACKNOWLEDGED


class EmergencyBoard:
    def __init__(self) -> None:
        self._entries: Dict[int, Dict[str, Any]] = {}
        self._acknowledged: Set[int] = set()
        self.locations: Dict[str, Dict[str, Any]] = {}

    def _merge(self, item: Mapping[str, Any]) -> None:
        emergency_id = item.get("id")
        if emergency_id is None:
            return
        entry = dict(self._entries.get(emergency_id, {}))
        entry.update(item)
        if emergency_id in self._acknowledged or item.get("status") == EMERGENCY_ACKNOWLEDGED:
            entry["status"] = EMERGENCY_ACKNOWLEDGED
            self._acknowledged.add(emergency_id)
        self._entries[emergency_id] = entry

    def _acknowledge(self, emergency_id: Optional[int]) -> None:
        if emergency_id is None:
            return
        self._acknowledged.add(emergency_id)
        if emergency_id in self._entries:
            self._entries[emergency_id]["status"] = EMERGENCY_ACKNOWLEDGED

    def apply_snapshot(self, items: Iterable[Mapping[str, Any]]) -> None:
        for item in items:
            self._merge(item)

    def apply_event(self, event: str, data: Mapping[str, Any]) -> None:
        if event == events.RECEIVE_EMERGENCY:
            self._merge(data)
        elif event == events.RECEIVE_ACKNOWLEDGEMENT:
            if isinstance(data.get("emergency"), Mapping):
                self._merge(data["emergency"])
            self._acknowledge(data.get("emergencyId"))
        elif event == events.STOP_ALARM:
            self._acknowledge(data.get("emergencyId"))
            driver, vehicle = data.get("driverNumber"), data.get("vehicleNumber")
            for entry in self._entries.values():
                if entry.get("driverNumber") == driver and entry.get("vehicleNumber") == vehicle:
                    # provisional; a later snapshot may restore ACTIVE
                    entry["status"] = EMERGENCY_ACKNOWLEDGED
        elif event == events.RECEIVE_LOCATION:
            vehicle = data.get("vehicleNumber")
            if vehicle:
                self.locations[vehicle] = dict(data)

    def get(self, emergency_id: int) -> Optional[Dict[str, Any]]:
        return self._entries.get(emergency_id)

    def active(self) -> List[Dict[str, Any]]:
        return [e for e in self._entries.values() if e.get("status") == EMERGENCY_ACTIVE]

    def active_for(self, driver_number: str, vehicle_number: str) -> bool:
        """Whether the alarm for this driver/vehicle should still sound."""
        return any(
            e.get("driverNumber") == driver_number and e.get("vehicleNumber") == vehicle_number
            for e in self.active()
        )
