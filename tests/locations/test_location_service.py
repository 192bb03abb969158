from __future__ import annotations

import pytest

from src.church_attendance.church_attendance.core.enums import ServiceType
from src.church_attendance.church_attendance.core.exceptions import (
    DuplicateNameError,
    InvalidInputError,
    LocationInUseError,
    NotFoundError,
)
from src.church_attendance.church_attendance.locations.service import LocationService
from tests.fakes import InMemoryLocations


@pytest.fixture
def svc() -> LocationService:
    return LocationService(InMemoryLocations())


def test_create_defaults_radius_and_starts_inactive(svc):
    loc = svc.create(name="Main Campus", latitude="-1.2794", longitude=36.8156, address="University Way")

    assert loc.radius == 100
    assert loc.latitude == pytest.approx(-1.2794)
    assert loc.address == "University Way"
    assert loc.is_active is False


def test_create_rejects_duplicate_name(svc):
    svc.create(name="Main Campus", latitude=-1.2794, longitude=36.8156)
    with pytest.raises(DuplicateNameError):
        svc.create(name="Main Campus", latitude=0, longitude=0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": " ", "latitude": 1, "longitude": 1},
        {"name": "X", "latitude": "north", "longitude": 1},
        {"name": "X", "latitude": "nan", "longitude": 1},
        {"name": "X", "latitude": 1, "longitude": float("inf")},
        {"name": "X", "latitude": 91, "longitude": 1},
        {"name": "X", "latitude": 1, "longitude": -180.5},
        {"name": "X", "latitude": 1, "longitude": 1, "radius": 0},
        {"name": "X", "latitude": 1, "longitude": 1, "radius": -5},
    ],
)
def test_create_rejects_invalid_input(svc, kwargs):
    with pytest.raises(InvalidInputError):
        svc.create(**kwargs)


def test_update_changes_only_supplied_fields(svc):
    loc = svc.create(name="Hall", latitude=1.0, longitude=2.0, radius=80, description="old")

    updated = svc.update(loc.location_id, radius=120, description="new")

    assert updated.radius == 120
    assert updated.description == "new"
    assert updated.name == "Hall"
    assert updated.latitude == 1.0


def test_update_missing_location(svc):
    with pytest.raises(NotFoundError):
        svc.update(999, radius=50)


def test_update_rename_onto_existing_name(svc):
    svc.create(name="A", latitude=0, longitude=0)
    b = svc.create(name="B", latitude=0, longitude=0)
    with pytest.raises(DuplicateNameError):
        svc.update(b.location_id, name="A")


def test_activation_moves_service_to_new_location(svc):
    l1 = svc.create(name="L1", latitude=0, longitude=0)
    l2 = svc.create(name="L2", latitude=0, longitude=0)

    svc.activate_for_services(l1.location_id, [ServiceType.SABBATH_MORNING])
    svc.activate_for_services(l2.location_id, ["SABBATH_MORNING"])

    assert svc.active_location_for(ServiceType.SABBATH_MORNING).location_id == l2.location_id
    assert svc.get(l1.location_id).active_for_sabbath is False
    assert svc.get(l2.location_id).active_for_sabbath is True


def test_activation_only_touches_requested_services(svc):
    l1 = svc.create(name="L1", latitude=0, longitude=0)
    l2 = svc.create(name="L2", latitude=0, longitude=0)

    svc.activate_for_services(l1.location_id, ["SABBATH_MORNING", "FRIDAY_VESPERS"])
    svc.activate_for_services(l2.location_id, ["FRIDAY_VESPERS", "WEDNESDAY_VESPERS"])

    active = svc.active_locations()
    assert active[ServiceType.SABBATH_MORNING].name == "L1"
    assert active[ServiceType.FRIDAY_VESPERS].name == "L2"
    assert active[ServiceType.WEDNESDAY_VESPERS].name == "L2"


def test_single_active_location_per_service_after_many_activations(svc):
    ids = [svc.create(name=f"L{i}", latitude=0, longitude=0).location_id for i in range(4)]
    plan = [
        (ids[0], ["SABBATH_MORNING", "WEDNESDAY_VESPERS"]),
        (ids[1], ["WEDNESDAY_VESPERS"]),
        (ids[2], ["FRIDAY_VESPERS", "SABBATH_MORNING"]),
        (ids[3], ["FRIDAY_VESPERS"]),
        (ids[0], ["FRIDAY_VESPERS"]),
    ]
    for location_id, services in plan:
        svc.activate_for_services(location_id, services)

    for service in ServiceType:
        holders = [loc for loc in svc.list_locations() if service in loc.active_services]
        assert len(holders) <= 1


@pytest.mark.parametrize("services", [[], None, ["CHRISTMAS"], "SABBATH_MORNING"])
def test_activation_rejects_bad_service_sets(svc, services):
    loc = svc.create(name="L", latitude=0, longitude=0)
    with pytest.raises(InvalidInputError):
        svc.activate_for_services(loc.location_id, services)


def test_activation_of_missing_location(svc):
    with pytest.raises(NotFoundError):
        svc.activate_for_services(42, ["SABBATH_MORNING"])


def test_delete_refuses_active_location(svc):
    loc = svc.create(name="L", latitude=0, longitude=0)
    svc.activate_for_services(loc.location_id, ["WEDNESDAY_VESPERS"])

    with pytest.raises(LocationInUseError):
        svc.delete(loc.location_id)

    svc.deactivate_for_services(loc.location_id, ["WEDNESDAY_VESPERS"])
    svc.delete(loc.location_id)
    with pytest.raises(NotFoundError):
        svc.get(loc.location_id)


def test_delete_missing_location(svc):
    with pytest.raises(NotFoundError):
        svc.delete(7)


def test_deactivate_leaves_other_locations_alone(svc):
    l1 = svc.create(name="L1", latitude=0, longitude=0)
    l2 = svc.create(name="L2", latitude=0, longitude=0)
    svc.activate_for_services(l2.location_id, ["SABBATH_MORNING"])

    svc.deactivate_for_services(l1.location_id, ["SABBATH_MORNING"])

    assert svc.active_location_for(ServiceType.SABBATH_MORNING).location_id == l2.location_id
