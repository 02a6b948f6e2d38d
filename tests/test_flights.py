import pytest

from towerops.core.errors import AlreadyInSystemError, InvalidTransitionError, ResourceConflictError
from towerops.core.flights import Flight, FlightStatus, Phase
from towerops.core.runways import Runway


def test_new_flight_is_due_without_runway():
	f = Flight("AB1", "Paris")
	assert f.status == FlightStatus.DUE
	assert f.phase is Phase.DUE
	assert f.runway is None
	assert f.runway_id is None


def test_advance_status_walks_the_lifecycle_then_stops():
	f = Flight("AB1", "Paris")
	seen = [f.status]
	for _ in range(3):
		f.advance_status()
		seen.append(f.status)
	assert seen == [FlightStatus.DUE, FlightStatus.WAITING, FlightStatus.LANDED, FlightStatus.DEPARTING]
	with pytest.raises(InvalidTransitionError):
		f.advance_status()
	assert f.status == FlightStatus.DEPARTING


def test_due_flight_without_runway_becomes_queued():
	f = Flight("AB1", "Paris")
	f.advance_status()
	assert f.phase is Phase.QUEUED
	assert f.status == FlightStatus.WAITING


def test_assign_runway_books_it_and_promotes_queued_flight():
	f = Flight("AB1", "Paris")
	f.advance_status()
	rw = Runway(1)
	f.assign_runway(rw)
	assert rw.occupied
	assert f.runway is rw
	assert f.phase is Phase.HOLDING
	assert f.status == FlightStatus.WAITING


def test_assign_runway_rejections_leave_flight_unchanged():
	f = Flight("AB1", "Paris")
	with pytest.raises(ResourceConflictError):
		f.assign_runway(None)
	taken = Runway(1, occupied=True)
	with pytest.raises(ResourceConflictError):
		f.assign_runway(taken)
	assert f.runway is None

	f.assign_runway(Runway(2))
	other = Runway(3)
	with pytest.raises(AlreadyInSystemError):
		f.assign_runway(other)
	assert not other.occupied
	assert f.runway_id == 2


def test_release_runway_frees_it():
	f = Flight("AB1", "Paris")
	with pytest.raises(ResourceConflictError):
		f.release_runway()
	rw = Runway(1)
	f.assign_runway(rw)
	assert f.release_runway() is rw
	assert not rw.occupied
	assert f.runway is None


def test_change_city_and_identity():
	f = Flight("AB1", "Paris")
	f.change_city("Rome")
	assert f.city == "Rome"
	assert f == Flight("AB1", "Oslo")
	assert len({f, Flight("AB1", "Oslo")}) == 1
	assert "AB1" in repr(f)
