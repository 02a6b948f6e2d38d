import pytest

from towerops.core.errors import AirportConfigurationError, ResourceConflictError
from towerops.core.runways import Runway, RunwayRegistry


def test_registry_numbers_runways_from_one():
	reg = RunwayRegistry(3)
	assert [rw.id for rw in reg] == [1, 2, 3]
	assert len(reg) == 3
	assert reg.get(2).id == 2
	assert reg.get(0) is None
	assert reg.get(4) is None


@pytest.mark.parametrize("count", [0, -1, 2.5, "3", True])
def test_registry_rejects_bad_counts(count):
	with pytest.raises(AirportConfigurationError):
		RunwayRegistry(count)


def test_find_free_scans_in_ascending_order():
	reg = RunwayRegistry(3)
	assert reg.find_free().id == 1
	reg.get(1).book()
	assert reg.find_free().id == 2
	reg.get(2).book()
	reg.get(3).book()
	assert reg.find_free() is None
	reg.get(2).release()
	assert reg.find_free().id == 2


def test_double_book_and_double_release_are_conflicts():
	rw = Runway(1)
	with pytest.raises(ResourceConflictError):
		rw.release()
	rw.book()
	with pytest.raises(ResourceConflictError):
		rw.book()
	assert rw.occupied


def test_from_runways_requires_contiguous_ids():
	reg = RunwayRegistry.from_runways([Runway(1, True), Runway(2)])
	assert reg.get(1).occupied
	with pytest.raises(AirportConfigurationError):
		RunwayRegistry.from_runways([Runway(2)])
	with pytest.raises(AirportConfigurationError):
		RunwayRegistry.from_runways([])
