import io
import zipfile

from towerops.core.airport import Airport
from towerops.reporting.boards import arrivals_board, departures_board, export_zip, runway_board


def _airport():
	airport = Airport(1)
	airport.register_flight("AB1", "Paris")
	airport.register_flight("CD2", "Rome")
	airport.request_arrival("AB1")
	airport.request_arrival("CD2")
	airport.confirm_landing("AB1", 1)
	airport.ready_for_departure("AB1", "Oslo")
	return airport


def test_arrivals_and_departures_tables():
	airport = _airport()
	arr = arrivals_board(airport.list_arrivals())
	dep = departures_board(airport.list_departures())
	assert list(arr.columns) == ["flight", "from", "status", "runway"]
	assert arr.to_dict(orient="records") == [{"flight": "CD2", "from": "Rome", "status": "WAITING", "runway": ""}]
	assert dep.to_dict(orient="records") == [{"flight": "AB1", "to": "Oslo", "runway": "1"}]


def test_empty_boards_keep_columns():
	airport = Airport(2)
	assert arrivals_board(airport.list_arrivals()).empty
	assert list(departures_board([]).columns) == ["flight", "to", "runway"]


def test_runway_board_and_export():
	airport = _airport()
	rw = runway_board(airport)
	assert rw.loc[0, "flight"] == "AB1"
	assert bool(rw.loc[0, "occupied"])
	with zipfile.ZipFile(io.BytesIO(export_zip(airport))) as z:
		assert sorted(z.namelist()) == ["arrivals.csv", "departures.csv", "events.csv", "runways.csv"]
		assert "CD2" in z.read("arrivals.csv").decode()
