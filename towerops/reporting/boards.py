from __future__ import annotations

import io
import zipfile
from typing import Iterable

import pandas as pd

from towerops.core.airport import Airport
from towerops.core.flights import Flight


ARRIVAL_COLUMNS = ["flight", "from", "status", "runway"]
DEPARTURE_COLUMNS = ["flight", "to", "runway"]


def _runway_cell(flight: Flight) -> str:
	return str(flight.runway_id) if flight.runway_id is not None else ""


def arrivals_board(flights: Iterable[Flight]) -> pd.DataFrame:
	rows = [
		{"flight": f.flight_id, "from": f.city, "status": f.status.name, "runway": _runway_cell(f)}
		for f in flights
	]
	df = pd.DataFrame(rows, columns=ARRIVAL_COLUMNS)
	return df.sort_values("flight").reset_index(drop=True)


def departures_board(flights: Iterable[Flight]) -> pd.DataFrame:
	rows = [{"flight": f.flight_id, "to": f.city, "runway": _runway_cell(f)} for f in flights]
	df = pd.DataFrame(rows, columns=DEPARTURE_COLUMNS)
	return df.sort_values("flight").reset_index(drop=True)


def runway_board(airport: Airport) -> pd.DataFrame:
	holders = {f.runway_id: f.flight_id for f in airport.flights() if f.runway_id is not None}
	rows = [
		{"runway": rw.id, "occupied": rw.occupied, "flight": holders.get(rw.id, "")}
		for rw in airport.runways()
	]
	return pd.DataFrame(rows, columns=["runway", "occupied", "flight"])


def export_zip(airport: Airport) -> bytes:
	buf = io.BytesIO()
	with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as z:
		z.writestr("arrivals.csv", arrivals_board(airport.list_arrivals()).to_csv(index=False))
		z.writestr("departures.csv", departures_board(airport.list_departures()).to_csv(index=False))
		z.writestr("runways.csv", runway_board(airport).to_csv(index=False))
		z.writestr("events.csv", pd.DataFrame(airport.bus.records()).to_csv(index=False))
	return buf.getvalue()
