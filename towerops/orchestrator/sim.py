from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from towerops.config import Config
from towerops.core.airport import Airport
from towerops.core.errors import AirportError
from towerops.core.flights import FlightStatus
from towerops.events.bus import EventBus
from towerops.reporting.boards import arrivals_board, departures_board
from towerops.utils.logging import get_logger


logger = get_logger(__name__)

OPERATIONS = ["register", "arrive", "land", "board", "takeoff"]
OPERATION_WEIGHTS = [0.25, 0.25, 0.2, 0.15, 0.15]


@dataclass
class SimulationMetrics:
	decisions: Dict[str, int]
	rejections: Dict[str, int]
	num_events: int
	max_queue_length: int
	arrivals: pd.DataFrame
	departures: pd.DataFrame
	logs: List[Dict[str, Any]] = field(default_factory=list)


class TrafficSimulation:
	"""Drives an airport with seeded random operator actions.

	Most actions follow a flight's lifecycle, the rest are deliberately out of
	order so the rejection paths get exercised too. Runway bookkeeping is
	checked after every step.
	"""

	def __init__(self, config: Config, airport: Optional[Airport] = None) -> None:
		self.config = config
		self.airport = airport if airport is not None else Airport(config.num_runways, bus=EventBus())
		self.rng = np.random.default_rng(config.seed)
		self.flight_ids = [f"FL{1000 + i}" for i in range(config.sim_flights)]

	def run(self, steps: Optional[int] = None) -> SimulationMetrics:
		steps = self.config.sim_steps if steps is None else steps
		decisions = {op: 0 for op in OPERATIONS}
		rejections: Dict[str, int] = {}
		max_queue = 0

		for _ in range(steps):
			op = str(self.rng.choice(OPERATIONS, p=OPERATION_WEIGHTS))
			flight_id = str(self.rng.choice(self.flight_ids))
			try:
				self._apply(op, flight_id)
				decisions[op] += 1
			except AirportError as e:
				rejections[e.code] = rejections.get(e.code, 0) + 1
			self.airport.verify()
			max_queue = max(max_queue, len(self.airport.waiting_queue()))

		logger.info(
			"Simulated %d steps | accepted=%d | rejected=%d | max queue=%d",
			steps, sum(decisions.values()), sum(rejections.values()), max_queue,
		)
		return SimulationMetrics(
			decisions=decisions,
			rejections=rejections,
			num_events=len(self.airport.bus.log),
			max_queue_length=max_queue,
			arrivals=arrivals_board(self.airport.list_arrivals()),
			departures=departures_board(self.airport.list_departures()),
			logs=self.airport.bus.records(),
		)

	def _apply(self, op: str, flight_id: str) -> None:
		if op == "register":
			city = str(self.rng.choice(list(self.config.cities)))
			self.airport.register_flight(flight_id, city)
		elif op == "arrive":
			self.airport.request_arrival(flight_id)
		elif op == "land":
			self.airport.confirm_landing(flight_id, self._landing_runway(flight_id))
		elif op == "board":
			city = str(self.rng.choice(list(self.config.cities)))
			self.airport.ready_for_departure(flight_id, city)
		elif op == "takeoff":
			self.airport.process_takeoff(flight_id)
		else:
			raise ValueError(f"Unknown operation {op}")

	def _landing_runway(self, flight_id: str) -> int:
		# Mostly the runway the tower handed out, sometimes a wrong one
		if flight_id in self.airport:
			flight = self.airport.get_flight(flight_id)
			if flight.runway_id is not None and flight.status == FlightStatus.WAITING and self.rng.random() < 0.8:
				return flight.runway_id
		return int(self.rng.integers(1, self.airport.runway_count() + 1))
