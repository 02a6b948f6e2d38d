from __future__ import annotations

import functools
import threading
from typing import Any, Callable, Dict, List, Optional, TypeVar

from towerops.core.errors import (
	AirportConfigurationError,
	AlreadyArrivedError,
	AlreadyDepartingError,
	AlreadyInSystemError,
	AlreadyLandedError,
	DuplicateFlightError,
	NeverArrivedError,
	NoDepartureAnnouncedError,
	NotLandedError,
	PersistenceError,
	ResourceConflictError,
	UnknownFlightError,
	WrongRunwayError,
)
from towerops.core.flights import Flight, FlightStatus, Phase
from towerops.core.queue import WaitingQueue
from towerops.core.runways import Runway, RunwayRegistry
from towerops.events.bus import EventBus
from towerops.utils.logging import get_logger


logger = get_logger(__name__)

STATE_VERSION = 1

F = TypeVar("F", bound=Callable[..., Any])


def _synchronized(method: F) -> F:
	@functools.wraps(method)
	def wrapper(self: "Airport", *args: Any, **kwargs: Any) -> Any:
		with self._lock:
			return method(self, *args, **kwargs)
	return wrapper  # type: ignore[return-value]


class Airport:
	"""Owns the runways, the tracked flights and the circling queue.

	Every public operation checks all of its preconditions before touching
	any state, so a rejected call leaves the airport exactly as it was.
	"""

	def __init__(self, num_runways: int, bus: Optional[EventBus] = None) -> None:
		self._registry = RunwayRegistry(num_runways)
		self._flights: Dict[str, Flight] = {}
		self._queue = WaitingQueue()
		self._lock = threading.RLock()
		self.bus = bus if bus is not None else EventBus()

	# -- lifecycle operations -------------------------------------------------

	@_synchronized
	def register_flight(self, flight_id: str, origin_city: str) -> Flight:
		if flight_id in self._flights:
			raise DuplicateFlightError(f"Flight {flight_id} is already registered")
		flight = Flight(flight_id, origin_city)
		self._flights[flight_id] = flight
		logger.info("Registered flight %s from %s", flight_id, origin_city)
		self.bus.publish("flight.registered", {"flight_id": flight_id, "city": origin_city})
		return flight

	@_synchronized
	def request_arrival(self, flight_id: str) -> int:
		flight = self._get(flight_id)
		runway = self._registry.find_free()
		if runway is not None:
			self._descend(flight, runway)
			return runway.id
		self._circle(flight)
		return 0

	@_synchronized
	def confirm_landing(self, flight_id: str, runway_id: int) -> None:
		flight = self._get(flight_id)
		if flight.runway is None:
			raise NeverArrivedError(f"Flight {flight_id} has not been cleared onto a runway")
		if flight.runway.id != runway_id:
			raise WrongRunwayError(
				f"Flight {flight_id} is cleared for runway {flight.runway.id}, not runway {runway_id}"
			)
		if flight.status == FlightStatus.DUE:
			raise NeverArrivedError(f"Flight {flight_id} never reported its arrival")
		if flight.status > FlightStatus.WAITING:
			raise AlreadyLandedError(f"Flight {flight_id} has already landed")
		flight.advance_status()
		logger.info("Flight %s landed on runway %d", flight_id, runway_id)
		self.bus.publish("flight.landed", {"flight_id": flight_id, "runway_id": runway_id})

	@_synchronized
	def ready_for_departure(self, flight_id: str, destination_city: str) -> None:
		flight = self._get(flight_id)
		if flight.status < FlightStatus.LANDED:
			raise NotLandedError(f"Flight {flight_id} has not landed")
		if flight.status == FlightStatus.DEPARTING:
			raise AlreadyDepartingError(f"Flight {flight_id} is already waiting to depart")
		flight.advance_status()
		flight.change_city(destination_city)
		logger.info("Boarding announced for flight %s to %s", flight_id, destination_city)
		self.bus.publish("flight.boarding", {"flight_id": flight_id, "city": destination_city})

	@_synchronized
	def process_takeoff(self, flight_id: str) -> Optional[Flight]:
		flight = self._get(flight_id)
		if flight.status < FlightStatus.LANDED:
			raise NotLandedError(f"Flight {flight_id} has not landed")
		if flight.status == FlightStatus.LANDED:
			raise NoDepartureAnnouncedError(f"Boarding was never announced for flight {flight_id}")
		runway = flight.release_runway()
		del self._flights[flight_id]
		logger.info("Flight %s took off from runway %d", flight_id, runway.id)
		self.bus.publish("flight.departed", {"flight_id": flight_id, "runway_id": runway.id, "city": flight.city})
		return self._promote_next()

	# -- queries --------------------------------------------------------------

	@_synchronized
	def list_arrivals(self) -> List[Flight]:
		return [f for f in self._flights.values() if f.status != FlightStatus.DEPARTING]

	@_synchronized
	def list_departures(self) -> List[Flight]:
		return [f for f in self._flights.values() if f.status == FlightStatus.DEPARTING]

	def runway_count(self) -> int:
		return len(self._registry)

	@_synchronized
	def get_flight(self, flight_id: str) -> Flight:
		return self._get(flight_id)

	@_synchronized
	def flights(self) -> List[Flight]:
		return list(self._flights.values())

	@_synchronized
	def waiting_queue(self) -> List[str]:
		return list(self._queue)

	@_synchronized
	def runways(self) -> List[Runway]:
		return [Runway(rw.id, rw.occupied) for rw in self._registry]

	def __contains__(self, flight_id: object) -> bool:
		return flight_id in self._flights

	# -- invariants -----------------------------------------------------------

	@_synchronized
	def verify(self) -> None:
		"""Raise ResourceConflictError if runway or queue bookkeeping has drifted."""
		holders: Dict[int, str] = {}
		for flight in self._flights.values():
			if not flight.is_consistent():
				raise ResourceConflictError(
					f"Flight {flight.flight_id} in phase {flight.phase.value} has runway {flight.runway_id}"
				)
			if flight.runway is None:
				continue
			if self._registry.get(flight.runway.id) is not flight.runway:
				raise ResourceConflictError(f"Flight {flight.flight_id} references a foreign runway")
			if flight.runway.id in holders:
				raise ResourceConflictError(
					f"Runway {flight.runway.id} is held by {holders[flight.runway.id]} and {flight.flight_id}"
				)
			holders[flight.runway.id] = flight.flight_id
		for rw in self._registry:
			if rw.occupied != (rw.id in holders):
				raise ResourceConflictError(f"Runway {rw.id} occupancy does not match its flights")
		queued = [fid for fid, f in self._flights.items() if f.phase is Phase.QUEUED]
		if sorted(queued) != sorted(self._queue):
			raise ResourceConflictError("Circling queue does not match the flights waiting without a runway")

	# -- persistence ----------------------------------------------------------

	@_synchronized
	def to_dict(self) -> Dict[str, Any]:
		return {
			"version": STATE_VERSION,
			"runways": [rw.to_dict() for rw in self._registry],
			"flights": [f.to_dict() for f in self._flights.values()],
			"queue": list(self._queue),
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any], bus: Optional[EventBus] = None) -> "Airport":
		if data.get("version") != STATE_VERSION:
			raise PersistenceError(f"Unsupported state version {data.get('version')!r}")
		try:
			runways = [Runway(int(rw["id"]), bool(rw["occupied"])) for rw in data["runways"]]
			registry = RunwayRegistry.from_runways(runways)
			flights: Dict[str, Flight] = {}
			for item in data["flights"]:
				runway = None
				if item.get("runway") is not None:
					runway = registry.get(int(item["runway"]))
					if runway is None:
						raise PersistenceError(f"Flight {item['flight_id']} references unknown runway {item['runway']}")
				flight = Flight.from_dict(item, runway)
				if flight.flight_id in flights:
					raise PersistenceError(f"Flight {flight.flight_id} appears twice")
				flights[flight.flight_id] = flight
			queue = WaitingQueue(str(fid) for fid in data["queue"])
		except (AttributeError, KeyError, TypeError, ValueError) as e:
			raise PersistenceError(f"Malformed airport state: {e}") from e
		except (AirportConfigurationError, ResourceConflictError) as e:
			raise PersistenceError(f"Malformed airport state: {e}") from e

		airport = cls.__new__(cls)
		airport._registry = registry
		airport._flights = flights
		airport._queue = queue
		airport._lock = threading.RLock()
		airport.bus = bus if bus is not None else EventBus()
		try:
			airport.verify()
		except ResourceConflictError as e:
			raise PersistenceError(f"Inconsistent airport state: {e}") from e
		return airport

	# -- internals ------------------------------------------------------------

	def _get(self, flight_id: str) -> Flight:
		flight = self._flights.get(flight_id)
		if flight is None:
			raise UnknownFlightError(f"Flight {flight_id} is not registered")
		return flight

	def _descend(self, flight: Flight, runway: Runway) -> None:
		if flight.status > FlightStatus.WAITING:
			raise AlreadyLandedError(
				f"Flight {flight.flight_id} is already at the airport with status {flight.status.name}"
			)
		if flight.runway is not None:
			raise AlreadyInSystemError(
				f"Flight {flight.flight_id} is already assigned to runway {flight.runway.id}"
			)
		was_queued = flight.phase is Phase.QUEUED
		flight.assign_runway(runway)
		if flight.phase is Phase.DUE:
			flight.advance_status()
		if was_queued:
			self._queue.remove(flight.flight_id)
		logger.info("Flight %s cleared for runway %d", flight.flight_id, runway.id)
		self.bus.publish("runway.assigned", {"flight_id": flight.flight_id, "runway_id": runway.id})

	def _circle(self, flight: Flight) -> None:
		if flight.status != FlightStatus.DUE:
			raise AlreadyArrivedError(f"Flight {flight.flight_id} has already reported its arrival")
		flight.advance_status()
		self._queue.enqueue(flight.flight_id)
		logger.info("No free runway, flight %s is circling (position %d)", flight.flight_id, len(self._queue))
		self.bus.publish("flight.queued", {"flight_id": flight.flight_id, "position": len(self._queue)})

	def _promote_next(self) -> Optional[Flight]:
		next_id = self._queue.dequeue_front()
		if next_id is None:
			return None
		flight = self._flights[next_id]
		runway = self._registry.find_free()
		flight.assign_runway(runway)
		logger.info("Flight %s promoted from the circling queue to runway %d", next_id, flight.runway_id)
		self.bus.publish("flight.promoted", {"flight_id": next_id, "runway_id": flight.runway_id})
		return flight
