from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from towerops.core.errors import AlreadyInSystemError, InvalidTransitionError, ResourceConflictError
from towerops.core.runways import Runway


class FlightStatus(IntEnum):
	DUE = 0        # registered, inbound
	WAITING = 1    # asked to land, circling or cleared onto a runway
	LANDED = 2
	DEPARTING = 3  # boarding announced for the outbound leg


class Phase(Enum):
	DUE = "DUE"
	QUEUED = "QUEUED"        # waiting, no runway yet
	HOLDING = "HOLDING"      # waiting, runway granted
	LANDED = "LANDED"
	DEPARTING = "DEPARTING"

	@property
	def status(self) -> FlightStatus:
		return _PHASE_STATUS[self]


_PHASE_STATUS = {
	Phase.DUE: FlightStatus.DUE,
	Phase.QUEUED: FlightStatus.WAITING,
	Phase.HOLDING: FlightStatus.WAITING,
	Phase.LANDED: FlightStatus.LANDED,
	Phase.DEPARTING: FlightStatus.DEPARTING,
}

_RUNWAY_PHASES = {Phase.HOLDING, Phase.LANDED, Phase.DEPARTING}


class Flight:
	"""A tracked flight and the runway it currently owns, if any.

	The phase tag separates a flight circling without a runway (``QUEUED``)
	from one cleared onto a runway (``HOLDING``); both report the public
	status ``WAITING``.
	"""

	def __init__(self, flight_id: str, city: str) -> None:
		self.flight_id = flight_id
		self.city = city
		self.phase = Phase.DUE
		self.runway: Optional[Runway] = None

	@property
	def status(self) -> FlightStatus:
		return self.phase.status

	@property
	def runway_id(self) -> Optional[int]:
		return self.runway.id if self.runway is not None else None

	def advance_status(self) -> None:
		if self.phase is Phase.DUE:
			self.phase = Phase.HOLDING if self.runway is not None else Phase.QUEUED
		elif self.phase in (Phase.QUEUED, Phase.HOLDING):
			self.phase = Phase.LANDED
		elif self.phase is Phase.LANDED:
			self.phase = Phase.DEPARTING
		else:
			raise InvalidTransitionError(f"Flight {self.flight_id} cannot move past DEPARTING")

	def assign_runway(self, runway: Optional[Runway]) -> None:
		if runway is None:
			raise ResourceConflictError(f"No runway supplied for flight {self.flight_id}")
		if runway.occupied:
			raise ResourceConflictError(f"Runway {runway.id} is already booked for another flight")
		if self.runway is not None:
			raise AlreadyInSystemError(
				f"Flight {self.flight_id} is already assigned to runway {self.runway.id}"
			)
		runway.book()
		self.runway = runway
		if self.phase is Phase.QUEUED:
			self.phase = Phase.HOLDING

	def release_runway(self) -> Runway:
		if self.runway is None:
			raise ResourceConflictError(f"Flight {self.flight_id} holds no runway")
		runway = self.runway
		runway.release()
		self.runway = None
		return runway

	def change_city(self, city: str) -> None:
		self.city = city

	def to_dict(self) -> Dict[str, Any]:
		return {
			"flight_id": self.flight_id,
			"city": self.city,
			"phase": self.phase.value,
			"runway": self.runway_id,
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any], runway: Optional[Runway]) -> "Flight":
		flight = cls(str(data["flight_id"]), str(data["city"]))
		flight.phase = Phase(data["phase"])
		flight.runway = runway
		return flight

	def is_consistent(self) -> bool:
		return (self.phase in _RUNWAY_PHASES) == (self.runway is not None)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Flight):
			return NotImplemented
		return self.flight_id == other.flight_id

	def __hash__(self) -> int:
		return hash(self.flight_id)

	def __repr__(self) -> str:
		out = f"Flight({self.flight_id}, city={self.city}, status={self.status.name}"
		if self.runway is not None:
			out += f", runway={self.runway.id}"
		return out + ")"
