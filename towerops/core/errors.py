from __future__ import annotations


class AirportError(Exception):
	"""Base class for every rejection raised by the airport engine.

	Each subclass carries a stable ``code`` so front-ends and tests can match
	on the kind of failure without parsing the message.
	"""

	code = "airport-error"

	def __init__(self, message: str = "Airport system error") -> None:
		super().__init__(message)
		self.message = message

	def __str__(self) -> str:
		return self.message


class AirportConfigurationError(AirportError):
	code = "invalid-configuration"


class DuplicateFlightError(AirportError):
	code = "duplicate-flight"


class UnknownFlightError(AirportError):
	code = "unknown-flight"


class InvalidTransitionError(AirportError):
	code = "invalid-transition"


class AlreadyInSystemError(AirportError):
	code = "already-in-system"


class AlreadyLandedError(AirportError):
	code = "already-landed"


class AlreadyArrivedError(AirportError):
	code = "already-arrived"


class AlreadyDepartingError(AirportError):
	code = "already-departing"


class WrongRunwayError(AirportError):
	code = "wrong-runway"


class NotLandedError(AirportError):
	code = "not-landed"


class NeverArrivedError(AirportError):
	code = "never-arrived"


class NoDepartureAnnouncedError(AirportError):
	code = "no-departure-announced"


class ResourceConflictError(AirportError):
	# Double booking or double release of a runway. The engine never lets
	# this happen, so seeing one means its bookkeeping is broken.
	code = "resource-conflict"


class PersistenceError(AirportError):
	code = "corrupt-state"
