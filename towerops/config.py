from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class Config:
	# Airport layout
	num_runways: int = 2

	# Where the CLI and console keep the saved airport
	state_file: str = "airport.json"

	# Traffic simulation
	seed: int = 42
	sim_flights: int = 20
	sim_steps: int = 200
	cities: Tuple[str, ...] = field(default_factory=lambda: (
		"Paris",
		"Rome",
		"Madrid",
		"Berlin",
		"Vienna",
		"Prague",
		"Oslo",
		"Lisbon",
	))
