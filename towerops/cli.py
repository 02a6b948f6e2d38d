import json
import os
from typing import Callable, TypeVar

import click

from towerops.config import Config
from towerops.core.airport import Airport
from towerops.core.errors import AirportError
from towerops.orchestrator.sim import TrafficSimulation
from towerops.persistence import store
from towerops.reporting.boards import arrivals_board, departures_board
from towerops.utils.logging import get_logger, set_level


logger = get_logger(__name__)

T = TypeVar("T")


def _load(cfg: Config) -> Airport:
	if not os.path.exists(cfg.state_file):
		raise click.ClickException(f"No airport saved at {cfg.state_file}; run 'towerops init' first")
	try:
		return store.load(cfg.state_file)
	except AirportError as e:
		raise click.ClickException(str(e))


def _run(cfg: Config, action: Callable[[Airport], T]) -> T:
	# Load, apply one operation, save. A rejected operation leaves the file alone.
	airport = _load(cfg)
	try:
		result = action(airport)
	except AirportError as e:
		logger.warning("Rejected (%s): %s", e.code, e)
		raise click.ClickException(str(e))
	store.save(airport, cfg.state_file)
	return result


@click.group()
@click.option("--state", "state_file", default="airport.json", show_default=True, envvar="TOWEROPS_STATE")
@click.option("--log-level", default="WARNING", show_default=True)
@click.pass_context
def main(ctx: click.Context, state_file: str, log_level: str) -> None:
	"""Airport tower operations CLI."""
	set_level(log_level)
	ctx.obj = Config(state_file=state_file)


@main.command()
@click.option("--runways", type=int, default=2, show_default=True)
@click.option("--force", is_flag=True, help="Overwrite an existing saved airport.")
@click.pass_obj
def init(cfg: Config, runways: int, force: bool) -> None:
	"""Open a new airport with a fixed number of runways."""
	if os.path.exists(cfg.state_file) and not force:
		raise click.ClickException(f"{cfg.state_file} already exists; pass --force to discard it")
	try:
		airport = Airport(runways)
	except AirportError as e:
		raise click.ClickException(str(e))
	store.save(airport, cfg.state_file)
	click.echo(f"Airport opened with {airport.runway_count()} runways")


@main.command()
@click.argument("flight")
@click.argument("city")
@click.pass_obj
def register(cfg: Config, flight: str, city: str) -> None:
	"""Register an inbound flight."""
	_run(cfg, lambda a: a.register_flight(flight, city))
	click.echo(f"Flight {flight} from {city} registered")


@main.command()
@click.argument("flight")
@click.pass_obj
def arrive(cfg: Config, flight: str) -> None:
	"""Request a runway for an inbound flight."""
	runway = _run(cfg, lambda a: a.request_arrival(flight))
	if runway == 0:
		click.echo(f"{flight}: no free runway, circle and wait")
	else:
		click.echo(f"{flight}: cleared for runway {runway}")


@main.command()
@click.argument("flight")
@click.argument("runway", type=int)
@click.pass_obj
def land(cfg: Config, flight: str, runway: int) -> None:
	"""Confirm a flight has landed on its runway."""
	_run(cfg, lambda a: a.confirm_landing(flight, runway))
	click.echo(f"Flight {flight} landed on runway {runway}")


@main.command()
@click.argument("flight")
@click.argument("destination")
@click.pass_obj
def board(cfg: Config, flight: str, destination: str) -> None:
	"""Announce boarding for the outbound leg."""
	_run(cfg, lambda a: a.ready_for_departure(flight, destination))
	click.echo(f"Boarding announced for {flight} to {destination}")


@main.command()
@click.argument("flight")
@click.pass_obj
def takeoff(cfg: Config, flight: str) -> None:
	"""Record a take-off and hand the runway to the next circling flight."""
	promoted = _run(cfg, lambda a: a.process_takeoff(flight))
	click.echo(f"Flight {flight} has left the airport")
	if promoted is not None:
		click.echo(f"{promoted.flight_id}: cleared for runway {promoted.runway_id}")


@main.command()
@click.pass_obj
def arrivals(cfg: Config) -> None:
	"""Show the arrivals board."""
	df = arrivals_board(_load(cfg).list_arrivals())
	click.echo("No arrivals" if df.empty else df.to_string(index=False))


@main.command()
@click.pass_obj
def departures(cfg: Config) -> None:
	"""Show the departures board."""
	df = departures_board(_load(cfg).list_departures())
	click.echo("No departures" if df.empty else df.to_string(index=False))


@main.command()
@click.pass_obj
def status(cfg: Config) -> None:
	"""Print runway occupancy and the circling queue."""
	airport = _load(cfg)
	holders = {f.runway_id: f.flight_id for f in airport.flights() if f.runway_id is not None}
	res = {
		"runways": [
			{"runway": rw.id, "occupied": rw.occupied, "flight": holders.get(rw.id)}
			for rw in airport.runways()
		],
		"circling": airport.waiting_queue(),
		"arrivals": len(airport.list_arrivals()),
		"departures": len(airport.list_departures()),
	}
	click.echo(json.dumps(res, indent=2))


@main.command()
@click.option("--steps", type=int, default=200, show_default=True)
@click.option("--flights", type=int, default=20, show_default=True)
@click.option("--runways", type=int, default=2, show_default=True)
@click.option("--seed", type=int, default=42, show_default=True)
def simulate(steps: int, flights: int, runways: int, seed: int) -> None:
	"""Run random tower traffic against a fresh airport and print metrics."""
	cfg = Config(num_runways=runways, sim_flights=flights, sim_steps=steps, seed=seed)
	try:
		metrics = TrafficSimulation(cfg).run()
	except AirportError as e:
		raise click.ClickException(str(e))
	res = {
		"decisions": metrics.decisions,
		"rejections": metrics.rejections,
		"events": metrics.num_events,
		"max_queue_length": metrics.max_queue_length,
		"arrivals": int(len(metrics.arrivals)),
		"departures": int(len(metrics.departures)),
	}
	click.echo(json.dumps(res, indent=2))
