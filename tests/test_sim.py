import pytest

from towerops.config import Config
from towerops.orchestrator.sim import TrafficSimulation


@pytest.mark.parametrize("runways,flights,seed", [(1, 6, 1), (2, 12, 7), (3, 30, 42)])
def test_random_traffic_keeps_bookkeeping_consistent(runways, flights, seed):
	cfg = Config(num_runways=runways, sim_flights=flights, seed=seed, sim_steps=400)
	sim = TrafficSimulation(cfg)
	metrics = sim.run()
	assert "resource-conflict" not in metrics.rejections
	assert sum(metrics.decisions.values()) + sum(metrics.rejections.values()) == 400
	assert metrics.num_events >= sum(metrics.decisions.values())
	sim.airport.verify()


def test_status_never_moves_backwards():
	cfg = Config(num_runways=1, sim_flights=5, seed=3)
	sim = TrafficSimulation(cfg)
	last = {}

	def watch(evt):
		fid = evt.payload["flight_id"]
		if evt.type == "flight.departed":
			last.pop(fid, None)
			return
		if fid in sim.airport:
			status = sim.airport.get_flight(fid).status
			assert status >= last.get(fid, status)
			last[fid] = status

	sim.airport.bus.subscribe("*", watch)
	sim.run(steps=300)


def test_same_seed_same_run():
	cfg = Config(num_runways=2, sim_flights=10, seed=11)
	first = TrafficSimulation(cfg).run(steps=150)
	second = TrafficSimulation(cfg).run(steps=150)
	assert first.decisions == second.decisions
	assert first.rejections == second.rejections
	assert first.arrivals.equals(second.arrivals)
