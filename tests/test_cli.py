import json

import pytest
from click.testing import CliRunner

from towerops.cli import main


@pytest.fixture
def run(tmp_path):
	runner = CliRunner()
	state = str(tmp_path / "airport.json")

	def invoke(*args):
		return runner.invoke(main, ["--state", state, *args])

	return invoke


def test_full_tower_session(run):
	assert run("init", "--runways", "1").exit_code == 0
	assert run("register", "AB1", "Paris").exit_code == 0
	assert "cleared for runway 1" in run("arrive", "AB1").output
	assert run("register", "CD2", "Rome").exit_code == 0
	assert "circle" in run("arrive", "CD2").output
	assert run("land", "AB1", "1").exit_code == 0
	assert run("board", "AB1", "Rome").exit_code == 0

	dep = run("departures")
	assert "AB1" in dep.output and "Rome" in dep.output

	res = run("takeoff", "AB1")
	assert res.exit_code == 0
	assert "CD2: cleared for runway 1" in res.output

	status = json.loads(run("status").output)
	assert status["circling"] == []
	assert status["runways"] == [{"runway": 1, "occupied": True, "flight": "CD2"}]
	assert "CD2" in run("arrivals").output


def test_rejections_are_reported_and_not_saved(run):
	run("init", "--runways", "1")
	run("register", "AB1", "Paris")
	res = run("register", "AB1", "Rome")
	assert res.exit_code == 1
	assert "already registered" in res.output
	res = run("land", "AB1", "1")
	assert res.exit_code == 1
	assert "Error:" in res.output
	assert "Paris" in run("arrivals").output


def test_commands_need_an_airport(run):
	res = run("register", "AB1", "Paris")
	assert res.exit_code == 1
	assert "towerops init" in res.output


@pytest.mark.parametrize("content", [
	b"{\"version\": 1, \"runways\": [{\"id\": 1, \"occupied\": false}], \"flights\": [\"AB1\"], \"queue\": []}",
	b"\xff\xfe",
])
def test_corrupt_state_is_reported(tmp_path, content):
	state = tmp_path / "airport.json"
	state.write_bytes(content)
	res = CliRunner().invoke(main, ["--state", str(state), "arrivals"])
	assert res.exit_code == 1
	assert "Error:" in res.output


def test_init_guards(run):
	assert run("init", "--runways", "0").exit_code == 1
	assert run("init").exit_code == 0
	assert run("init").exit_code == 1
	assert run("init", "--runways", "3", "--force").exit_code == 0
	assert len(json.loads(run("status").output)["runways"]) == 3


def test_simulate_prints_metrics():
	res = CliRunner().invoke(main, ["simulate", "--steps", "50", "--flights", "5", "--runways", "1"])
	assert res.exit_code == 0
	out = json.loads(res.output)
	assert sum(out["decisions"].values()) + sum(out["rejections"].values()) == 50
	assert "resource-conflict" not in out["rejections"]
