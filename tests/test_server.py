import time

import pytest
from fastapi.testclient import TestClient

from stats_simulator.schemas import SimulationParams
from stats_simulator.server.main import app
from stats_simulator.server.state import get_simulator
from stats_simulator.simulation.simulator import Simulator


@pytest.fixture
def sim():
    return Simulator(
        params=SimulationParams(
            probability_of_success=0.5,
            trials_per_experiment=10,
            number_of_experiments=30,
        ),
        delay_ms=0,
        seed=11,
    )


@pytest.fixture
def client(sim):
    app.dependency_overrides[get_simulator] = lambda: sim
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(sim.shutdown)
    app.dependency_overrides.clear()


def wait_until_idle(client, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        state = client.get("/simulator/state").json()
        if not state["is_running"]:
            return state
        time.sleep(0.01)
    raise AssertionError("simulation did not finish in time")


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_initial_state(client):
    state = client.get("/simulator/state").json()

    assert state["params"] == {
        "probability_of_success": 0.5,
        "trials_per_experiment": 10,
        "number_of_experiments": 30,
    }
    assert state["is_running"] is False
    assert state["current_experiment"] == 0


def test_full_run_over_http(client):
    assert client.post("/simulator/start").json() == {"started": True}

    state = wait_until_idle(client)

    assert state["current_experiment"] == 30
    assert state["progress"] == 1.0
    histogram = client.get("/simulator/histogram").json()
    assert sum(histogram["data"]) == 30
    stats = client.get("/simulator/statistics").json()
    assert stats["expected_value"] == 5.0
    assert 0.0 <= stats["p_value"] <= 1.0
    results = client.get("/simulator/results", params={"limit": 5}).json()
    assert [r["experiment_number"] for r in results] == [1, 2, 3, 4, 5]


def test_capped_histogram(client, sim):
    client.post("/simulator/start")
    wait_until_idle(client)

    response = client.get("/simulator/histogram", params={"binning": "capped"})

    assert response.status_code == 200
    assert all("-" in label for label in response.json()["labels"])


def test_invalid_binning_is_rejected(client):
    response = client.get("/simulator/histogram", params={"binning": "weird"})

    assert response.status_code == 422


def test_update_params_clears_results(client):
    client.post("/simulator/start")
    wait_until_idle(client)

    response = client.patch(
        "/simulator/params", json={"probability_of_success": "0.2"}
    )

    state = response.json()
    assert response.status_code == 200
    assert state["params"]["probability_of_success"] == 0.2
    assert state["result_count"] == 0
    assert state["current_experiment"] == 0


def test_invalid_params_are_flagged_not_raised(client):
    response = client.patch("/simulator/params", json={"probability_of_success": "7"})

    state = response.json()
    assert response.status_code == 200
    assert state["last_input_invalid"] is True
    assert state["probability_valid"] is False
    assert state["params"]["probability_of_success"] == 0.5
    assert client.post("/simulator/start").json() == {"started": False}

    restored = client.post("/simulator/params/restore-default-probability").json()
    assert restored["probability_valid"] is True


def test_params_are_locked_while_running(client, sim):
    sim.set_params(number_of_experiments=1_000_000)
    sim.update_animation_speed(200)
    client.post("/simulator/start")

    response = client.patch("/simulator/params", json={"trials_per_experiment": 3})

    assert response.status_code == 409
    assert client.post("/simulator/start").json() == {"started": False}
    assert client.post("/simulator/stop").json() == {"stopped": True}
    assert client.get("/simulator/state").json()["is_running"] is False


def test_stop_when_idle(client):
    assert client.post("/simulator/stop").json() == {"stopped": False}


def test_reset(client):
    client.post("/simulator/start")
    wait_until_idle(client)

    state = client.post("/simulator/reset").json()

    assert state["result_count"] == 0
    assert state["current_experiment"] == 0
    assert client.get("/simulator/histogram").json() == {"labels": [], "data": []}


def test_bar_selection(client):
    client.post("/simulator/start")
    wait_until_idle(client)
    histogram = client.get("/simulator/histogram").json()

    response = client.post("/simulator/selection", json={"index": 0})

    selected = response.json()
    assert response.status_code == 200
    assert selected["successes"] == int(histogram["labels"][0])
    assert selected["frequency"] == histogram["data"][0]
    assert client.get("/simulator/selection").json() == selected

    client.delete("/simulator/selection")
    assert client.get("/simulator/selection").json() is None


def test_bar_selection_out_of_range(client):
    response = client.post("/simulator/selection", json={"index": 3})

    assert response.status_code == 422


def test_animation_speed_is_clamped(client):
    state = client.put("/simulator/animation-speed", json={"speed_ms": 1}).json()

    assert state["animation_speed_ms"] == 10


def test_shutdown_finishes_a_paced_run(client, sim):
    sim.set_params(number_of_experiments=1_000)
    sim.update_animation_speed(200)
    client.post("/simulator/start")

    client.portal.call(sim.shutdown)

    assert sim._task is None
    assert client.get("/simulator/state").json()["is_running"] is False
