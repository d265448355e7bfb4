import itertools

import numpy as np
import pytest

from backpropsim.core.network import default_network
from backpropsim.core.passes import forward_pass
from backpropsim.core.types import ALL, Phase
from backpropsim.training.log import TrainingLog, TrainingLogEntry


class _Clock:
    """Deterministic timestamps 0, 1, 2, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count()

    def __call__(self) -> float:
        return float(next(self._counter))


_CYCLE = [Phase.FORWARD, Phase.ERROR, Phase.BACKWARD, Phase.UPDATE]


def test_log_keeps_most_recent_500_in_order():
    log = TrainingLog(clock=_Clock())
    network = default_network()
    for idx in range(600):
        log.append(network, _CYCLE[idx % 4])
    assert len(log) == 500
    stamps = [entry.timestamp for entry in log]
    assert stamps == [float(i) for i in range(100, 600)]


def test_custom_capacity_and_validation():
    log = TrainingLog(capacity=3, clock=_Clock())
    for _ in range(5):
        log.append(default_network(), Phase.FORWARD)
    assert log.capacity == 3
    assert [e.timestamp for e in log.entries()] == [2.0, 3.0, 4.0]
    with pytest.raises(ValueError):
        TrainingLog(capacity=0)


def test_snapshot_is_independent_of_live_network():
    network = forward_pass(default_network())
    log = TrainingLog(clock=_Clock())
    entry = log.append(network, Phase.FORWARD)
    activations = entry.hidden_activations[0].copy()

    network.set_weight(0, 0, 0, 5.0)
    network.set_input(0, 0.9)
    forward_pass(network)

    assert entry.weights[0][0, 0] == 0.6
    assert entry.inputs[0] == 0.1
    assert np.array_equal(entry.hidden_activations[0], activations)
    with pytest.raises(ValueError):
        entry.weights[0][0, 0] = 1.0


def test_append_does_not_mutate_network():
    network = forward_pass(default_network())
    before = network.copy()
    TrainingLog().append(network, Phase.FORWARD)
    assert np.array_equal(network.weights[0], before.weights[0])
    assert np.array_equal(network.hidden_activations[0], before.hidden_activations[0])
    assert network.epoch == before.epoch


def test_filter_by_phase_is_lazy_and_restartable():
    log = TrainingLog(clock=_Clock())
    network = default_network()
    for idx in range(8):
        log.append(network, _CYCLE[idx % 4])

    errors = log.filter_by_phase(Phase.ERROR)
    assert [e.timestamp for e in errors] == [1.0, 5.0]
    assert [e.timestamp for e in errors] == [1.0, 5.0]

    log.append(network, Phase.FORWARD)
    log.append(network, Phase.ERROR)
    assert len(errors) == 3

    everything = log.filter_by_phase(ALL)
    assert [e.timestamp for e in everything] == [float(i) for i in range(10)]
    assert len(log.filter_by_phase("UPDATE")) == 2
    assert len(log.filter_by_phase(Phase.IDLE)) == 0


def test_clear_empties_log():
    log = TrainingLog()
    log.append(default_network(), Phase.FORWARD)
    log.clear()
    assert len(log) == 0
    assert list(log.filter_by_phase()) == []


def test_unknown_phase_filter_is_rejected():
    with pytest.raises(ValueError):
        TrainingLog().filter_by_phase("SIDEWAYS")


def test_entry_record_is_plain_data():
    network = forward_pass(default_network())
    entry = TrainingLogEntry.capture(network, Phase.FORWARD, 12.5)
    record = entry.to_record()
    assert record["phase"] == "FORWARD"
    assert record["timestamp"] == 12.5
    assert record["layer_sizes"] == [2, 2, 1]
    assert record["weights"][0] == [[0.6, -0.1], [-0.3, 0.4]]
    assert isinstance(record["hidden_activations"][0][0], float)
