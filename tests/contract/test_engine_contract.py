import numpy as np
import pytest

from backpropsim.core.types import ALL, Phase
from backpropsim.training.autoplay import ManualScheduler
from backpropsim.training.engine import TrainingEngine


def _engine(**kwargs) -> TrainingEngine:
    return TrainingEngine(scheduler=ManualScheduler(), **kwargs)


def _state(engine: TrainingEngine) -> dict:
    net = engine.network
    return {
        "sizes": net.layer_sizes,
        "inputs": net.inputs.tolist(),
        "target": net.target,
        "lr": net.learning_rate,
        "weights": [W.tolist() for W in net.weights],
        "biases": [b.tolist() for b in net.biases],
        "hidden": [a.tolist() for a in net.hidden_activations],
        "outputs": net.output_activations.tolist(),
        "epoch": net.epoch,
        "error": net.total_error,
        "phase": engine.phase,
        "log": len(engine.log),
    }


def test_phase_cycle_and_epoch_counter():
    engine = _engine()
    assert engine.phase is Phase.IDLE
    assert engine.next_phase is Phase.FORWARD

    seen = [engine.advance_phase().phase for _ in range(4)]
    assert seen == [Phase.FORWARD, Phase.ERROR, Phase.BACKWARD, Phase.UPDATE]
    assert engine.network.epoch == 1

    entry = engine.advance_phase()
    assert entry.phase is Phase.FORWARD
    assert entry.epoch == 1
    assert engine.next_phase is Phase.ERROR


def test_each_advance_appends_one_entry_with_resulting_state():
    engine = _engine()
    engine.advance_phase()
    entry = engine.advance_phase()
    assert len(engine.log) == 2
    assert entry.phase is Phase.ERROR
    assert entry.total_error == engine.network.total_error
    assert np.array_equal(entry.output_activations, engine.network.output_activations)


def test_error_shrinks_over_twenty_epochs():
    engine = _engine()
    engine.run_epochs(20)
    errors = [entry.total_error for entry in engine.training_log(Phase.ERROR)]
    assert len(errors) == 20
    assert all(later < earlier for earlier, later in zip(errors, errors[1:]))


def test_run_epochs_reports_steps_and_respects_mid_cycle_start():
    engine = _engine()
    assert engine.run_epochs(0) == 0
    assert engine.run_epochs(2) == 8
    engine.advance_phase()
    assert engine.run_epochs(1) == 3
    assert engine.network.epoch == 3


def test_reset_keeps_parameters_and_clears_progress():
    engine = _engine()
    engine.set_learning_rate(0.4)
    engine.run_epochs(3)
    weights = [W.copy() for W in engine.network.weights]

    engine.reset()
    assert engine.phase is Phase.IDLE
    assert engine.network.epoch == 0
    assert engine.network.total_error == 0.0
    assert len(engine.log) == 0
    assert engine.network.learning_rate == 0.4
    for W, W0 in zip(engine.network.weights, weights):
        assert np.array_equal(W, W0)


def test_architecture_change_forces_idle_and_keeps_log():
    engine = _engine()
    engine.run_epochs(1)
    engine.advance_phase()
    engine.set_architecture(3, [4, 3])
    assert engine.phase is Phase.IDLE
    assert engine.network.layer_sizes == [3, 4, 3, 1]
    assert engine.network.epoch == 1
    assert len(engine.log) == 5
    assert engine.advance_phase().phase is Phase.FORWARD


def test_architecture_change_is_clamped():
    engine = _engine()
    engine.set_architecture(8, [0, 9, 2, 2, 2, 2])
    assert engine.network.layer_sizes == [5, 1, 5, 2, 2, 1]


def test_resize_draws_from_seeded_generator():
    first, second = _engine(seed=4), _engine(seed=4)
    first.set_architecture(3, [3])
    second.set_architecture(3, [3])
    for W1, W2 in zip(first.network.weights, second.network.weights):
        assert np.array_equal(W1, W2)


def test_neuron_details_after_forward_pass():
    engine = _engine()
    engine.advance_phase()
    hidden = engine.neuron_details("hidden", 0)
    assert hidden.id == "hidden-0-0"
    assert hidden.net_input == pytest.approx(0.33)
    assert hidden.value == pytest.approx(0.5818, abs=1e-3)
    assert hidden.bias == pytest.approx(0.3)

    inp = engine.neuron_details("input", 1)
    assert inp.value == pytest.approx(0.1)
    assert inp.net_input is None and inp.gradient is None

    out = engine.neuron_details("output", 0)
    assert out.id == "output-0"
    assert out.value == pytest.approx(float(engine.network.output_activations[0]))


def test_details_for_stale_selection_return_none():
    engine = _engine()
    engine.set_architecture(5, [5, 5])
    weight = engine.weight_details(1, 4, 4)
    assert weight is not None
    assert (weight.source_layer, weight.target_layer) == ("hidden", "hidden")

    engine.set_architecture(2, [2])
    assert engine.weight_details(1, 4, 4) is None
    assert engine.weight_details(2, 0, 0) is None
    assert engine.neuron_details("hidden", 0, hidden_layer_index=1) is None
    assert engine.neuron_details("hidden", 3) is None
    assert engine.neuron_details("input", 4) is None
    assert engine.neuron_details("output", 1) is None
    assert engine.neuron_details("bogus", 0) is None


def test_weight_details_names_layers():
    engine = _engine()
    first = engine.weight_details(0, 1, 0)
    assert first.value == pytest.approx(-0.3)
    assert (first.source_layer, first.target_layer) == ("input", "hidden")
    last = engine.weight_details(1, 1, 0)
    assert last.value == pytest.approx(-0.5)
    assert (last.source_layer, last.target_layer) == ("hidden", "output")


def test_out_of_bounds_commands_are_silent_no_ops():
    engine = _engine()
    engine.run_epochs(1)
    before = _state(engine)
    engine.set_weight(5, 0, 0, 1.0)
    engine.set_weight(0, 9, 0, 1.0)
    engine.set_bias(3, 0, 1.0)
    engine.set_bias(0, 7, 1.0)
    engine.set_input(2, 1.0)
    engine.set_input(-1, 1.0)
    assert _state(engine) == before


def test_training_log_filter_through_engine():
    engine = _engine(log_capacity=6)
    engine.run_epochs(2)
    assert len(engine.log) == 6
    assert [e.phase for e in engine.training_log(ALL)][:2] == [Phase.BACKWARD, Phase.UPDATE]
    assert len(engine.training_log("UPDATE")) == 2
    engine.clear_log()
    assert len(engine.training_log()) == 0
    assert engine.network.epoch == 2


def test_callbacks_receive_phase_and_epoch_events():
    class Recorder:
        def __init__(self):
            self.phases = []
            self.epochs = []

        def on_phase(self, entry):
            self.phases.append(entry.phase)

        def on_epoch(self, epoch, metrics):
            self.epochs.append((epoch, metrics["loss"]))

    recorder = Recorder()
    plain = []
    engine = _engine(callbacks=[recorder, plain.append])
    engine.run_epochs(2)
    assert len(recorder.phases) == len(plain) == 8
    assert [epoch for epoch, _ in recorder.epochs] == [1, 2]
    assert recorder.epochs[-1][1] == engine.network.total_error


def test_snapshot_is_detached():
    engine = _engine()
    snap = engine.snapshot()
    engine.set_weight(0, 0, 0, 3.0)
    assert snap.weights[0][0, 0] == 0.6
