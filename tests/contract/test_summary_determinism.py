import json

from backpropsim.reporting.summary import network_summary, summarize_log
from backpropsim.training import presets
from backpropsim.training.autoplay import ManualScheduler


def _run(name: str) -> str:
    engine = presets.build_engine(presets.load_preset(name), scheduler=ManualScheduler())
    engine.run_epochs(5)
    payload = {"network": network_summary(engine.network), "log": summarize_log(engine.log)}
    return json.dumps(payload, sort_keys=True)


def test_summary_outputs_are_deterministic():
    for name in ("default", "deep"):
        assert _run(name) == _run(name)


def test_summary_of_default_run():
    summary = json.loads(_run("default"))
    log = summary["log"]
    assert log["records"] == 20
    assert log["last_epoch"] == 5
    assert log["phases"] == {"IDLE": 0, "FORWARD": 5, "ERROR": 5, "BACKWARD": 5, "UPDATE": 5}
    assert log["tail_window"] == 5
    stats = log["total_error"]
    assert stats["first"] == stats["max"]
    assert stats["last"] == stats["min"]
    assert summary["network"]["architecture"] == "2 → 2 → 1"
    assert summary["network"]["parameters"] == 9
