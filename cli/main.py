"""Command line front end for the backpropagation simulator."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, List

from backpropsim.core.types import ALL, Phase
from backpropsim.reporting.formulas import FORMULAS
from backpropsim.reporting.plots import ErrorCurvePlot
from backpropsim.reporting.summary import network_summary, summarize_log
from backpropsim.training import presets as preset_registry
from backpropsim.training.autoplay import ManualScheduler

PHASE_CHOICES = [ALL, *(phase.value for phase in Phase)]


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(preset_registry.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="default",
        help="Scenario to load",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--architecture",
        help="Comma separated input count followed by hidden layer sizes, e.g. 3,4,3",
    )
    parser.add_argument(
        "--epochs", type=int, default=0, help="Number of epochs to step synchronously"
    )
    parser.add_argument(
        "--autoplay",
        type=int,
        default=0,
        help="Number of epochs to drive through the autoplay timer (virtual clock)",
    )
    parser.add_argument(
        "--phase",
        choices=PHASE_CHOICES,
        help="Print log entries of this phase as JSON lines",
    )
    parser.add_argument("--summary", action="store_true", help="Print a JSON summary")
    parser.add_argument(
        "--formulas", action="store_true", help="Print the formula reference and exit"
    )
    parser.add_argument("--plot", type=Path, help="Save the error curve to this path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _parse_architecture(text: str) -> List[int]:
    try:
        sizes = [int(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise SystemExit(f"Invalid --architecture value: {text!r}") from exc
    if len(sizes) < 2:
        raise SystemExit("--architecture needs an input count and at least one hidden layer")
    return sizes


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.list_presets:
        for name in sorted(preset_registry.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.formulas:
        for formula in FORMULAS:
            print(
                json.dumps(
                    {
                        "title": formula.title,
                        "formula": formula.formula,
                        "phase": formula.phase.value,
                        "description": formula.description,
                    },
                    ensure_ascii=False,
                )
            )
        raise SystemExit(0)

    config = dict(preset_registry.load_preset(args.preset))
    if args.config:
        config = _merge(config, _load_override(args.config))

    plot = ErrorCurvePlot(args.plot, enable_plots=True) if args.plot else None
    scheduler = ManualScheduler()
    try:
        engine = preset_registry.build_engine(
            config, scheduler=scheduler, callbacks=[plot] if plot else None
        )
    except (KeyError, ValueError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.architecture:
        sizes = _parse_architecture(args.architecture)
        engine.set_architecture(sizes[0], sizes[1:])

    if args.epochs > 0:
        engine.run_epochs(args.epochs)

    if args.autoplay > 0:
        engine.start_autoplay(args.autoplay)
        scheduler.run_until_idle()

    if args.phase:
        for entry in engine.training_log(args.phase):
            print(json.dumps(entry.to_record(), sort_keys=True))

    if args.summary:
        payload = {
            "network": network_summary(engine.network),
            "log": summarize_log(engine.log),
        }
        print(json.dumps(payload, sort_keys=True, ensure_ascii=False))

    if plot is not None:
        plot.close()


if __name__ == "__main__":
    main()
