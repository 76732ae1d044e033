from __future__ import annotations

# ruff: noqa: E402
import argparse
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
PYTHON_ROOT = REPO_ROOT / "python"
if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from orangey import JsonlReportLogger, OrangeyRng, SeedConfig, load_seed_config
from orangey.config import parse_seed_value

POISSON_EV = 1.33333333

SAMPLERS: tuple[tuple[str, Callable[[OrangeyRng], Any]], ...] = (
    ("rng.rand()", lambda rng: rng.rand()),
    ("rng.rand_range(64, 128)", lambda rng: rng.rand_range(64, 128)),
    ("rng.uniform_double()", lambda rng: rng.uniform_double()),
    ("rng.all_doubles()", lambda rng: rng.all_doubles()),
    ("rng.gaussian()", lambda rng: rng.gaussian()),
    (f"rng.poisson({POISSON_EV})", lambda rng: rng.poisson(POISSON_EV)),
)


def collect_samples(config: SeedConfig, count: int) -> dict[str, list[Any]]:
    # Each sampler starts from a fresh generator so rows are comparable.
    samples: dict[str, list[Any]] = {}
    for label, draw in SAMPLERS:
        rng = OrangeyRng.from_config(config)
        samples[label] = [draw(rng) for _ in range(count)]
    return samples


def format_samples(samples: dict[str, list[Any]]) -> list[str]:
    width = max(len(label) for label in samples) + 1
    lines: list[str] = []
    for label, values in samples.items():
        for i, value in enumerate(values):
            shown = f"{value:016x}" if label == "rng.rand()" else f"{value}"
            lines.append(f"({i:2}) {label + ':':<{width}} {shown}")
    return lines


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print sample values for every sampler.")
    parser.add_argument("--count", type=int, default=3, help="Values printed per sampler.")
    parser.add_argument(
        "--init-state",
        type=str,
        default=None,
        help="Reseed state value (decimal or 0x hex). Overrides ORANGEY_INIT_STATE.",
    )
    parser.add_argument(
        "--init-seq",
        type=str,
        default=None,
        help="Reseed sequence value (decimal or 0x hex). Overrides ORANGEY_INIT_SEQ.",
    )
    parser.add_argument("--json", action="store_true", help="Print one JSON document.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional JSONL file to append the sample report to.",
    )
    args = parser.parse_args(argv)
    if args.count < 0:
        parser.error("--count must be non-negative")
    return args


def _resolve_config(args: argparse.Namespace) -> SeedConfig:
    env_cfg = load_seed_config()
    init_state = env_cfg.init_state
    init_seq = env_cfg.init_seq
    if args.init_state is not None:
        init_state = parse_seed_value(args.init_state, name="--init-state")
    if args.init_seq is not None:
        init_seq = parse_seed_value(args.init_seq, name="--init-seq")
    return SeedConfig(init_state=init_state, init_seq=init_seq)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = _resolve_config(args)
    samples = collect_samples(config, args.count)

    report = {"seed": config.to_dict(), "count": args.count, "samples": samples}
    if args.output is not None:
        JsonlReportLogger(path=args.output, tool="demo").log_report(report)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        for line in format_samples(samples):
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
