from __future__ import annotations

# ruff: noqa: E402
import argparse
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
PYTHON_ROOT = REPO_ROOT / "python"
if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from orangey import JsonlReportLogger, OrangeyRng

DEFAULT_DELTAS = (0, 1, 2, 31, 32, 100, 1000, 4097)


class ParityMismatch(RuntimeError):
    pass


@dataclass(frozen=True)
class CaseResult:
    seed: int | None
    delta: int
    jumped: int
    stepped: int
    peeked: int
    peek_mutated: bool
    rewind_restored: bool

    @property
    def ok(self) -> bool:
        return (
            self.jumped == self.stepped
            and self.peeked == self.stepped
            and not self.peek_mutated
            and self.rewind_restored
        )


def _make_rng(seed: int | None) -> OrangeyRng:
    # seed=None is the default stream; otherwise reseed(seed, seed).
    return OrangeyRng() if seed is None else OrangeyRng.seeded(seed, seed)


def run_case(seed: int | None, delta: int) -> CaseResult:
    jumped_rng = _make_rng(seed)
    jumped_rng.skip(delta)
    jumped = jumped_rng.rand()

    stepped_rng = _make_rng(seed)
    stepped = 0
    for _ in range(delta + 1):
        stepped = stepped_rng.rand()

    peek_rng = _make_rng(seed)
    before = peek_rng.copy()
    peeked = peek_rng.peek(delta)

    rewind_rng = _make_rng(seed)
    rewind_rng.skip(delta)
    rewind_rng.skip(-delta)

    return CaseResult(
        seed=seed,
        delta=delta,
        jumped=jumped,
        stepped=stepped,
        peeked=peeked,
        peek_mutated=peek_rng != before,
        rewind_restored=rewind_rng == _make_rng(seed),
    )


def check_case(result: CaseResult) -> None:
    if result.ok:
        return
    raise ParityMismatch(
        f"seed={result.seed} delta={result.delta} jumped={result.jumped} "
        f"stepped={result.stepped} peeked={result.peeked} "
        f"peek_mutated={result.peek_mutated} rewind_restored={result.rewind_restored}"
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check skip/peek against iterative stepping.")
    parser.add_argument("--seeds", type=int, default=4, help="Number of reseeded streams.")
    parser.add_argument("--seed-start", type=int, default=0, help="Initial seed.")
    parser.add_argument(
        "--delta",
        type=int,
        action="append",
        default=None,
        help="Jump distance to check (repeatable).",
    )
    parser.add_argument("--stop-on-first", action="store_true")
    parser.add_argument("--allow-mismatch", action="store_true")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional JSONL file to append the parity report to.",
    )
    args = parser.parse_args(argv)
    if args.delta and any(d < 0 for d in args.delta):
        parser.error("--delta values must be non-negative")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    deltas = args.delta if args.delta else list(DEFAULT_DELTAS)
    seeds: list[int | None] = [None]
    seeds.extend(args.seed_start + i for i in range(args.seeds))

    total_cases = 0
    failures: list[dict[str, Any]] = []

    for seed in seeds:
        for delta in deltas:
            total_cases += 1
            result = run_case(seed, delta)
            try:
                check_case(result)
            except ParityMismatch as exc:
                failures.append(asdict(result))
                print(f"FAIL {exc}")
                if args.stop_on_first:
                    break
                continue
            print(f"PASS seed={seed} delta={delta}")
        if failures and args.stop_on_first:
            break

    report = {
        "total_cases": total_cases,
        "failed_cases": len(failures),
        "failures": failures,
    }
    if args.output is not None:
        JsonlReportLogger(path=args.output, tool="run_jump_parity").log_report(report)

    print(f"Completed {total_cases} parity cases. Failed: {len(failures)}.")
    if failures:
        print(json.dumps(failures, indent=2))

    if failures and not args.allow_mismatch:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
