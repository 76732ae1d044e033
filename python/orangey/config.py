from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from .constants import MASK128

ENV_INIT_STATE = "ORANGEY_INIT_STATE"
ENV_INIT_SEQ = "ORANGEY_INIT_SEQ"


@dataclass(frozen=True)
class SeedConfig:
    init_state: int | None = None
    init_seq: int | None = None

    @property
    def is_seeded(self) -> bool:
        return self.init_state is not None or self.init_seq is not None

    def to_dict(self) -> dict[str, Any]:
        # Hex strings keep 128-bit values readable in JSON reports.
        payload = asdict(self)
        for key, value in payload.items():
            if value is not None:
                payload[key] = hex(value)
        return payload


def parse_seed_value(raw: str, *, name: str = "seed") -> int | None:
    """Parse a decimal or 0x-prefixed hex seed; blank means unset."""
    text = raw.strip().replace("_", "")
    if not text:
        return None
    try:
        value = int(text, 0)
    except ValueError as exc:
        raise ValueError(f"{name} must be a decimal or 0x-prefixed integer, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    if value > MASK128:
        raise ValueError(f"{name} must fit in 128 bits, got {raw!r}")
    return value


def load_seed_config(environ: Mapping[str, str] | None = None) -> SeedConfig:
    env = os.environ if environ is None else environ

    def _read(name: str) -> int | None:
        raw = env.get(name)
        if raw is None:
            return None
        return parse_seed_value(raw, name=name)

    return SeedConfig(init_state=_read(ENV_INIT_STATE), init_seq=_read(ENV_INIT_SEQ))
