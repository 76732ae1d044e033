from .config import SeedConfig, load_seed_config
from .constants import DEFAULT_INC, DEFAULT_STATE, MUL
from .orangey_rng import OrangeyRng, advance, output
from .reporting import JsonlReportLogger
from .sequences import DrawSequence, PeekSequence, take

__all__ = [
    "DEFAULT_INC",
    "DEFAULT_STATE",
    "DrawSequence",
    "JsonlReportLogger",
    "MUL",
    "OrangeyRng",
    "PeekSequence",
    "SeedConfig",
    "advance",
    "load_seed_config",
    "output",
    "take",
]
