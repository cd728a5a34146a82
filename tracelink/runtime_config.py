"""Runtime configuration state management."""

from typing import Optional

from tracelink.ids import IdGenerator, RandomIdGenerator
from tracelink.processors.sampler import DEFAULT_SAMPLE_ONE_IN, Sampler

# Global runtime configuration state
_config = {
    "id_generator": None,
    "sample_one_in": DEFAULT_SAMPLE_ONE_IN,
    "debug": False,
}


def set_id_generator(value: Optional[IdGenerator]) -> None:
    _config["id_generator"] = value


def get_id_generator() -> IdGenerator:
    """Return the process default id generator, creating it on first use."""
    generator = _config["id_generator"]
    if generator is None:
        generator = RandomIdGenerator()
        _config["id_generator"] = generator
    return generator


def set_sample_one_in(value: int) -> None:
    # Raises ValueError for any rate Sampler rejects.
    Sampler(value)
    _config["sample_one_in"] = value


def get_sample_one_in() -> int:
    return _config["sample_one_in"]


def get_sampler() -> Sampler:
    return Sampler(_config["sample_one_in"])


def set_debug(value: bool) -> None:
    _config["debug"] = value


def get_debug() -> bool:
    return _config["debug"]


def reset() -> None:
    """Restore every runtime setting to its default."""
    _config["id_generator"] = None
    _config["sample_one_in"] = DEFAULT_SAMPLE_ONE_IN
    _config["debug"] = False
