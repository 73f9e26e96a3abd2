from dataclasses import dataclass
import logging
import json

from .errors import FatalConfigurationError

logger = logging.getLogger()


@dataclass(frozen=True)
class ChainInfo:
    name: str
    addr: str  # rest (lcd) base url, no trailing path


def load_chains(path):
    """
    load chains.json: [{"name": ..., "addr": ...}, ...]
    order of the file is kept
    """
    try:
        with open(path) as f:
            records = json.load(f)
    except FileNotFoundError as err:
        raise FatalConfigurationError(f"{path} not found!") from err
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as err:
        raise FatalConfigurationError(f"{path} unreadable: {err}") from err

    if not isinstance(records, list):
        raise FatalConfigurationError(f"{path} must be a json array, got: {type(records).__name__}")

    chains = []
    for record in records:
        match record:
            case {"name": str(name), "addr": str(addr)}:
                chains.append(ChainInfo(name=name, addr=addr.rstrip("/")))
            case _:
                raise FatalConfigurationError(f"{path} invalid chain record: {record}")

    logger.debug(f"chains loaded: {len(chains)} from {path}")
    return chains
