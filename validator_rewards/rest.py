import re
from requests import get, RequestException
import logging

from .errors import FatalNetworkError

logger = logging.getLogger()

VALIDATORS_ENDPOINT = "/cosmos/staking/v1beta1/validators"
OUTSTANDING_REWARDS_ENDPOINT = "/cosmos/distribution/v1beta1/validators/{}/outstanding_rewards"
IBC_DENOMS_ENDPOINT = "/ibc/apps/transfer/v1/denoms/{}"

IBC_PREFIX = "ibc/"
# plain non-negative decimal, at most 18 fractional digits
AMOUNT_RE = re.compile(r"[0-9]+(\.[0-9]{1,18})?")


def get_validators(addr):
    """
    operator addresses of every validator on the chain, all statuses.
    follows pagination.next_key until the last page.
    no status code check: a parseable body without validators is an empty chain
    """
    url = f"{addr}{VALIDATORS_ENDPOINT}"
    params = None
    seen_keys = set()
    validators = []
    while 1:
        try:
            response = get(url, params=params)
        except RequestException as err:
            raise FatalNetworkError(f"failed to query validators on {addr}: {err}") from err
        try:
            response = response.json()
        except ValueError as err:
            raise FatalNetworkError(f"invalid validators response from {addr}: {err}") from err

        match response:
            case {"validators": list(records)}:
                pass
            case {"validators": None}:
                records = []
            case dict() if "validators" not in response:
                records = []
            case _:
                raise FatalNetworkError(f"invalid validators response from {addr}: {response!r}")

        for record in records:
            match record:
                case {"operator_address": str(operator_address)}:
                    validators.append(operator_address)
                case _:
                    logger.debug(f"skipping validator record without operator_address on {addr}")

        match response:
            case {"pagination": {"next_key": str(next_key)}} if next_key:
                # node ignoring pagination.key would hand back the same page forever
                if next_key in seen_keys:
                    raise FatalNetworkError(f"validators pagination on {addr} repeats next_key {next_key}")
                seen_keys.add(next_key)
                params = {"pagination.key": next_key}
            case _:
                break

    logger.debug(f"{addr} validators: {len(validators)}")
    return validators


def get_outstanding_rewards(addr, validator):
    """
    [{"denom": ..., "amount": ...}] for one validator.
    malformed response is logged and treated as no rewards
    """
    url = f"{addr}{OUTSTANDING_REWARDS_ENDPOINT.format(validator)}"
    try:
        response = get(url)
    except RequestException as err:
        raise FatalNetworkError(f"failed to query rewards for {validator} on {addr}: {err}") from err
    try:
        response = response.json()
    except ValueError as err:
        logger.error(f"failed to query rewards for {validator} on {addr} with error: {err}")
        return []

    match response:
        case {"rewards": {"rewards": list(entries)}}:
            pass
        # no rewards accrued (or lcd error body like {"code": 5, "message": ...})
        case {"rewards": {"rewards": None} | None}:
            return []
        case {"rewards": dict() as inner} if "rewards" not in inner:
            return []
        case dict() if "rewards" not in response:
            return []
        case _:
            logger.error(f"failed to query rewards for {validator} on {addr} with error: unexpected response {response!r}")
            return []

    rewards = []
    for entry in entries:
        match entry:
            case {"denom": str(denom), "amount": str(amount)} if _is_amount(amount):
                rewards.append({"denom": denom, "amount": amount})
            case _:
                logger.error(f"failed to query rewards for {validator} on {addr} with error: invalid coin {entry!r}")
                return []
    return rewards


def _is_amount(amount):
    return AMOUNT_RE.fullmatch(amount) is not None


def get_denom(addr, denom):
    """
    base denom behind an ibc/ denom trace.
    best effort: "" on any failure, caller keeps the original denom
    """
    url = f"{addr}{IBC_DENOMS_ENDPOINT.format(denom)}"
    try:
        response = get(url).json()
    except (RequestException, ValueError) as err:
        logger.debug(f"failed to resolve {denom} on {addr}: {err}")
        return ""

    match response:
        case {"denom": {"base": str(base)}} if base:
            return base
        case _:
            return ""
