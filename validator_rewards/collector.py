import threading
import logging
import json

from .chains import load_chains
from .errors import CollectionAborted
from .rest import get_validators, get_outstanding_rewards, get_denom, IBC_PREFIX

logger = logging.getLogger()


def collect_chain_rewards(chain, stop=None):
    """
    denom -> amount for every validator of one chain. validators are queried one by one.
    same denom from several validators: the last one processed wins, amounts are NOT summed.
    stop: threading.Event set once another chain failed, checked before every validator
    """
    rewards = dict()
    validators = get_validators(chain.addr)
    for validator in validators:
        if stop is not None and stop.is_set():
            raise CollectionAborted(f"{chain.name} stopped, another chain failed")
        for reward in get_outstanding_rewards(chain.addr, validator):
            denom = reward['denom']
            if denom.startswith(IBC_PREFIX):
                if base := get_denom(chain.addr, denom):
                    denom = base
            rewards[denom] = reward['amount']

    logger.info(f"{chain.name:<13} validators: {len(validators):<5} denoms: {len(rewards)}")
    return rewards


def _chain_worker(chain, state):
    try:
        rewards = collect_chain_rewards(chain, state['stop'])
    except CollectionAborted as err:
        logger.debug(f"{err}")
        return
    except Exception as err:
        logger.error(f"{chain.name} collection aborted: {err}")
        with state['lock']:
            state['errors'].append(err)
        # wake collect_all right away
        state['stop'].set()
        return
    with state['lock']:
        state['results'][chain.name] = rewards
        state['pending'] -= 1
        if state['pending'] == 0:
            state['stop'].set()


def collect_all(chains):
    """
    one daemon thread per chain. returns once every chain finished,
    raises the first fatal error as soon as any chain hits one.
    duplicate chain names: last finished thread wins
    """
    state = dict(results=dict(), errors=list(), pending=len(chains),
                 lock=threading.Lock(), stop=threading.Event())

    for chain in chains:
        # daemon: a chain still blocked on a request must not keep the process alive after a fatal error
        th = threading.Thread(target=_chain_worker, args=(chain, state), name=chain.name, daemon=True)
        th.start()
        logger.debug(f"Thread {th.name:<10} started. addr: {chain.addr}")

    if chains:
        state['stop'].wait()

    with state['lock']:
        if state['errors']:
            raise state['errors'][0]
        return {name: rewards for name, rewards in state['results'].items()}


def save_snapshot(snapshot, path):
    # encode before opening so a failed encode leaves the previous file untouched
    data = json.dumps(snapshot, sort_keys=True)
    with open(path, 'w') as f:
        f.write(data)
    logger.info(f"[OK] saved to {path} total chains: {len(snapshot)}")


def run(config):
    chains = load_chains(config['files']['CHAINS_FILE'])
    logger.info(f"chains loaded: {len(chains)}")
    snapshot = collect_all(chains)
    save_snapshot(snapshot, config['files']['OUTPUT_FILE'])
    return snapshot
