import logging
import json

import pytest
import requests

from validator_rewards import config, rest

ADDR = "http://x"


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def json(self):
        return json.loads(self.text)


class FakeLCD:
    """stands in for requests.get. unknown urls behave like an unreachable node"""

    def __init__(self):
        self.routes = dict()
        self.calls = list()

    def add(self, url, body=None, text=None, status_code=200, params=None, exc=None):
        key = (url, tuple(sorted(params.items())) if params else None)
        if exc is not None:
            self.routes[key] = exc
        else:
            self.routes[key] = FakeResponse(json.dumps(body) if text is None else text, status_code)

    def validators(self, addr, *operators, **kwargs):
        body = {"validators": [{"operator_address": op, "status": "BOND_STATUS_BONDED"} for op in operators],
                "pagination": {"next_key": None, "total": str(len(operators))}}
        self.add(f"{addr}{rest.VALIDATORS_ENDPOINT}", body, **kwargs)

    def rewards(self, addr, validator, *coins, **kwargs):
        body = {"rewards": {"rewards": [{"denom": denom, "amount": amount} for denom, amount in coins]}}
        self.add(f"{addr}{rest.OUTSTANDING_REWARDS_ENDPOINT.format(validator)}", body, **kwargs)

    def denom(self, addr, denom, base=None, **kwargs):
        body = {"denom": {"base": base, "trace": []}} if base is not None else {"denom": None}
        self.add(f"{addr}{rest.IBC_DENOMS_ENDPOINT.format(denom)}", body, **kwargs)

    def urls(self):
        return [url for url, _, _ in self.calls]

    def __call__(self, url, params=None, **kwargs):
        self.calls.append((url, params, kwargs))
        route = self.routes.get((url, tuple(sorted(params.items())) if params else None))
        if route is None:
            raise requests.ConnectionError(f"connection refused: {url}")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def lcd(monkeypatch):
    fake = FakeLCD()
    monkeypatch.setattr(rest, "get", fake)
    return fake


@pytest.fixture(autouse=True)
def restore_root_logger():
    # setup_logging attaches handlers to the root logger, drop them between tests
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler is config.stdout_handler or isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
