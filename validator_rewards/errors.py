class RewardsError(Exception):
    """base for errors that must abort the whole run"""


class FatalConfigurationError(RewardsError):
    """config.toml or chains.json is missing, unreadable or malformed"""


class FatalNetworkError(RewardsError):
    """request could not be sent or the validators listing is not valid json"""


class CollectionAborted(RewardsError):
    """chain collection stopped early because another chain hit a fatal error"""
