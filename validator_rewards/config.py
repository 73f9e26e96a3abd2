from sys import stdout
import logging.config
import tomllib
import logging

from .errors import FatalConfigurationError

CONFIG_FILE = "config.toml"

DEFAULT_CONFIG = {
    'files': {'CHAINS_FILE': "chains.json", 'OUTPUT_FILE': "validator_rewards.json", 'LOG_FILE': "logs.log"},
    'misc': {'log_level': "INFO"},
}

# disable logging from imported modules
logging.config.dictConfig({'version': 1, 'disable_existing_loggers': True})
logger = logging.getLogger()

# log format
formatter = logging.Formatter(fmt='%(asctime)s | %(levelname)-6s | %(threadName)-13s | %(funcName)-17s | %(message)s', datefmt='%m/%d %I:%M:%S')
# stdout logger
stdout_handler = logging.StreamHandler(stdout)
stdout_handler.setFormatter(formatter)


def load_config(path=CONFIG_FILE):
    """
    load config.toml
    missing file -> defaults
    perform structure and content checks
    """
    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except FileNotFoundError:
        return {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    except (tomllib.TOMLDecodeError, ValueError, OSError) as err:
        raise FatalConfigurationError(f"{path} invalid configuration: {err}") from err

    # fill missing keys with defaults before checking types
    for section, values in DEFAULT_CONFIG.items():
        match config.get(section, {}):
            case dict() as given:
                config[section] = {**values, **given}
            case other:
                raise FatalConfigurationError(f"{path} section [{section}] must be a table, got: {other!r}")

    match config:
        case {'files': {'CHAINS_FILE': str(), 'OUTPUT_FILE': str(), 'LOG_FILE': str()},
              'misc': {'log_level': ('INFO' | 'DEBUG' | 'CRITICAL' | 'ERROR' | 'WARNING' | 'FATAL')}}:
            pass
        case _:
            raise FatalConfigurationError(f"{path} invalid configuration:\n{config}")
    return config


def setup_logging(config):
    """attach stdout and file handlers, apply log_level"""
    level = config['misc']['log_level']
    # one file handler at a time, a second call replaces it
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()
    file_handler = logging.FileHandler(config['files']['LOG_FILE'])
    file_handler.setFormatter(formatter)

    for handler in (stdout_handler, file_handler):
        handler.setLevel(level)
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug(f"Config Loaded. Logger configured")
    return file_handler
