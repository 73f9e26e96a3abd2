from sys import exit
import traceback

from .config import load_config, setup_logging, logger
from .collector import run


def main():
    try:
        config = load_config()
        setup_logging(config)
        run(config)
    except KeyboardInterrupt:
        logger.info(f"Exit signal... Stopped")
        exit(1)
    except Exception as err:
        # catch crit err traceback and log it
        logger.critical(f"Traceback: {traceback.format_exc()}")
        logger.critical(f"{err}\nEXITING NOW! no snapshot written")
        exit(1)


if __name__ == '__main__':
    main()
