"""
Contract Deployment
Deploys the configured contract and writes the deployment record
"""

import sys
import math
import signal
import argparse
import threading
from typing import Dict, List, Optional
from loguru import logger
from dotenv import load_dotenv

from deployer.config import DEFAULT_CONFIG_PATH, load_config
from deployer.context import DeploymentContext
from deployer.deploy_engine import Deployer
from deployer.exceptions import ConfigurationError, DeploymentError


def configure_logging(logging_config: Optional[Dict] = None):
    """
    Configure loguru sinks

    Args:
        logging_config: Resolved logging section of the config
    """
    logging_config = logging_config or {}

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=logging_config.get('level', 'INFO')
    )

    if logging_config.get('file'):
        logger.add(
            logging_config['file'],
            rotation=logging_config.get('rotation', '1 day'),
            retention=logging_config.get('retention', '7 days'),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy the configured contract")
    parser.add_argument(
        '--config',
        default=DEFAULT_CONFIG_PATH,
        help=f"Deployment config file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        '--network',
        default=None,
        help="Network key from the config (default: default_network)"
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help="Stop waiting for confirmation after this many seconds"
    )
    return parser.parse_args(argv)


def _install_signal_handlers(cancel_event: threading.Event) -> Dict:
    """Route SIGINT/SIGTERM to the cancel event, returning previous handlers"""

    def _signal_handler(signum, frame):
        logger.warning(f"Received signal {signum}, cancelling deployment")
        cancel_event.set()

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, _signal_handler)

    return previous


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one deployment

    Returns:
        0 on success, 1 on any failure
    """
    load_dotenv()
    args = parse_args(argv)

    previous_handlers = {}

    try:
        config = load_config(args.config, args.network)

        if args.timeout is not None:
            if not math.isfinite(args.timeout) or args.timeout <= 0:
                raise ConfigurationError("--timeout must be a positive number of seconds")
            config['deployment']['confirmation_timeout_seconds'] = args.timeout

        configure_logging(config['logging'])

        context = DeploymentContext.from_config(config)

        cancel_event = threading.Event()
        previous_handlers = _install_signal_handlers(cancel_event)

        Deployer(context, cancel_event=cancel_event).run()

    except DeploymentError as e:
        logger.error("❌ Deployment failed:")
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        logger.opt(exception=e).error(f"❌ Deployment failed: {e}")
        return 1
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    return 0


if __name__ == "__main__":
    sys.exit(main())
