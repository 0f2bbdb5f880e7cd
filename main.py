"""
License Expiration Watcher - process entry point.

Runs the watcher against the in-cluster Kubernetes API until SIGINT/SIGTERM.

    python main.py            # watch every 10 minutes
    python main.py --once     # single check, exit code 0 if active
"""

import argparse
import logging
import os
import signal
import sys
import threading

from dotenv import load_dotenv

from config import load_license_config
from licensing.k8s import KubernetesClient, KubernetesEventSink, KubernetesSecretStore
from licensing.watcher import ExpirationWatcher

logger = logging.getLogger("license_watcher")


def setup_logging(level_name: str = "INFO"):
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name.upper(), logging.INFO))


def main(argv=None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="License expiration watcher")
    parser.add_argument("--once", action="store_true",
                        help="Run a single check without retries and exit")
    args = parser.parse_args(argv)

    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        config = load_license_config()
        client = KubernetesClient.in_cluster()
    except (ValueError, RuntimeError, OSError) as e:
        logger.error(f"Startup failed: {e}")
        return 2

    logger.info(f"Watching license secret '{config.secret_name}' in namespace '{config.namespace}'")
    watcher = ExpirationWatcher(KubernetesSecretStore(client), KubernetesEventSink(client), config)

    if args.once:
        watcher.check(retry_allowed=False)
        return 0 if watcher.is_active() else 1

    shutdown = threading.Event()

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        shutdown.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    watcher.start()
    try:
        shutdown.wait()
    finally:
        watcher.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
