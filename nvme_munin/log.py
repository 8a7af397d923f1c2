import logging
import sys

logger = logging.getLogger("nvme-munin")


def configure_logger(level: str = "WARNING") -> None:
    """
    Send diagnostics to stderr, where munin-node collects them.

    stdout is reserved for the report itself. Calling this again replaces the
    previous handler instead of stacking a second one.
    """
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter("%(name)s: %(levelname)s: %(message)s")
    handler.setFormatter(formatter)
    logger.handlers = [handler]
    logger.setLevel(level)
