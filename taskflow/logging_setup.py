import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Install a single console handler on the root logger.

    Call once from the entry point, before the app starts serving.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    # passlib reads bcrypt's version attribute and logs a traceback on newer builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
