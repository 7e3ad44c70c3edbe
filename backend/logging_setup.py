import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(debug: bool = False) -> logging.Logger:
    """Configure root logging the same way for every embedding application."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    root = logging.getLogger()
    if debug:
        root.setLevel(logging.DEBUG)
    return root
