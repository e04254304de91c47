import logging


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    # upstream client chatter
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
