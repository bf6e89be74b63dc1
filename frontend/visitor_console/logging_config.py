import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False) -> None:
    """Configure root logging for the console and its pages"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT
    )
    # requests/urllib3 connection chatter is noise at debug level
    logging.getLogger("urllib3").setLevel(logging.WARNING)
