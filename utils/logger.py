import logging

from config.settings import Config

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = None):
    """Configure the root logger once for the whole process."""
    logging.basicConfig(level=level or Config.LOG_LEVEL, format=LOG_FORMAT)
    # langchain and the vendor SDKs log every HTTP round trip at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
