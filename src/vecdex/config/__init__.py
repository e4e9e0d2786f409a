"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .embedding import Embedding
from .index import Index
from .log import Log

load_dotenv()

_RAW_CONFIG = load_raw_config()

embedding = Embedding(_RAW_CONFIG)
index = Index(_RAW_CONFIG)
log = Log(_RAW_CONFIG)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=log.LEVEL)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)


class Config:
    embedding = embedding
    index = index
    log = log


__all__ = ["embedding", "index", "log", "Config", "load_raw_config"]
