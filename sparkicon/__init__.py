from .colors import DARK_GREEN, GRAY, RED, RGBA, to_rgba
from .config import GraphConfig, load_config
from .encode import decode_image, encode_image
from .errors import ConfigError, EncodingError, SparkiconError
from .feed import SampleFeedThread
from .graph import GraphStyle, SparklineGraph
from .shared import SharedGraph

__all__ = [
    "ConfigError",
    "DARK_GREEN",
    "EncodingError",
    "GRAY",
    "GraphConfig",
    "GraphStyle",
    "RED",
    "RGBA",
    "SampleFeedThread",
    "SharedGraph",
    "SparkiconError",
    "SparklineGraph",
    "decode_image",
    "encode_image",
    "load_config",
    "to_rgba",
]
