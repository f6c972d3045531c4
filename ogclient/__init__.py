"""Building blocks for openGemini clients: configuration, request helpers, pools, decompression and columnar records."""

__version__ = "0.1.0"