"""
SoraTV - Channel Catalog Service

Serves streaming channels grouped by country:
- Category filtering with keyword matching
- Priority ordering and pagination
- Bounded in-process cache with weighted eviction and periodic expiry
- Startup preload of the most visited countries
"""

__version__ = "1.0.0"
__license__ = "MIT"

from soratv.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
