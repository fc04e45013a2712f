"""DEX swap gateway - quotes, swap transactions and a custom token registry."""

from dexapi.config import Settings

__version__ = "0.1.0"
__all__ = ["Settings", "__version__"]
