"""Secondary (remote) store for daily price snapshots."""
from fatefi.providers.mirror.models import MarketSnapshot
from fatefi.providers.mirror.store import MirrorStore

__all__ = ["MarketSnapshot", "MirrorStore"]
