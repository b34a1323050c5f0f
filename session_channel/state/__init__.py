from .status import ChannelStatus
from .settings import ChannelSettings, SessionSettings, TransportSettings

__all__ = ["ChannelSettings", "ChannelStatus", "SessionSettings", "TransportSettings"]
