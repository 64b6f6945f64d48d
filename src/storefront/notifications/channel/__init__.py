"""Channel adapter registry.

Email is the only channel. The in-memory adapter is used until a real
provider adapter is installed with ``set_channel``.
"""

from storefront.notifications.types import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = NotificationChannel.EMAIL.value):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            from storefront.notifications.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Forget every adapter; the next lookup builds a fresh one."""
    _channel_instances.clear()
