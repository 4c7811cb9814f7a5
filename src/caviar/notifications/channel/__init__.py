"""Channel adapter registry.

Provides singleton access to channel adapters. The chat channel uses the
in-memory fake adapter unless another adapter is registered with
``register_channel`` at application startup.
"""

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: a ``NotificationChannel`` value with an adapter
            (currently only "telegram")
    """
    if channel_type not in _channel_instances:
        if channel_type == "telegram":
            from caviar.notifications.channel.fake_chat import FakeChatAdapter

            _channel_instances[channel_type] = FakeChatAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def register_channel(channel_type: str, adapter) -> None:
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
