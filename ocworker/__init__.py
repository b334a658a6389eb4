"""Channel pools, a routed websocket client and numeric kernels for a compute worker."""

__version__ = "0.1.0"
__all__ = ["channels", "task_channels", "ws_client", "compute"]