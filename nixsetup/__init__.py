"""Host-aware default settings for a Nix installation."""

__version__ = "0.1.0"
__all__ = ["settings"]