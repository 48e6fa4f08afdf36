"""kanata-setup: provision a Linux desktop to run kanata as a systemd user service.

Core design goals:
- Ordered, fail-fast steps
- Idempotent host changes
- Never clobber a user's remapper configuration
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
