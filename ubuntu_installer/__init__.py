"""Ubuntu-in-Termux installer.

Provisions an Ubuntu rootfs under proot:
- Host preflight checks before anything is downloaded
- Bounded download retry with archive verification
- Extraction under proot with log scraping
- Generated resolv.conf and launcher script
- Centralized logging
"""

__all__ = []
