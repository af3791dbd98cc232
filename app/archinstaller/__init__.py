"""arch-installer - Install Arch Linux packages on any distribution.

Deploys binaries, desktop entries and icons from Arch Linux package
archives under a chosen prefix and records every written path so the
installation can be reversed later.
"""

__version__ = "0.1.0"
