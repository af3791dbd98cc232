"""Core install and uninstall engine for arch-installer."""
