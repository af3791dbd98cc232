"""Bundled data files for arch-installer."""
