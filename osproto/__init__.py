"""Payload, package framing, field codecs, typed messages and socket helpers for a simulated operating system."""

__version__ = "0.1.0"