"""Discover reachable KMS servers and publish one into a Cloudflare DNS record."""

__version__ = "1.0.0"
