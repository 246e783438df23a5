"""Validators for extracted candidate endpoints."""

from kms_sync.validators.candidate_filter import is_denylisted, is_likely_candidate, is_loopback

__all__ = ["is_denylisted", "is_likely_candidate", "is_loopback"]
