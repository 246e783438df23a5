"""Endpoint extraction package: rule table, extractor and fallback list."""

from kms_sync.extractors.endpoint_extractor import EndpointExtractor, extract, render
from kms_sync.extractors.fallback import FALLBACK_ENDPOINTS, FALLBACK_SERVERS
from kms_sync.extractors.rules import DEFAULT_RULES, ExtractionRule

__all__ = [
    "DEFAULT_RULES",
    "EndpointExtractor",
    "ExtractionRule",
    "FALLBACK_ENDPOINTS",
    "FALLBACK_SERVERS",
    "extract",
    "render",
]
