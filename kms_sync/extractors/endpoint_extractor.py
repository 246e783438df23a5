"""Table-driven endpoint extractor.

Runs every ``ExtractionRule`` over the text in priority order, builds
``Endpoint`` values, drops anything ``is_likely_candidate`` rejects and
collects the rest into a ``CandidateSet``. An empty result is replaced by
the static fallback list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from kms_sync.errors import ExtractionEmptyError
from kms_sync.extractors.fallback import FALLBACK_ENDPOINTS
from kms_sync.extractors.rules import DEFAULT_RULES, ExtractionRule
from kms_sync.models.endpoint import CandidateSet, Endpoint
from kms_sync.validators.candidate_filter import is_likely_candidate

logger = logging.getLogger(__name__)


def _as_text(text: object) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return text if isinstance(text, str) else str(text)


def render(endpoints: Iterable[Endpoint], sep: str = "\n") -> str:
    """Render endpoints back to ``host:port`` text."""
    return sep.join(endpoint.key for endpoint in endpoints)


class EndpointExtractor:
    """Extracts KMS server candidates from free-form text.

    Parameters
    ----------
    rules:
        Ordered extraction rules; earlier rules win on duplicate keys.
    candidate_filter:
        Predicate applied to every extracted endpoint.
    fallback:
        Endpoints returned when nothing survives extraction.
    """

    def __init__(
        self,
        rules: Iterable[ExtractionRule] = DEFAULT_RULES,
        candidate_filter: Callable[[Endpoint], bool] = is_likely_candidate,
        fallback: Iterable[Endpoint] = FALLBACK_ENDPOINTS,
    ) -> None:
        self._rules = tuple(rules)
        self._filter = candidate_filter
        self._fallback = tuple(fallback)

    @property
    def rules(self) -> tuple[ExtractionRule, ...]:
        return self._rules

    def extract_candidates(self, text: str | None) -> CandidateSet:
        """Extract candidates without falling back.

        Raises
        ------
        ExtractionEmptyError
            If no candidate survives matching and filtering.
        """
        text = _as_text(text)
        candidates = CandidateSet()

        for rule in self._rules:
            for host, port in rule.find(text):
                try:
                    endpoint = Endpoint(host=host, port=port)
                except ValidationError:
                    logger.debug("Rule %s matched invalid endpoint %s:%s", rule.name, host, port)
                    continue
                if not self._filter(endpoint):
                    logger.debug("Rule %s match rejected by filter: %s", rule.name, endpoint)
                    continue
                if candidates.add(endpoint):
                    logger.debug("Found potential KMS server via %s rule: %s", rule.name, endpoint)

        if not candidates:
            raise ExtractionEmptyError(text_length=len(text))
        return candidates

    def extract(self, text: str | None) -> CandidateSet:
        """Extract candidates, returning the fallback list when none are found."""
        try:
            candidates = self.extract_candidates(text)
        except ExtractionEmptyError as exc:
            logger.warning(
                "%s (text length %s), using fallback KMS server list",
                exc.message,
                exc.details.get("text_length"),
            )
            return self.fallback()

        logger.info(
            "Extracted %d KMS server candidates: %s",
            len(candidates),
            render(candidates, sep=", "),
            extra={"candidate_count": len(candidates)},
        )
        return candidates

    def fallback(self) -> CandidateSet:
        """Return a fresh candidate set holding the fallback endpoints."""
        return CandidateSet(self._fallback, from_fallback=True)


_default_extractor = EndpointExtractor()


def extract(text: str | None) -> CandidateSet:
    """Extract candidates from *text* using the default rule table."""
    return _default_extractor.extract(text)
