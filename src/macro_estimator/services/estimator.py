"""Macro estimation pipeline: parse, look up, scale, aggregate."""

import asyncio
import logging
from dataclasses import dataclass

from macro_estimator.domain.intent import FoodSearchItem
from macro_estimator.domain.nutrition import (
    EstimatedItem,
    MacroEstimate,
    MacroTotal,
    NutrientProfile,
)
from macro_estimator.errors import (
    AllLookupsFailedError,
    EstimationError,
    MissingCredentialsError,
    NoItemsIdentifiedError,
)
from macro_estimator.services.intent import IntentParser
from macro_estimator.services.nutrition import NutrientLookupService

_logger = logging.getLogger(__name__)


@dataclass
class MacroEstimator:
    """Estimates total macros for a free-text meal description."""

    intent_parser: IntentParser | None
    nutrient_lookup: NutrientLookupService | None
    max_concurrent_lookups: int = 5

    async def estimate_macros(self, description: str) -> MacroEstimate:
        """Return the summed macros of every item that could be resolved.

        Individual lookup failures are reported in ``unresolved_terms``; the
        estimate only fails when no item resolves at all.
        """
        if self.intent_parser is None:
            raise MissingCredentialsError("Language model")
        if self.nutrient_lookup is None:
            raise MissingCredentialsError("FoodData Central")

        items = await self.intent_parser.parse_intent(description)
        if not items:
            raise NoItemsIdentifiedError()

        lookup = self.nutrient_lookup
        semaphore = asyncio.Semaphore(max(self.max_concurrent_lookups, 1))
        outcomes = await asyncio.gather(
            *(_lookup(lookup, item, semaphore) for item in items)
        )

        total = MacroTotal()
        resolved: list[EstimatedItem] = []
        failed_terms: list[str] = []
        last_error: EstimationError | None = None
        for item, outcome in zip(items, outcomes, strict=True):
            if isinstance(outcome, NutrientProfile):
                estimated = _scale_item(item, outcome)
                resolved.append(estimated)
                total = total + estimated.macros
                continue
            if outcome is not None:
                last_error = outcome
            if item.search_term not in failed_terms:
                failed_terms.append(item.search_term)

        if not resolved:
            raise AllLookupsFailedError(tuple(failed_terms)) from last_error
        if failed_terms:
            _logger.warning(
                "Partial estimate: %s of %s items unresolved (%s)",
                len(items) - len(resolved),
                len(items),
                ", ".join(failed_terms),
            )
        return MacroEstimate(
            total=total, items=resolved, unresolved_terms=tuple(failed_terms)
        )


async def _lookup(
    lookup: NutrientLookupService,
    item: FoodSearchItem,
    semaphore: asyncio.Semaphore,
) -> NutrientProfile | EstimationError | None:
    """Look up one item; failures are returned rather than raised."""
    async with semaphore:
        try:
            return await lookup.lookup_nutrients(item.search_term)
        except EstimationError as exc:
            _logger.warning("Lookup failed for %r: %s", item.search_term, exc)
            return exc


def _scale_item(item: FoodSearchItem, profile: NutrientProfile) -> EstimatedItem:
    weight = item.effective_weight_grams
    return EstimatedItem(
        search_term=item.search_term,
        weight_grams=weight,
        macros=profile.scaled(weight),
        fdc_id=profile.fdc_id,
        description=profile.description,
    )
