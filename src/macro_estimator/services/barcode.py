"""Barcode product lookup via Open Food Facts."""

import logging
import math
from dataclasses import dataclass

from macro_estimator.adapters.open_food_facts_client import OpenFoodFactsClient
from macro_estimator.domain.products import PER_100G, PER_SERVING, ProductRecord
from macro_estimator.services.calories import calories_from_macros

_logger = logging.getLogger(__name__)

_SERVING_FIELDS = ("proteins_serving", "carbohydrates_serving", "fat_serving")
_PER_100G_FIELDS = ("proteins_100g", "carbohydrates_100g", "fat_100g")


@dataclass
class BarcodeService:
    """Normalizes Open Food Facts products to a quantity, unit and macros."""

    client: OpenFoodFactsClient

    async def lookup_barcode(self, code: str) -> ProductRecord | None:
        """Return the product for a barcode, or None when it is unknown."""
        barcode = code.strip()
        if not barcode.isdigit():
            _logger.warning("Ignoring non-numeric barcode %r", code)
            return None
        payload = await self.client.get_product(barcode)
        if not payload:
            return None
        product = payload.get("product")
        if payload.get("status") == 0 or not isinstance(product, dict):
            _logger.info("Barcode %s not found", barcode)
            return None
        nutriments = product.get("nutriments")
        if not isinstance(nutriments, dict):
            _logger.info("Barcode %s has no nutrition data", barcode)
            return None
        return _to_record(barcode, product, nutriments)


def _to_record(
    barcode: str, product: dict[str, object], nutriments: dict[str, object]
) -> ProductRecord:
    name = _product_name(product)
    serving_quantity = _number(product.get("serving_quantity"))
    serving = [_number(nutriments.get(key)) for key in _SERVING_FIELDS]
    if serving_quantity and serving_quantity > 0 and all(v is not None for v in serving):
        protein, carbs, fat = (float(v or 0.0) for v in serving)
        unit = product.get("serving_quantity_unit")
        kcal = _number(nutriments.get("energy-kcal_serving"))
        return ProductRecord(
            barcode=barcode,
            name=name,
            quantity=serving_quantity,
            unit=unit if isinstance(unit, str) and unit else "g",
            protein=protein,
            carbs=carbs,
            fat=fat,
            kcal=kcal if kcal is not None else calories_from_macros(fat, carbs, protein),
            basis=PER_SERVING,
        )

    protein, carbs, fat = (
        _number(nutriments.get(key)) or 0.0 for key in _PER_100G_FIELDS
    )
    kcal = _number(nutriments.get("energy-kcal_100g"))
    return ProductRecord(
        barcode=barcode,
        name=name,
        quantity=100.0,
        unit="g",
        protein=protein,
        carbs=carbs,
        fat=fat,
        kcal=kcal if kcal is not None else calories_from_macros(fat, carbs, protein),
        basis=PER_100G,
    )


def _product_name(product: dict[str, object]) -> str:
    parts = [
        str(value).strip()
        for value in (product.get("brands"), product.get("product_name"))
        if isinstance(value, str) and value.strip()
    ]
    return " ".join(parts) or "Unknown Product"


def _number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number
