"""Packaged product models."""

from dataclasses import dataclass

PER_SERVING = "perServing"
PER_100G = "per100g"


@dataclass(frozen=True)
class ProductRecord:
    """Normalized nutrition for a scanned product."""

    barcode: str
    name: str
    quantity: float
    unit: str
    protein: float
    carbs: float
    fat: float
    kcal: float
    basis: str
