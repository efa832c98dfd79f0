"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from macro_estimator.api.models import (
    CaloriesRequest,
    DescriptionRequest,
    EstimateResponse,
    MacrosBody,
    ScaleTemplateRequest,
)
from macro_estimator.app_logging import configure_logging
from macro_estimator.containers import AppContainer
from macro_estimator.domain.templates import MealTemplate
from macro_estimator.errors import (
    AllLookupsFailedError,
    EstimationError,
    ImageEncodingError,
    MissingCredentialsError,
    NoItemsIdentifiedError,
    RateLimitedError,
)
from macro_estimator.services.calories import calories_from_macros, sanitize_macro
from macro_estimator.services.templates import parse_quantity, scale_template

_UNPROCESSABLE = 422

_ERROR_STATUS: list[tuple[type[EstimationError], int]] = [
    (MissingCredentialsError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (ImageEncodingError, status.HTTP_400_BAD_REQUEST),
    (NoItemsIdentifiedError, _UNPROCESSABLE),
    (AllLookupsFailedError, _UNPROCESSABLE),
]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(EstimationError)
    async def estimation_error_handler(
        request: Request, exc: EstimationError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        body: dict[str, object] = {"error": type(exc).__name__, "detail": str(exc)}
        if isinstance(exc, AllLookupsFailedError):
            body["unresolved_terms"] = list(exc.failed_terms)
        return JSONResponse(status_code=status_code, content=body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/estimate")
    async def estimate(payload: DescriptionRequest, request: Request) -> EstimateResponse:
        """Parse a description, look up each item and return summed macros."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.estimator.estimate_macros(payload.description)
        return EstimateResponse.from_estimate(result)

    @app.post("/estimate/quick")
    async def estimate_quick(
        payload: DescriptionRequest, request: Request
    ) -> dict[str, object]:
        """Ask the language model for meal totals directly."""
        state_container: AppContainer = request.app.state.container
        if state_container.intent_parser is None:
            raise MissingCredentialsError("Language model")
        analysis = await state_container.intent_parser.analyze_meal(payload.description)
        return analysis.model_dump()

    @app.post("/label")
    async def parse_label(request: Request) -> dict[str, object]:
        """Read macros from a label or recipe photo sent as the raw request body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        record = await state_container.vision_service.parse_visual_record(image_bytes)
        return record.model_dump()

    @app.get("/barcode/{code}")
    async def barcode(code: str, request: Request) -> dict[str, object]:
        """Return normalized nutrition for a product barcode."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.barcode_service.lookup_barcode(code)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(product)

    @app.post("/calories")
    async def calories(payload: CaloriesRequest) -> dict[str, float]:
        """Derive energy from macros using Atwater factors."""
        fat = sanitize_macro(payload.fat)
        carbs = sanitize_macro(payload.carbs)
        protein = sanitize_macro(payload.protein)
        return {"kcal": calories_from_macros(fat=fat, carbs=carbs, protein=protein)}

    @app.post("/templates/scale")
    async def scale(payload: ScaleTemplateRequest) -> MacrosBody:
        """Scale a saved template to a requested portion with the same unit."""
        portion, unit = payload.portion, payload.unit
        if payload.entry:
            parsed = parse_quantity(payload.entry)
            if parsed is not None:
                portion = parsed.quantity
                if parsed.unit is not None:
                    unit = parsed.unit
                elif unit is None:
                    unit = parsed.food_name
        if portion is None or unit is None:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail="A portion and unit are required",
            )
        template = MealTemplate(**payload.template.model_dump())
        scaled = scale_template(template, portion, unit)
        if scaled is None:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail="Portion must be positive and use the template's unit",
            )
        return MacrosBody.from_total(scaled)

    return app


def _status_for(exc: EstimationError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_502_BAD_GATEWAY
