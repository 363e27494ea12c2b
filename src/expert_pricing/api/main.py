import logging
from datetime import datetime
from typing import Literal, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from expert_pricing import __version__
from expert_pricing.api.state import get_calculator, set_config
from expert_pricing.config.settings import get_settings
from expert_pricing.engine import (
    ConfigurationError,
    JobParameters,
    PricingConfiguration,
    QuoteCalculator,
    QuoteStatus,
    validate_config,
)
from expert_pricing.engine.models import Pages, Words
from expert_pricing.engine.pricing_guide import build_pricing_guide
from expert_pricing.utils.logger import setup_logging

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Expert Pricing API",
    description="Quote and commission calculation for the expert network",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class QuoteRequest(BaseModel):
    tier_id: str
    complexity_id: str
    mode: Literal["pages", "words"]
    # Either an explicit urgency option or a deadline to derive it from
    urgency_id: Optional[str] = None
    deadline: Optional[datetime] = None
    pages: Optional[Union[float, str]] = None
    words: Optional[Union[float, str]] = None


class CustomQuoteRequest(BaseModel):
    quoted_price: Optional[Union[float, str]] = None


class ValidationResponse(BaseModel):
    """Response model for configuration validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


@app.get("/")
async def root():
    return {"status": "online", "message": "Expert Pricing API Active"}


@app.get("/config")
async def get_config(calculator: QuoteCalculator = Depends(get_calculator)):
    return calculator.config.to_dict()


@app.post("/quote")
async def calculate_quote(req: QuoteRequest, calculator: QuoteCalculator = Depends(get_calculator)):
    urgency_id = req.urgency_id
    if urgency_id is None and req.deadline is not None:
        urgency_id = calculator.urgency_for_deadline(req.deadline).id

    params = JobParameters.from_form(
        tier_id=req.tier_id,
        urgency_id=urgency_id or "",
        complexity_id=req.complexity_id,
        mode=req.mode,
        pages=req.pages,
        words=req.words,
    )
    result = calculator.calculate(params)

    if result.status is QuoteStatus.INVALID_SELECTION:
        raise HTTPException(
            status_code=422,
            detail={"message": result.reason, "invalid_fields": result.invalid_fields},
        )
    return jsonable_encoder(result.to_dict())


@app.post("/quote/custom")
async def custom_quote(req: CustomQuoteRequest, calculator: QuoteCalculator = Depends(get_calculator)):
    result = calculator.price_custom_quote(req.quoted_price)
    return jsonable_encoder(result.to_dict())


@app.get("/pricing-guide")
async def pricing_guide(
    mode: Literal["pages", "words"] = "pages",
    count: float = 1,
    calculator: QuoteCalculator = Depends(get_calculator),
):
    sizing = Pages(count) if mode == "pages" else Words(count)
    guide = build_pricing_guide(calculator.config, sizing)
    return guide.to_dict(orient="records")


@app.post("/config/validate", response_model=ValidationResponse)
async def validate_pricing_config(data: dict):
    try:
        config = PricingConfiguration.from_dict(data)
    except ConfigurationError as e:
        return ValidationResponse(valid=False, errors=e.errors, warnings=[])

    report = validate_config(config)
    return ValidationResponse(valid=report.valid, errors=report.errors, warnings=report.warnings)


@app.put("/config")
async def replace_config(data: dict):
    """Validate an uploaded pricing table and make it the live configuration."""
    try:
        config = PricingConfiguration.from_dict(data)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})

    for warning in validate_config(config).warnings:
        logger.warning("Uploaded pricing configuration: %s", warning)
    calculator = set_config(config)
    logger.info("Pricing configuration replaced (%d tiers)", len(config.tiers))
    return calculator.config.to_dict()


@app.get("/system/status")
async def get_status(calculator: QuoteCalculator = Depends(get_calculator)):
    settings = get_settings()
    config = calculator.config
    return {
        "engine_active": True,
        "config_path": str(settings.pricing_config),
        "tiers": len(config.tiers),
        "urgency_options": len(config.urgencies),
        "complexity_options": len(config.complexities),
        "commission_split": [
            config.executor_percentage,
            config.reviewer_percentage,
            config.platform_percentage,
        ],
    }
