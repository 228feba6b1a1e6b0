from fastapi import APIRouter, Depends
import logging

from .. import schemas
from ..core.config import settings
from ..crud import SqlSettingsReader
from ..services.quote_delivery import get_setting_value
from ..services.quote_enrichment import EXPIRY_SETTING, TURNAROUND_SETTING
from .dependencies import get_settings_reader

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=schemas.PublicSettings)
def get_settings(reader: SqlSettingsReader = Depends(get_settings_reader)):
    """Return selected public configuration values."""
    turnaround = get_setting_value(reader, TURNAROUND_SETTING, settings.DEFAULT_TURNAROUND_TIME)
    expiry_days = get_setting_value(reader, EXPIRY_SETTING, settings.DEFAULT_QUOTE_EXPIRY_DAYS)
    logger.info("Serving DEFAULT_CURRENCY=%s", settings.DEFAULT_CURRENCY)
    return schemas.PublicSettings(
        default_currency=settings.DEFAULT_CURRENCY,
        default_turnaround_time=str(turnaround),
        quote_expiry_days=int(expiry_days),
    )
