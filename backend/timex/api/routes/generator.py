import logging

from fastapi import APIRouter, Depends

from timex.api.deps import get_generator
from timex.core.exceptions import AppError
from timex.schemas.generator import (
    GenerateOptionsRequest,
    GenerateOptionsResponse,
    GenerateTimetableRequest,
    GenerationResult,
)
from timex.services.timetable_generator import TimetableGenerator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GenerationResult)
def generate_timetable(
    payload: GenerateTimetableRequest,
    generator: TimetableGenerator = Depends(get_generator),
) -> GenerationResult:
    logger.info("Timetable generation requested batch_ids=%s", payload.batch_ids)
    result = generator.generate(payload)
    if not result.success:
        raise AppError("Timetable generation failed", status_code=500)
    return result


@router.post("/generate/options", response_model=GenerateOptionsResponse)
def generate_timetable_options(
    payload: GenerateOptionsRequest,
    generator: TimetableGenerator = Depends(get_generator),
) -> GenerateOptionsResponse:
    logger.info("Timetable options requested batch_ids=%s count=%s", payload.batch_ids, payload.count)
    options = generator.generate_options(payload, payload.count)
    return GenerateOptionsResponse(options=options)
