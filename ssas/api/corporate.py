from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ssas.api.submit import submit_or_reject
from ssas.schemas import SubmissionResponse, ValidationReport
from ssas.submission import Submitter, get_submitter
from ssas.validation import validate_corporate

router = APIRouter(prefix="/api/corporate", tags=["corporate"])


@router.post("/validate", response_model=ValidationReport)
def validate_corporate_form(payload: dict[str, Any] = Body(...)) -> ValidationReport:
    return validate_corporate(payload).report()


@router.post(
    "/submit",
    response_model=SubmissionResponse,
    responses={422: {"model": ValidationReport}, 502: {"description": "Submission endpoint failure"}},
)
def submit_corporate_form(
    payload: dict[str, Any] = Body(...),
    submitter: Submitter = Depends(get_submitter),
) -> SubmissionResponse | JSONResponse:
    return submit_or_reject("corporate", payload, submitter)
