from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ssas.api.submit import submit_or_reject
from ssas.schemas import IndividualForm, IndividualVisibility, SubmissionResponse, ValidationReport
from ssas.session import derive_visibility
from ssas.submission import Submitter, get_submitter
from ssas.validation import errors_from_pydantic, validate_individual

router = APIRouter(prefix="/api/individual", tags=["individual"])


@router.post("/validate", response_model=ValidationReport)
def validate_individual_form(payload: dict[str, Any] = Body(...)) -> ValidationReport:
    return validate_individual(payload).report()


@router.post("/visibility", response_model=IndividualVisibility)
def individual_visibility(payload: dict[str, Any] = Body(...)) -> IndividualVisibility:
    try:
        draft = IndividualForm.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=errors_from_pydantic(exc)) from exc
    return derive_visibility(draft)


@router.post(
    "/submit",
    response_model=SubmissionResponse,
    responses={422: {"model": ValidationReport}, 502: {"description": "Submission endpoint failure"}},
)
def submit_individual_form(
    payload: dict[str, Any] = Body(...),
    submitter: Submitter = Depends(get_submitter),
) -> SubmissionResponse | JSONResponse:
    return submit_or_reject("individual", payload, submitter)
