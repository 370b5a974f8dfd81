from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from fastapi.responses import JSONResponse

from ssas.schemas import FormType, SubmissionResponse
from ssas.session import submit_payload
from ssas.submission import SubmissionError, Submitter


def submit_or_reject(
    form_type: FormType, payload: dict[str, Any], submitter: Submitter
) -> SubmissionResponse | JSONResponse:
    try:
        outcome = submit_payload(form_type, payload, submitter)
    except SubmissionError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if not outcome.accepted:
        return JSONResponse(status_code=422, content=outcome.result.report().model_dump())
    return SubmissionResponse(
        status=outcome.receipt.status,
        form_type=form_type,
        pstr_id=outcome.result.record.pstr_id,
        reference=outcome.receipt.reference,
    )
