"""Without a configured ``SUBMIT_URL`` records are only logged."""

from __future__ import annotations

import json
import logging
from typing import Protocol

import requests
from pydantic import BaseModel

from ssas.config import settings
from ssas.schemas import FormModel, FormType

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    """The receiving endpoint could not be reached or refused the record."""


class SubmissionReceipt(BaseModel):
    status: str
    reference: str | None = None


class Submitter(Protocol):
    def submit(self, form_type: FormType, record: FormModel) -> SubmissionReceipt: ...


def _payload(record: FormModel) -> dict:
    return record.model_dump(mode="json", by_alias=True)


class LoggingSubmitter:
    def submit(self, form_type: FormType, record: FormModel) -> SubmissionReceipt:
        logger.info("Received %s submission: %s", form_type, json.dumps(_payload(record)))
        return SubmissionReceipt(status="logged")


class HttpSubmitter:
    def __init__(self, url: str, timeout: float = 15.0) -> None:
        self.url = url.rstrip("/")
        self.timeout = timeout

    def submit(self, form_type: FormType, record: FormModel) -> SubmissionReceipt:
        target = f"{self.url}/{form_type}"
        try:
            resp = requests.post(target, json=_payload(record), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Submission endpoint %s not reachable: %s", target, exc)
            raise SubmissionError(f"Submission endpoint not reachable: {exc}") from exc

        if not resp.ok:
            logger.error("Submission to %s failed (%s): %s", target, resp.status_code, resp.text)
            raise SubmissionError(f"Submission rejected ({resp.status_code}): {resp.text}")

        try:
            body = resp.json()
        except ValueError:
            body = {}
        reference = body.get("reference") if isinstance(body, dict) else None
        return SubmissionReceipt(status="submitted", reference=str(reference) if reference else None)


def get_submitter() -> Submitter:
    if settings.submit_url:
        return HttpSubmitter(settings.submit_url, timeout=settings.submit_timeout)
    return LoggingSubmitter()
