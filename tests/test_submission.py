from __future__ import annotations

import json
import logging

import pytest
import requests

from ssas.config import settings
from ssas.schemas import IndividualForm
from ssas.submission import (
    HttpSubmitter,
    LoggingSubmitter,
    SubmissionError,
    get_submitter,
)


class DummyResponse:
    def __init__(self, status_code: int, body=None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


@pytest.fixture
def record(valid_individual_payload) -> IndividualForm:
    return IndividualForm.model_validate(valid_individual_payload)


def test_logging_submitter_logs_the_camel_case_record(record, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="ssas.submission"):
        receipt = LoggingSubmitter().submit("individual", record)

    assert receipt.status == "logged"
    assert receipt.reference is None
    [message] = [r.getMessage() for r in caplog.records if r.name == "ssas.submission"]
    assert message.startswith("Received individual submission: ")
    logged = json.loads(message.split(": ", 1)[1])
    assert logged["pstrId"] == "00123456RX"
    assert logged["marketingPreferences"] == ["email"]


def test_http_submitter_posts_to_form_endpoint(record, monkeypatch) -> None:
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json, timeout))
        return DummyResponse(201, body={"reference": 4711})

    monkeypatch.setattr("ssas.submission.requests.post", fake_post)
    receipt = HttpSubmitter("https://intake.example.test/ssas/", timeout=3).submit("individual", record)

    assert receipt.status == "submitted"
    assert receipt.reference == "4711"
    [(url, body, timeout)] = calls
    assert url == "https://intake.example.test/ssas/individual"
    assert body["surname"] == "Shah"
    assert timeout == 3


def test_http_submitter_tolerates_empty_body(record, monkeypatch) -> None:
    monkeypatch.setattr("ssas.submission.requests.post", lambda url, json, timeout: DummyResponse(204))
    receipt = HttpSubmitter("https://intake.example.test").submit("corporate", record)
    assert receipt.status == "submitted"
    assert receipt.reference is None


def test_http_submitter_raises_on_rejection(record, monkeypatch) -> None:
    monkeypatch.setattr(
        "ssas.submission.requests.post",
        lambda url, json, timeout: DummyResponse(500, text="upstream down"),
    )
    with pytest.raises(SubmissionError, match="500"):
        HttpSubmitter("https://intake.example.test").submit("individual", record)


def test_http_submitter_raises_when_unreachable(record, monkeypatch) -> None:
    def fake_post(url, json, timeout):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("ssas.submission.requests.post", fake_post)
    with pytest.raises(SubmissionError, match="not reachable"):
        HttpSubmitter("https://intake.example.test").submit("individual", record)


def test_get_submitter_follows_settings(monkeypatch) -> None:
    monkeypatch.setattr(settings, "submit_url", None)
    assert isinstance(get_submitter(), LoggingSubmitter)

    monkeypatch.setattr(settings, "submit_url", "https://intake.example.test")
    submitter = get_submitter()
    assert isinstance(submitter, HttpSubmitter)
    assert submitter.url == "https://intake.example.test"
    assert submitter.timeout == settings.submit_timeout
