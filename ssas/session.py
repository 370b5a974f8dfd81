from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ssas.formatting import digits_only
from ssas.schemas import (
    CommunicationAddress,
    CorporateForm,
    FormType,
    IndividualForm,
    IndividualVisibility,
    ManagementPerson,
    PreviousAddress,
)
from ssas.submission import SubmissionReceipt, Submitter
from ssas.validation import (
    MAX_PREVIOUS_ADDRESSES,
    PREVIOUS_ADDRESS_THRESHOLD_MONTHS,
    ValidationResult,
    total_months,
    validate_corporate,
    validate_individual,
)

logger = logging.getLogger(__name__)

PHONE_FIELDS = frozenset({"telephone", "mobile"})


class InvalidFieldChange(ValueError):
    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class CorporateSession(BaseModel):
    draft: CorporateForm = Field(default_factory=CorporateForm)


class IndividualSession(BaseModel):
    draft: IndividualForm = Field(default_factory=IndividualForm)
    visibility: IndividualVisibility = Field(default_factory=IndividualVisibility)


@dataclass
class SubmitOutcome:
    result: ValidationResult
    receipt: SubmissionReceipt | None = None

    @property
    def accepted(self) -> bool:
        return self.receipt is not None


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------

def total_months_at_address(draft: IndividualForm) -> int:
    return total_months(draft.years_at_address, draft.months_at_address)


def needs_previous_addresses(draft: IndividualForm) -> bool:
    return total_months_at_address(draft) < PREVIOUS_ADDRESS_THRESHOLD_MONTHS


def needs_communication_address(draft: IndividualForm) -> bool:
    # Checked means "the current address is also the communication address".
    return not draft.is_communication_address


def needs_second_nationality(draft: IndividualForm) -> bool:
    return draft.has_dual_nationality


def derive_visibility(draft: IndividualForm) -> IndividualVisibility:
    return IndividualVisibility(
        previous_addresses=needs_previous_addresses(draft),
        communication_address=needs_communication_address(draft),
        second_nationality=needs_second_nationality(draft),
    )


# ---------------------------------------------------------------------------
# Visibility transitions
# ---------------------------------------------------------------------------

Sync = Callable[[IndividualForm, IndividualVisibility], tuple[IndividualForm, IndividualVisibility]]


def _sync_previous_addresses(
    draft: IndividualForm, visibility: IndividualVisibility
) -> tuple[IndividualForm, IndividualVisibility]:
    needed = needs_previous_addresses(draft)
    if needed == visibility.previous_addresses:
        return draft, visibility
    addresses = [PreviousAddress()] if needed else []
    return (
        draft.model_copy(update={"previous_addresses": addresses}),
        visibility.model_copy(update={"previous_addresses": needed}),
    )


def _sync_communication_address(
    draft: IndividualForm, visibility: IndividualVisibility
) -> tuple[IndividualForm, IndividualVisibility]:
    needed = needs_communication_address(draft)
    if needed and draft.communication_address is None:
        draft = draft.model_copy(update={"communication_address": CommunicationAddress()})
    elif not needed and draft.communication_address is not None:
        draft = draft.model_copy(update={"communication_address": None})
    return draft, visibility.model_copy(update={"communication_address": needed})


def _sync_second_nationality(
    draft: IndividualForm, visibility: IndividualVisibility
) -> tuple[IndividualForm, IndividualVisibility]:
    needed = needs_second_nationality(draft)
    if not needed and draft.second_nationality:
        draft = draft.model_copy(update={"second_nationality": ""})
    return draft, visibility.model_copy(update={"second_nationality": needed})


SYNCHRONISERS: dict[str, Sync] = {
    "previous_addresses": _sync_previous_addresses,
    "communication_address": _sync_communication_address,
    "second_nationality": _sync_second_nationality,
}

FLAG_TRIGGERS: dict[str, str] = {
    "years_at_address": "previous_addresses",
    "months_at_address": "previous_addresses",
    "is_communication_address": "communication_address",
    "has_dual_nationality": "second_nationality",
}


# ---------------------------------------------------------------------------
# Field updates
# ---------------------------------------------------------------------------

def _set_path(data: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    node: Any = data
    for depth, part in enumerate(parts):
        last = depth == len(parts) - 1
        if isinstance(node, list) and part.isdigit() and int(part) < len(node):
            key: Any = int(part)
        elif isinstance(node, dict) and part in node:
            key = part
        else:
            raise InvalidFieldChange(path, "Unknown field")
        if last:
            node[key] = value
        else:
            node = node[key]


def _with_change(draft: BaseModel, path: str, value: Any) -> Any:
    if path in PHONE_FIELDS and isinstance(value, str):
        value = digits_only(value)
    data = draft.model_dump()
    _set_path(data, path, value)
    try:
        return type(draft).model_validate(data)
    except ValidationError as exc:
        raise InvalidFieldChange(path, exc.errors()[0]["msg"]) from exc


def new_corporate_session() -> CorporateSession:
    return CorporateSession()


def new_individual_session() -> IndividualSession:
    draft, visibility = IndividualForm(), IndividualVisibility()
    for sync in SYNCHRONISERS.values():
        draft, visibility = sync(draft, visibility)
    return IndividualSession(draft=draft, visibility=visibility)


def apply_corporate_change(
    session: CorporateSession, path: str, value: Any
) -> tuple[CorporateSession, list[str]]:
    return CorporateSession(draft=_with_change(session.draft, path, value)), []


def apply_individual_change(
    session: IndividualSession, path: str, value: Any
) -> tuple[IndividualSession, list[str]]:
    draft = _with_change(session.draft, path, value)
    visibility = session.visibility
    recomputed: list[str] = []

    flag = FLAG_TRIGGERS.get(path)
    if flag is not None:
        draft, visibility = SYNCHRONISERS[flag](draft, visibility)
        recomputed.append(flag)
    return IndividualSession(draft=draft, visibility=visibility), recomputed


# ---------------------------------------------------------------------------
# Repeating rows
# ---------------------------------------------------------------------------

def can_add_previous_address(session: IndividualSession) -> bool:
    return (
        session.visibility.previous_addresses
        and len(session.draft.previous_addresses) < MAX_PREVIOUS_ADDRESSES
    )


def add_previous_address(session: IndividualSession) -> IndividualSession:
    if not can_add_previous_address(session):
        return session
    addresses = [*session.draft.previous_addresses, PreviousAddress()]
    return session.model_copy(update={"draft": session.draft.model_copy(update={"previous_addresses": addresses})})


def remove_previous_address(session: IndividualSession, index: int) -> IndividualSession:
    addresses = list(session.draft.previous_addresses)
    if session.visibility.previous_addresses and len(addresses) <= 1:
        return session
    if not 0 <= index < len(addresses):
        return session
    del addresses[index]
    return session.model_copy(update={"draft": session.draft.model_copy(update={"previous_addresses": addresses})})


def add_management_person(session: CorporateSession) -> CorporateSession:
    people = [*session.draft.contributor_management, ManagementPerson()]
    return CorporateSession(draft=session.draft.model_copy(update={"contributor_management": people}))


def remove_management_person(session: CorporateSession, index: int) -> CorporateSession:
    people = list(session.draft.contributor_management)
    if len(people) <= 1 or not 0 <= index < len(people):
        return session
    del people[index]
    return CorporateSession(draft=session.draft.model_copy(update={"contributor_management": people}))


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def submit_payload(
    form_type: FormType,
    payload: Mapping[str, Any] | BaseModel,
    submitter: Submitter,
) -> SubmitOutcome:
    """Validate a whole record and forward it only when every rule passes."""
    validate = validate_corporate if form_type == "corporate" else validate_individual
    result = validate(payload)
    if not result.is_valid:
        return SubmitOutcome(result=result)

    receipt = submitter.submit(form_type, result.record)
    logger.info("Accepted %s submission for PSTR %s (%s)", form_type, result.record.pstr_id, receipt.status)
    return SubmitOutcome(result=result, receipt=receipt)


def submit_corporate(session: CorporateSession, submitter: Submitter) -> SubmitOutcome:
    return submit_payload("corporate", session.draft, submitter)


def submit_individual(session: IndividualSession, submitter: Submitter) -> SubmitOutcome:
    return submit_payload("individual", session.draft, submitter)
