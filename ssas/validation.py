from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_snake

from ssas.reference_data import codes
from ssas.schemas import (
    SCHEME_REGISTRATION_COUNTRY,
    CorporateForm,
    FormModel,
    IndividualForm,
    ValidationReport,
)

logger = logging.getLogger(__name__)

PREVIOUS_ADDRESS_THRESHOLD_MONTHS = 36
MAX_PREVIOUS_ADDRESSES = 3

Check = Callable[[Any], bool]
Condition = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class FieldRule:
    path: str
    check: Check
    message: str
    when: Condition | None = None


@dataclass
class ValidationResult:
    record: FormModel | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.record is not None and not self.errors

    def report(self) -> ValidationReport:
        return ValidationReport(valid=self.is_valid, errors=self.errors)


def total_months(years: int, months: int) -> int:
    return years * 12 + months


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def required() -> Check:
    return lambda value: value is not None and str(value).strip() != ""


def matches(pattern: str) -> Check:
    compiled = re.compile(pattern, re.ASCII)
    return lambda value: isinstance(value, str) and compiled.fullmatch(value) is not None


def max_length(limit: int) -> Check:
    return lambda value: value is None or len(str(value)) <= limit


def min_value(limit: float) -> Check:
    return lambda value: _is_number(value) and value >= limit


def max_value(limit: float) -> Check:
    return lambda value: _is_number(value) and value <= limit


def non_empty() -> Check:
    return lambda value: bool(value)


def max_items(limit: int) -> Check:
    return lambda value: len(value or []) <= limit


def equals(expected: Any) -> Check:
    return lambda value: value == expected


def is_true() -> Check:
    return lambda value: value is True


def is_email() -> Check:
    def check(value: Any) -> bool:
        if not isinstance(value, str) or not value:
            return False
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True

    return check


def one_of(list_name: str) -> Check:
    """Membership in a reference list; list values must be members item by item."""

    def check(value: Any) -> bool:
        allowed = codes(list_name)
        if isinstance(value, list):
            return all(item in allowed for item in value)
        return value in allowed

    return check


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

def _has_dual_nationality(data: Mapping[str, Any]) -> bool:
    return bool(data.get("has_dual_nationality"))


def _below_address_history_threshold(data: Mapping[str, Any]) -> bool:
    years = data.get("years_at_address") or 0
    months = data.get("months_at_address") or 0
    return total_months(years, months) < PREVIOUS_ADDRESS_THRESHOLD_MONTHS


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

def _join(prefix: str, part: str) -> str:
    return f"{prefix}.{part}" if prefix else part


def _required(path: str, message: str, when: Condition | None = None) -> FieldRule:
    return FieldRule(path, required(), message, when)


def _address_rules(prefix: str = "") -> tuple[FieldRule, ...]:
    return (
        _required(_join(prefix, "address_1"), "Address line 1 is required"),
        _required(_join(prefix, "address_2"), "Address line 2 is required"),
        _required(_join(prefix, "postcode"), "Postcode is required"),
        FieldRule(_join(prefix, "postcode"), max_length(8), "Postcode must be 8 characters or less"),
        _required(_join(prefix, "country"), "Country is required"),
        FieldRule(_join(prefix, "country"), one_of("countries"), "Select a valid country"),
    )


CORPORATE_RULES: tuple[FieldRule, ...] = (
    # Contact details
    _required("pstr_id", "PSTR ID is required"),
    _required("pension_scheme_name", "Pension scheme name is required"),
    _required("contact_name", "Contact name is required"),
    _required("position_in_organization", "Position is required"),
    _required("pension_provider", "Pension provider is required"),
    FieldRule("telephone", matches(r"\d{14}"), "Phone number must be 14 digits including country code"),
    FieldRule("mobile", matches(r"\d{14}"), "Mobile number must be 14 digits"),
    FieldRule("email", is_email(), "Please enter a valid email address"),
    FieldRule("email", max_length(65), "Email must be less than 65 characters"),
    # Address details
    _required("address_type", "Address type is required"),
    FieldRule("address_type", one_of("address_types"), "Select a valid address type"),
    _required("address_1", "Building number is required"),
    _required("address_2", "Street name is required"),
    _required("postcode", "Postcode is required"),
    _required("country", "Country is required"),
    FieldRule("country", one_of("countries"), "Select a valid country"),
    # Pension scheme details
    FieldRule("how_many_to_sign", min_value(1), "Number of signatories is required"),
    FieldRule(
        "how_many_from_corporate_trustee",
        min_value(0),
        "Number of signatories from corporate trustee cannot be negative",
    ),
    FieldRule("how_many_members", min_value(1), "Number of members is required"),
    _required("date_of_registration", "Date of registration is required"),
    FieldRule("deposit_per_annum", min_value(0), "Deposit per annum cannot be negative"),
    FieldRule("annual_outgoings", min_value(0), "Annual outgoings cannot be negative"),
    FieldRule("anticipated_activity", min_value(0), "Anticipated activity cannot be negative"),
    FieldRule("anticipated_transactions", min_value(0), "Anticipated transactions cannot be negative"),
    FieldRule("country_of_payments", non_empty(), "At least one country is required"),
    FieldRule("country_of_payments", one_of("countries"), "Select valid countries"),
    FieldRule(
        "scheme_registration_country",
        equals(SCHEME_REGISTRATION_COUNTRY),
        f"Scheme registration country must be {SCHEME_REGISTRATION_COUNTRY}",
    ),
    # Principal employer details
    _required("contributor_legal_name", "Legal name is required"),
    _required("contributor_address_1", "Address line 1 is required"),
    FieldRule("contributor_postcode", max_length(8), "Postcode must be 8 characters or less"),
    _required("contributor_country", "Country is required"),
    FieldRule("contributor_country", one_of("countries"), "Select a valid country"),
    _required("contributor_date_of_incorporation", "Date of incorporation is required"),
    _required("contributor_date_of_registration", "Date of registration is required"),
    _required("contributor_date_started_trading", "Date started trading is required"),
    _required("contributor_nature_of_business", "Nature of business is required"),
    FieldRule("contributor_countries_operates_in", non_empty(), "At least one country is required"),
    FieldRule("contributor_countries_operates_in", one_of("countries"), "Select valid countries"),
    FieldRule("contributor_management", non_empty(), "At least one management person is required"),
    _required("contributor_management.*.first_name", "First name is required"),
    _required("contributor_management.*.surname", "Surname is required"),
    _required("contributor_management.*.position", "Position is required"),
    # Co-sign details
    _required("professional_co_signatory", "Professional co-signatory is required"),
    _required("co_sign_company_name", "Company name is required"),
    _required("co_sign_address", "Address is required"),
    _required("co_sign_telephone", "Telephone is required"),
    FieldRule("co_sign_email", is_email(), "Valid email is required"),
    _required("regulator_reference_number", "Regulator reference number is required"),
    # Account details
    FieldRule("tc_acknowledgement", is_true(), "You must acknowledge the terms and conditions"),
    FieldRule("account_type", non_empty(), "At least one account type is required"),
    FieldRule("account_type", one_of("account_types"), "Select valid account types"),
    _required("opening_balance", "Opening balance is required"),
    _required("source_of_initial_funds", "Source of initial funds is required"),
    FieldRule("source_of_funds", non_empty(), "At least one source of funds is required"),
    FieldRule("source_of_funds", one_of("funds_sources"), "Select valid sources of funds"),
    _required("value_of_funds", "Value of funds is required"),
    FieldRule("country_of_funds", non_empty(), "At least one country is required"),
    FieldRule("country_of_funds", one_of("countries"), "Select valid countries"),
)


INDIVIDUAL_RULES: tuple[FieldRule, ...] = (
    # Identity and contact
    _required("pstr_id", "PSTR ID is required"),
    FieldRule("employee_id", min_value(1), "Employee ID is required"),
    _required("title", "Title is required"),
    FieldRule("title", one_of("titles"), "Select a valid title"),
    _required("first_name", "First name is required"),
    _required("surname", "Surname is required"),
    _required("date_of_birth", "Date of birth is required"),
    _required("gender", "Gender is required"),
    FieldRule("gender", one_of("genders"), "Select a valid gender"),
    _required("primary_nationality", "Primary nationality is required"),
    FieldRule("primary_nationality", one_of("nationalities"), "Select a valid nationality"),
    _required("country_of_birth", "Country of birth is required"),
    FieldRule("country_of_birth", one_of("countries"), "Select a valid country"),
    _required("second_nationality", "Second nationality is required", when=_has_dual_nationality),
    FieldRule(
        "second_nationality",
        one_of("nationalities"),
        "Select a valid nationality",
        when=_has_dual_nationality,
    ),
    FieldRule("telephone", matches(r"\d{14}"), "Phone number must be 14 digits including country code"),
    FieldRule("mobile", matches(r"\d{10}"), "Mobile number must be 10 digits"),
    FieldRule("email", is_email(), "Please enter a valid email address"),
    _required("type_of_employment", "Type of employment is required"),
    FieldRule("type_of_employment", one_of("employment_types"), "Select a valid type of employment"),
    _required("occupation", "Occupation is required"),
    FieldRule("marketing_preferences", one_of("marketing_preferences"), "Select valid marketing preferences"),
    # Current address
    *_address_rules(),
    FieldRule("years_at_address", min_value(0), "Years at address cannot be negative"),
    FieldRule("months_at_address", min_value(0), "Months at address must be between 0 and 11"),
    FieldRule("months_at_address", max_value(11), "Months at address must be between 0 and 11"),
    # Previous addresses
    FieldRule(
        "previous_addresses",
        max_items(MAX_PREVIOUS_ADDRESSES),
        f"No more than {MAX_PREVIOUS_ADDRESSES} previous addresses can be given",
    ),
    FieldRule(
        "previous_addresses",
        non_empty(),
        "At least one previous address is required when you have lived at your "
        "current address for less than 3 years",
        when=_below_address_history_threshold,
    ),
    *_address_rules("previous_addresses.*"),
    FieldRule("previous_addresses.*.years_at_address", min_value(0), "Years at address cannot be negative"),
    FieldRule(
        "previous_addresses.*.months_at_address",
        min_value(0),
        "Months at address must be between 0 and 11",
    ),
    FieldRule(
        "previous_addresses.*.months_at_address",
        max_value(11),
        "Months at address must be between 0 and 11",
    ),
    # Communication address, only when allocated
    *_address_rules("communication_address"),
    # Tax details
    FieldRule(
        "tax_contributing_country",
        non_empty(),
        "At least one tax contributing country is required",
    ),
    FieldRule("tax_contributing_country", one_of("countries"), "Select valid countries"),
)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _resolve(data: Mapping[str, Any], path: str) -> list[tuple[str, Any]]:
    nodes: list[tuple[str, Any]] = [("", data)]
    for part in path.split("."):
        resolved: list[tuple[str, Any]] = []
        for prefix, node in nodes:
            if part == "*":
                if isinstance(node, list):
                    resolved.extend((_join(prefix, str(idx)), item) for idx, item in enumerate(node))
            elif isinstance(node, Mapping) and part in node:
                resolved.append((_join(prefix, part), node[part]))
        nodes = resolved
    return nodes


def evaluate_rules(rules: tuple[FieldRule, ...], data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for rule in rules:
        if rule.when is not None and not rule.when(data):
            continue
        for path, value in _resolve(data, rule.path):
            if path in errors:
                continue
            if not rule.check(value):
                errors[path] = rule.message
    return errors


def errors_from_pydantic(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        path = ".".join(to_snake(part) if isinstance(part, str) else str(part) for part in error["loc"])
        errors.setdefault(path or "__root__", error["msg"])
    return errors


def _validate(
    model: type[FormModel],
    rules: tuple[FieldRule, ...],
    payload: Mapping[str, Any] | BaseModel,
    form_type: str,
) -> ValidationResult:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        record = model.model_validate(payload)
    except ValidationError as exc:
        errors = errors_from_pydantic(exc)
        logger.info("Rejected %s form: %d malformed field(s)", form_type, len(errors))
        return ValidationResult(record=None, errors=errors)

    errors = evaluate_rules(rules, record.model_dump())
    if errors:
        logger.info("Rejected %s form: %d field error(s)", form_type, len(errors))
        return ValidationResult(record=None, errors=errors)
    return ValidationResult(record=record)


def validate_corporate(payload: Mapping[str, Any] | BaseModel) -> ValidationResult:
    return _validate(CorporateForm, CORPORATE_RULES, payload, "corporate")


def validate_individual(payload: Mapping[str, Any] | BaseModel) -> ValidationResult:
    return _validate(IndividualForm, INDIVIDUAL_RULES, payload, "individual")
