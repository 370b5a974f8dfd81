from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FormType = Literal["corporate", "individual"]

SCHEME_REGISTRATION_COUNTRY = "United Kingdom"


class FormModel(BaseModel):
    """Base for form records: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Shared building blocks
# ---------------------------------------------------------------------------

class AddressLines(FormModel):
    address_1: str = ""
    address_2: str = ""
    address_3: str = ""
    address_4: str = ""
    postcode: str = ""
    country: str = ""


class PreviousAddress(AddressLines):
    years_at_address: int = 0
    months_at_address: int = 0


class CommunicationAddress(AddressLines):
    pass


class ManagementPerson(FormModel):
    first_name: str = ""
    middle_name: str = ""
    surname: str = ""
    position: str = ""


# ---------------------------------------------------------------------------
# Corporate record
# ---------------------------------------------------------------------------

class CorporateForm(FormModel):
    # Contact details
    pstr_id: str = ""
    pension_scheme_name: str = ""
    contact_name: str = ""
    position_in_organization: str = ""
    pension_provider: str = ""
    telephone: str = ""
    mobile: str = ""
    email: str = ""

    # Address details
    address_type: str = ""
    address_1: str = ""
    address_2: str = ""
    address_3: str = ""
    address_4: str = ""
    postcode: str = ""
    country: str = ""
    is_current_address: bool = False
    is_permanent_address: bool = False
    is_communication_address: bool = False

    # Pension scheme details
    how_many_to_sign: int = 0
    how_many_from_corporate_trustee: int = 0
    how_many_members: int = 0
    is_occupational_scheme: bool = False
    permit_assignment_of_interest: bool = False
    has_deduction_from_employee_wages: bool = False
    date_of_registration: str = ""
    has_corporate_trustee: bool = False
    deposit_per_annum: float = 0
    annual_outgoings: float = 0
    anticipated_activity: float = 0
    anticipated_transactions: float = 0
    country_of_payments: list[str] = Field(default_factory=list)
    scheme_registration_country: str = SCHEME_REGISTRATION_COUNTRY

    # Principal employer details
    contributor_legal_name: str = ""
    contributor_trading_name: str = ""
    contributor_address_1: str = ""
    contributor_address_2: str = ""
    contributor_address_3: str = ""
    contributor_address_4: str = ""
    contributor_postcode: str = ""
    contributor_country: str = ""
    contributor_date_of_incorporation: str = ""
    contributor_date_of_registration: str = ""
    contributor_date_started_trading: str = ""
    contributor_nature_of_business: str = ""
    contributor_countries_operates_in: list[str] = Field(default_factory=list)
    contributor_management: list[ManagementPerson] = Field(default_factory=lambda: [ManagementPerson()])

    # Co-sign details
    professional_co_signatory: str = ""
    co_sign_company_name: str = ""
    co_sign_address: str = ""
    co_sign_telephone: str = ""
    co_sign_email: str = ""
    regulator_reference_number: str = ""

    # Account details
    tc_acknowledgement: bool = False
    account_type: list[str] = Field(default_factory=list)
    opening_balance: str = ""
    source_of_initial_funds: str = ""
    source_of_funds: list[str] = Field(default_factory=list)
    other_source_of_funds: str = ""
    value_of_funds: str = ""
    country_of_funds: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Individual record
# ---------------------------------------------------------------------------

class IndividualForm(FormModel):
    # Identity and contact
    pstr_id: str = ""
    employee_id: int = 0
    title: str = ""
    first_name: str = ""
    middle_name: str = ""
    surname: str = ""
    is_signer: bool = False
    is_trustee_of_scheme: bool = False
    date_of_birth: str = ""
    gender: str = ""
    primary_nationality: str = ""
    country_of_birth: str = ""
    has_dual_nationality: bool = False
    second_nationality: str = ""
    telephone: str = ""
    mobile: str = ""
    email: str = ""
    type_of_employment: str = ""
    occupation: str = ""
    marketing_preferences: list[str] = Field(default_factory=list)

    # Current address
    address_1: str = ""
    address_2: str = ""
    address_3: str = ""
    address_4: str = ""
    postcode: str = ""
    country: str = ""
    is_current_address: bool = True
    is_permanent_address: bool = True
    is_communication_address: bool = True
    years_at_address: int = 0
    months_at_address: int = 0

    previous_addresses: list[PreviousAddress] = Field(default_factory=list)
    communication_address: CommunicationAddress | None = None

    # Tax details
    tax_contributing_country: list[str] = Field(default_factory=list)
    foreign_tin_id: str = ""


# ---------------------------------------------------------------------------
# API response / request DTOs
# ---------------------------------------------------------------------------

class ValidationReport(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class SubmissionResponse(BaseModel):
    status: str
    form_type: FormType
    pstr_id: str
    reference: str | None = None


class IndividualVisibility(BaseModel):
    previous_addresses: bool = False
    communication_address: bool = False
    second_nationality: bool = False
