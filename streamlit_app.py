from __future__ import annotations

import math
from typing import Any

import requests
import streamlit as st

from ssas.config import settings
from ssas.formatting import format_currency, format_mobile_number, format_phone_number, parse_currency
from ssas.reference_data import codes, label_for
from ssas.session import (
    InvalidFieldChange,
    add_management_person,
    add_previous_address,
    apply_corporate_change,
    apply_individual_change,
    can_add_previous_address,
    new_corporate_session,
    new_individual_session,
    remove_management_person,
    remove_previous_address,
)
from ssas.validation import validate_corporate, validate_individual

st.set_page_config(page_title=settings.app_name, layout="wide")
st.title(settings.app_name)
st.caption("Fields marked * are mandatory")

backend_url = st.sidebar.text_input("Backend URL", value=settings.backend_url).rstrip("/")

if "corporate" not in st.session_state:
    st.session_state.corporate = new_corporate_session()
if "individual" not in st.session_state:
    st.session_state.individual = new_individual_session()
if "errors" not in st.session_state:
    st.session_state.errors = {"corporate": {}, "individual": {}}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def api_post(path: str, **kwargs) -> dict | None:
    try:
        resp = requests.post(f"{backend_url}{path}", timeout=30, **kwargs)
        if resp.status_code == 200:
            return resp.json()
        st.error(f"POST {path} failed ({resp.status_code}): {resp.text}")
    except requests.RequestException as exc:
        st.warning(f"Backend not reachable: {exc}")
    return None


def _key(form: str, path: str) -> str:
    return f"{form}:{path}"


def _reset_widgets(form: str, prefix: str) -> None:
    """Drop cached widget values so they re-read the draft on the next run."""
    stale = [key for key in st.session_state if isinstance(key, str) and key.startswith(_key(form, prefix))]
    for key in stale:
        del st.session_state[key]


def _current(form: str, path: str) -> Any:
    node: Any = st.session_state[form].draft.model_dump()
    for part in path.split("."):
        node = node[int(part)] if isinstance(node, list) else node[part]
    return node


def _on_change(form: str, path: str) -> None:
    value = st.session_state[_key(form, path)]
    apply = apply_corporate_change if form == "corporate" else apply_individual_change
    errors = st.session_state.errors[form]
    try:
        session, recomputed = apply(st.session_state[form], path, value)
    except InvalidFieldChange as exc:
        errors[path] = exc.message
        return
    errors.pop(path, None)
    st.session_state[form] = session
    for flag in recomputed:
        _reset_widgets(form, flag)


def _label(label: str, required: bool) -> str:
    return f"{label} *" if required else label


def _show_error(form: str, path: str) -> None:
    message = st.session_state.errors[form].get(path)
    if message:
        st.markdown(f":red[{message}]")


def text_field(
    form: str, path: str, label: str, required: bool = False, help: str | None = None, disabled: bool = False
) -> None:
    st.text_input(
        _label(label, required),
        value=str(_current(form, path) or ""),
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
        help=help,
        disabled=disabled,
    )
    _show_error(form, path)


def number_field(form: str, path: str, label: str, required: bool = False, max_value: int | None = None) -> None:
    st.number_input(
        _label(label, required),
        min_value=0,
        max_value=max_value,
        step=1,
        value=int(_current(form, path)),
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
    )
    _show_error(form, path)


def amount_field(form: str, path: str, label: str, required: bool = False) -> None:
    st.number_input(
        _label(label, required),
        min_value=0.0,
        step=100.0,
        value=float(_current(form, path)),
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
    )
    st.caption(format_currency(_current(form, path)))
    _show_error(form, path)


def check_field(form: str, path: str, label: str) -> None:
    st.checkbox(
        label,
        value=bool(_current(form, path)),
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
    )
    _show_error(form, path)


def select_field(form: str, path: str, label: str, list_name: str, required: bool = False) -> None:
    options = ["", *codes(list_name)]
    current = _current(form, path)
    st.selectbox(
        _label(label, required),
        options=options,
        index=options.index(current) if current in options else 0,
        format_func=lambda code: label_for(list_name, code) or "Select...",
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
    )
    _show_error(form, path)


def multi_field(form: str, path: str, label: str, list_name: str, required: bool = False) -> None:
    st.multiselect(
        _label(label, required),
        options=codes(list_name),
        default=_current(form, path),
        format_func=lambda code: label_for(list_name, code) or code,
        key=_key(form, path),
        on_change=_on_change,
        args=(form, path),
    )
    _show_error(form, path)


def address_block(form: str, prefix: str, with_duration: bool = False) -> None:
    join = (lambda name: f"{prefix}.{name}") if prefix else (lambda name: name)
    cols = st.columns(2)
    with cols[0]:
        text_field(form, join("address_1"), "Address 1", required=True)
        text_field(form, join("address_3"), "Address 3")
        text_field(form, join("postcode"), "Postcode", required=True)
    with cols[1]:
        text_field(form, join("address_2"), "Address 2", required=True)
        text_field(form, join("address_4"), "Address 4")
        select_field(form, join("country"), "Country", "countries", required=True)
    if with_duration:
        cols = st.columns(2)
        with cols[0]:
            number_field(form, join("years_at_address"), "Years at address")
        with cols[1]:
            number_field(form, join("months_at_address"), "Months at address", max_value=11)


def submit_button(form: str) -> None:
    if not st.button("Submit", key=_key(form, "submit"), type="primary"):
        return
    validate = validate_corporate if form == "corporate" else validate_individual
    result = validate(st.session_state[form].draft)
    st.session_state.errors[form] = dict(result.errors)
    if not result.is_valid:
        st.error(f"{len(result.errors)} field(s) need attention before submitting.")
        for path, message in result.errors.items():
            st.caption(f"{path}: {message}")
        return

    response = api_post(f"/api/{form}/submit", json=result.record.model_dump(mode="json", by_alias=True))
    if response:
        st.success(f"Submitted {form} details for PSTR {response['pstr_id']} ({response['status']}).")


# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------

corporate_tab, individual_tab = st.tabs(["Corporate Information", "Individual Information"])

# ---- Corporate tab --------------------------------------------------------

with corporate_tab:
    form = "corporate"
    st.caption("Enter all required company information - one line per company")

    st.subheader("Contact Details")
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "pstr_id", "PSTR ID", required=True, help="Pension Scheme Tax Reference ID")
        text_field(form, "contact_name", "Contact Name", required=True)
        text_field(form, "pension_provider", "Pension Provider", required=True)
        text_field(form, "email", "Email", required=True)
    with cols[1]:
        text_field(form, "pension_scheme_name", "Pension Scheme Name", required=True)
        text_field(form, "position_in_organization", "Position in Organization", required=True)
        text_field(form, "telephone", "Telephone", required=True, help="14 digits including country code")
        st.caption(format_phone_number(_current(form, "telephone")))
        text_field(form, "mobile", "Mobile", required=True, help="14 digits")
        st.caption(format_phone_number(_current(form, "mobile")))

    st.subheader("Address Details")
    select_field(form, "address_type", "Address Type", "address_types", required=True)
    address_block(form, "")
    cols = st.columns(3)
    with cols[0]:
        check_field(form, "is_current_address", "Current Address")
    with cols[1]:
        check_field(form, "is_permanent_address", "Permanent Address")
    with cols[2]:
        check_field(form, "is_communication_address", "Communication Address")

    st.subheader("Pension Scheme Details")
    cols = st.columns(2)
    with cols[0]:
        number_field(form, "how_many_to_sign", "Number of Signatories", required=True)
        number_field(form, "how_many_members", "Number of Members", required=True)
        text_field(form, "date_of_registration", "Date of Registration", required=True)
        amount_field(form, "deposit_per_annum", "Deposit per Annum", required=True)
        amount_field(form, "anticipated_activity", "Anticipated Activity", required=True)
    with cols[1]:
        number_field(form, "how_many_from_corporate_trustee", "Number of Signatories from Corporate Trustee")
        check_field(form, "is_occupational_scheme", "Occupational Scheme")
        check_field(form, "permit_assignment_of_interest", "Permit Assignment of Interest")
        check_field(form, "has_deduction_from_employee_wages", "Has Deduction from Employee Wages")
        check_field(form, "has_corporate_trustee", "Has Corporate Trustee")
        amount_field(form, "annual_outgoings", "Annual Outgoings", required=True)
        amount_field(form, "anticipated_transactions", "Anticipated Transactions", required=True)
    multi_field(form, "country_of_payments", "Country of Payments", "countries", required=True)
    text_field(form, "scheme_registration_country", "Scheme Registration Country", required=True, disabled=True)

    st.subheader("Principal Employer Details")
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "contributor_legal_name", "Legal Name", required=True)
        text_field(form, "contributor_address_1", "Address 1", required=True)
        text_field(form, "contributor_address_3", "Address 3")
        text_field(form, "contributor_postcode", "Postcode")
        text_field(form, "contributor_date_of_incorporation", "Date of Incorporation", required=True)
        text_field(form, "contributor_date_started_trading", "Date Started Trading", required=True)
    with cols[1]:
        text_field(form, "contributor_trading_name", "Trading Name")
        text_field(form, "contributor_address_2", "Address 2")
        text_field(form, "contributor_address_4", "Address 4")
        select_field(form, "contributor_country", "Country", "countries", required=True)
        text_field(form, "contributor_date_of_registration", "Date of Registration", required=True)
        text_field(form, "contributor_nature_of_business", "Nature of Business", required=True)
    multi_field(form, "contributor_countries_operates_in", "Countries Operates In", "countries", required=True)

    st.markdown("**Management**")
    _show_error(form, "contributor_management")
    for idx, _person in enumerate(st.session_state.corporate.draft.contributor_management):
        prefix = f"contributor_management.{idx}"
        cols = st.columns([3, 3, 3, 3, 1])
        with cols[0]:
            text_field(form, f"{prefix}.first_name", "First Name", required=True)
        with cols[1]:
            text_field(form, f"{prefix}.middle_name", "Middle Name")
        with cols[2]:
            text_field(form, f"{prefix}.surname", "Surname", required=True)
        with cols[3]:
            text_field(form, f"{prefix}.position", "Position", required=True)
        with cols[4]:
            if st.button("Remove", key=_key(form, f"{prefix}.remove")):
                st.session_state.corporate = remove_management_person(st.session_state.corporate, idx)
                _reset_widgets(form, "contributor_management")
                st.rerun()
    if st.button("Add management person", key=_key(form, "contributor_management.add")):
        st.session_state.corporate = add_management_person(st.session_state.corporate)
        st.rerun()

    st.subheader("Co-sign Details")
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "professional_co_signatory", "Professional Co-signatory", required=True)
        text_field(form, "co_sign_address", "Address", required=True)
        text_field(form, "co_sign_email", "Email", required=True)
    with cols[1]:
        text_field(form, "co_sign_company_name", "Company Name", required=True)
        text_field(form, "co_sign_telephone", "Telephone", required=True)
        text_field(form, "regulator_reference_number", "Regulator Reference Number", required=True)

    st.subheader("Account Details")
    check_field(form, "tc_acknowledgement", "I acknowledge the terms and conditions")
    multi_field(form, "account_type", "Account Type", "account_types", required=True)
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "opening_balance", "Opening Balance", required=True)
        text_field(form, "source_of_initial_funds", "Source of Initial Funds", required=True)
    with cols[1]:
        text_field(form, "value_of_funds", "Value of Funds", required=True)
        text_field(form, "other_source_of_funds", "Other Source of Funds")
    for path in ("opening_balance", "value_of_funds"):
        amount = parse_currency(_current(form, path))
        if not math.isnan(amount):
            st.caption(f"{path.replace('_', ' ').capitalize()}: {format_currency(amount)}")
    multi_field(form, "source_of_funds", "Source of Funds", "funds_sources", required=True)
    multi_field(form, "country_of_funds", "Country of Funds", "countries", required=True)

    submit_button(form)

# ---- Individual tab -------------------------------------------------------

with individual_tab:
    form = "individual"
    st.caption("Enter all required Employees. One line per employee. Link to company by PSTR ID")
    visibility = st.session_state.individual.visibility

    st.subheader("Individual Contact Details")
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "pstr_id", "PSTR ID", required=True, help="PSTR ID of the employee's company")
        select_field(form, "title", "Title", "titles", required=True)
        text_field(form, "middle_name", "Middle Name")
        text_field(form, "date_of_birth", "Date of Birth", required=True, help="DD-MM-YYYY")
        select_field(form, "primary_nationality", "Primary Nationality", "nationalities", required=True)
        check_field(form, "has_dual_nationality", "Dual nationality")
        if visibility.second_nationality:
            select_field(form, "second_nationality", "Second Nationality", "nationalities", required=True)
    with cols[1]:
        number_field(form, "employee_id", "Employee ID", required=True)
        text_field(form, "first_name", "First Name", required=True)
        text_field(form, "surname", "Surname", required=True)
        select_field(form, "gender", "Gender", "genders", required=True)
        select_field(form, "country_of_birth", "Country of Birth", "countries", required=True)
        check_field(form, "is_signer", "Signer")
        check_field(form, "is_trustee_of_scheme", "Trustee of scheme")
    cols = st.columns(2)
    with cols[0]:
        text_field(form, "telephone", "Telephone", required=True, help="14 digits including country code")
        st.caption(format_phone_number(_current(form, "telephone")))
        text_field(form, "email", "Email", required=True)
        text_field(form, "occupation", "Occupation", required=True)
    with cols[1]:
        text_field(form, "mobile", "Mobile", required=True, help="10 digits")
        st.caption(format_mobile_number(_current(form, "mobile")))
        select_field(form, "type_of_employment", "Type of Employment", "employment_types", required=True)
        multi_field(form, "marketing_preferences", "Marketing Preferences", "marketing_preferences")

    st.subheader("Individual Address Details")
    address_block(form, "", with_duration=True)
    cols = st.columns(3)
    with cols[0]:
        check_field(form, "is_current_address", "Current Address")
    with cols[1]:
        check_field(form, "is_permanent_address", "Permanent Address")
    with cols[2]:
        check_field(form, "is_communication_address", "This is also my communication address")

    if visibility.previous_addresses:
        st.subheader("Previous Addresses")
        st.caption("Required when you have lived at your current address for less than 3 years")
        _show_error(form, "previous_addresses")
        for idx, _address in enumerate(st.session_state.individual.draft.previous_addresses):
            st.markdown(f"**Previous address {idx + 1}**")
            address_block(form, f"previous_addresses.{idx}", with_duration=True)
            removable = len(st.session_state.individual.draft.previous_addresses) > 1
            if removable and st.button("Remove", key=_key(form, f"previous_addresses.{idx}.remove")):
                st.session_state.individual = remove_previous_address(st.session_state.individual, idx)
                _reset_widgets(form, "previous_addresses")
                st.rerun()
        if can_add_previous_address(st.session_state.individual):
            if st.button("Add previous address", key=_key(form, "previous_addresses.add")):
                st.session_state.individual = add_previous_address(st.session_state.individual)
                st.rerun()

    if visibility.communication_address:
        st.subheader("Communication Address")
        address_block(form, "communication_address")

    st.subheader("Tax Details")
    cols = st.columns(2)
    with cols[0]:
        multi_field(form, "tax_contributing_country", "Tax Contributing Country", "countries", required=True)
    with cols[1]:
        text_field(form, "foreign_tin_id", "Foreign TIN ID")

    submit_button(form)
