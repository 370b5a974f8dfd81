from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ssas.main import app
from ssas.schemas import FormModel, FormType
from ssas.submission import SubmissionReceipt, get_submitter


class FakeSubmitter:
    def __init__(self, receipt: SubmissionReceipt | None = None, error: Exception | None = None) -> None:
        self.receipt = receipt or SubmissionReceipt(status="submitted", reference="REF-001")
        self.error = error
        self.calls: list[tuple[FormType, FormModel]] = []

    def submit(self, form_type: FormType, record: FormModel) -> SubmissionReceipt:
        self.calls.append((form_type, record))
        if self.error is not None:
            raise self.error
        return self.receipt


@pytest.fixture
def fake_submitter() -> FakeSubmitter:
    submitter = FakeSubmitter()
    app.dependency_overrides[get_submitter] = lambda: submitter
    yield submitter
    app.dependency_overrides.pop(get_submitter, None)


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_corporate_payload() -> dict:
    return {
        "pstrId": "00123456RX",
        "pensionSchemeName": "Harbour Engineering SSAS",
        "contactName": "Priya Shah",
        "positionInOrganization": "Finance Director",
        "pensionProvider": "Whitmore Pensions",
        "telephone": "44207946001234",
        "mobile": "44770090012345",
        "email": "priya.shah@harbour-eng.co.uk",
        "addressType": "business",
        "address1": "12",
        "address2": "Dock Street",
        "postcode": "E1 8JN",
        "country": "GB",
        "isCurrentAddress": True,
        "isPermanentAddress": True,
        "isCommunicationAddress": True,
        "howManyToSign": 2,
        "howManyFromCorporateTrustee": 0,
        "howManyMembers": 3,
        "isOccupationalScheme": False,
        "dateOfRegistration": "01-04-2015",
        "depositPerAnnum": 25000,
        "annualOutgoings": 4000,
        "anticipatedActivity": 12,
        "anticipatedTransactions": 24,
        "countryOfPayments": ["GB"],
        "schemeRegistrationCountry": "United Kingdom",
        "contributorLegalName": "Harbour Engineering Ltd",
        "contributorTradingName": "Harbour Engineering",
        "contributorAddress1": "12 Dock Street",
        "contributorPostcode": "E1 8JN",
        "contributorCountry": "GB",
        "contributorDateOfIncorporation": "14-02-2009",
        "contributorDateOfRegistration": "14-02-2009",
        "contributorDateStartedTrading": "01-03-2009",
        "contributorNatureOfBusiness": "Marine engineering",
        "contributorCountriesOperatesIn": ["GB", "IE"],
        "contributorManagement": [
            {"firstName": "Priya", "middleName": "", "surname": "Shah", "position": "Director"},
        ],
        "professionalCoSignatory": "Whitmore Trustees",
        "coSignCompanyName": "Whitmore Trustees Ltd",
        "coSignAddress": "1 King Street, Leeds",
        "coSignTelephone": "01134960000",
        "coSignEmail": "trustees@whitmore.co.uk",
        "regulatorReferenceNumber": "FRN123456",
        "tcAcknowledgement": True,
        "accountType": ["business"],
        "openingBalance": "£50,000",
        "sourceOfInitialFunds": "Transfer from previous scheme",
        "sourceOfFunds": ["salary"],
        "otherSourceOfFunds": "",
        "valueOfFunds": "£250,000",
        "countryOfFunds": ["GB"],
    }


@pytest.fixture
def valid_individual_payload() -> dict:
    return {
        "pstrId": "00123456RX",
        "employeeId": 1,
        "title": "mrs",
        "firstName": "Priya",
        "middleName": "",
        "surname": "Shah",
        "isSigner": True,
        "isTrusteeOfScheme": False,
        "dateOfBirth": "12-06-1978",
        "gender": "female",
        "primaryNationality": "british",
        "countryOfBirth": "GB",
        "hasDualNationality": False,
        "secondNationality": "",
        "telephone": "44207946001234",
        "mobile": "7700900123",
        "email": "priya.shah@harbour-eng.co.uk",
        "typeOfEmployment": "full_time",
        "occupation": "Engineer",
        "marketingPreferences": ["email"],
        "address1": "4",
        "address2": "Canal Walk",
        "postcode": "N1 9GU",
        "country": "GB",
        "isCurrentAddress": True,
        "isPermanentAddress": True,
        "isCommunicationAddress": True,
        "yearsAtAddress": 5,
        "monthsAtAddress": 2,
        "previousAddresses": [],
        "taxContributingCountry": ["GB"],
        "foreignTinId": "",
    }


@pytest.fixture
def previous_address() -> dict:
    return {
        "address1": "9",
        "address2": "Mill Lane",
        "postcode": "LS1 4AP",
        "country": "GB",
        "yearsAtAddress": 4,
        "monthsAtAddress": 0,
    }
