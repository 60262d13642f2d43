"""Test configuration and fixtures."""

import copy
from typing import Any, Dict

import pytest

from congregation.client import CongregationClient
from congregation.connectors import ScriptedFetcher, StaticCredentials

INSTANCE_URL = "https://tkt.my.salesforce.com"

MEMBER_PAYLOAD: Dict[str, Any] = {
    "id": "a0B5g00000XyZ1",
    "memberId": "tkt123456",
    "createdDate": "2023-04-01T10:15:30.000Z",
    "lastModifiedDate": "2024-01-15T08:00:00+0000",
    "memberName": "Ravi Kumar",
    "firstName": "Ravi",
    "lastName": "Kumar",
    "gender": "Male",
    "dateOfBirth": "1990-06-15",
    "title": "Mr.",
    "memberType": "TKT",
    "bloodGroup": "O Positive",
    "preferredLanguage": "English;Telugu",
    "attendingCampus": "West - Kukatpally",
    "serviceCampus": "West -Kukatpally",
    "partOfLifeGroup": True,
    "status": "Regular",
    "campus": "west campus",
    "spm": False,
    "attendingService": "1st Service",
    "contactNumberMobile": "9876543210",
    "lifeGroupLeaderName": "Suresh",
    "photo": (
        '<p><img src="https://tkt.my.salesforce.com/servlet/rtaImage?eid=a0B5g'
        '&amp;refid=0EM5g" alt="Profile_Photo"></img></p>'
    ),
    "email": "ravi@example.com",
    "currentAddress": "Plot 12, Kukatpally",
    "area": "KPHB",
    "employmentStatus": "Employed",
    "nameOfTheOrganization": "Acme Software",
    "occupation": "IT/ITES",
    "sector": "Private",
    "occupationSubCategory": "Software Developer",
    "martialStatus": "Married",
    "weddingAnniversary": "2015-06-20",
    "spouseName": "Anita",
    "numberOfChildren": 2,
    "waterBaptism": True,
    "waterBaptismDateText": "2010-03-14",
    "holySpiritFiling": True,
    "involvedInMinistry": "Volunteers",
    "primaryDepartment": "Worship team",
    "interestedToServe": "Yes",
    "bibleCourse": "Module 2",
}

SEEKER_PAYLOAD: Dict[str, Any] = {
    "id": "a1C5g00000AbC2",
    "leadIdText": "L-0042",
    "leadStatus": "2nd Follow up",
    "nameLocal": "Priya Sharma Reddy",
    "emailAlt": "priya@example.com",
    "email": "old@example.com",
    "contactNumberMobile": "9000000001",
    "dateOfBirth": "1998-02-10T00:00:00.000Z",
    "age": "18-25",
    "area": "Madhapur",
    "typeOfEntry": "new visitor",
    "maritalStatus": "Single",
    "createdDate": "2024-05-05T09:30:00.000Z",
}


def member_record(member_id: str, **overrides: Any) -> Dict[str, Any]:
    """Small member record for envelope and pagination payloads."""
    record = {
        "memberId": member_id,
        "memberName": f"Member {member_id}",
        "contactNumberMobile": "9000000000",
        "employmentStatus": "Employed",
    }
    record.update(overrides)
    return record


def members_page(ids, next_token=None, page_size=2, **extra: Any) -> Dict[str, Any]:
    """Paginated members envelope."""
    payload: Dict[str, Any] = {
        "members": [member_record(i) for i in ids],
        "pageSize": page_size,
        "success": True,
    }
    if next_token is not None:
        payload["nextPageToken"] = next_token
    payload.update(extra)
    return payload


@pytest.fixture
def member_payload() -> Dict[str, Any]:
    """Fully populated member record (fresh copy per test)."""
    return copy.deepcopy(MEMBER_PAYLOAD)


@pytest.fixture
def seeker_payload() -> Dict[str, Any]:
    """Fully populated seeker record (fresh copy per test)."""
    return copy.deepcopy(SEEKER_PAYLOAD)


@pytest.fixture
def fetcher() -> ScriptedFetcher:
    """Scripted fetcher with no responses configured."""
    return ScriptedFetcher()


@pytest.fixture
def credentials() -> StaticCredentials:
    return StaticCredentials(access_token="test-token", instance_url=INSTANCE_URL + "/")


@pytest.fixture
def client(fetcher, credentials) -> CongregationClient:
    """Client over the scripted fetcher."""
    return CongregationClient(fetcher, credentials, api_prefix="/services/apexrest")
