"""Decoding upstream records into Member and Seeker models (and back).

Decoding is two-phase: RawRecord.parse() gives a loosely typed map, then a
FieldReader resolves each logical field with key fallback and coercion.
Logical field names below are the upstream primary key of each field, so a
caller can list them in `required` and get errors that name the wire key.

Key fallbacks (first wins):

Member:
- phone: contactNumberMobile, phone
- lifeGroupName: lifeGroupLeaderName, lifeGroupName
- address: currentAddress, address
- martialStatus: martialStatus, maritalStatus
- weddingAnniversary: weddingAnniversary, weddingAnniversaryDdMmYyyy
- holySpiritFiling: holySpiritFiling, holySpiritFilling

Seeker:
- leadIdText: leadIdText, leadId
- name: nameLocal, fullName
- email: emailAlt, email

Encoding writes the first (canonical) key of every field, never a legacy
alias.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from congregation.records.derive import join_name, split_full_name
from congregation.records.enums import (
    AttendingCampus,
    AttendingService,
    BibleCourse,
    BloodGroup,
    Campus,
    EmploymentStatus,
    Gender,
    InterestedToServe,
    LeadStatus,
    MaritalStatus,
    MemberStatus,
    MemberTitle,
    MemberType,
    MinistryInvolvement,
    MissionaryType,
    Occupation,
    Picklist,
    PreferredLanguage,
    PrimaryDepartment,
    Sector,
    ServiceCampus,
    SubscriptionStatus,
    TypeOfEntry,
)
from congregation.records.errors import EnumDecodeError
from congregation.records.fields import (
    FieldReader,
    RawRecord,
    format_date,
    format_datetime,
)
from congregation.records.ids import MemberID
from congregation.records.models import (
    ContactInformation,
    DiscipleshipInformation,
    EmploymentInformation,
    FoundationCourse,
    Lead,
    MaritalInformation,
    Member,
    PrayerCourse,
    Seeker,
    ServingInformation,
    WaterBaptism,
)

logger = logging.getLogger(__name__)

LANGUAGE_SEPARATORS = re.compile(r"[;&]")


def parse_languages(value: Any) -> Optional[List[PreferredLanguage]]:
    """Decode preferredLanguage from a list or a ';'/'&' separated string.

    Unknown items are dropped; an empty result is None.
    """
    if isinstance(value, str):
        items = LANGUAGE_SEPARATORS.split(value)
    elif isinstance(value, list):
        items = value
    else:
        raise TypeError(f"expected string or list, got {type(value).__name__}")

    languages: List[PreferredLanguage] = []
    for item in items:
        if isinstance(item, str) and not item.strip():
            continue
        try:
            language = PreferredLanguage.normalize(item)
        except EnumDecodeError:
            logger.debug(f"Dropping unknown preferred language {item!r}")
            continue
        if language not in languages:
            languages.append(language)
    return languages or None


def _names(reader: FieldReader, full_name_field: str, *keys: str) -> Dict[str, Optional[str]]:
    """Resolve first/middle/last and the reconstructed full name."""
    first = reader.string("firstName")
    middle = reader.string("middleName")
    last = reader.string("lastName")
    raw_full = reader.string(full_name_field, *keys)

    if first is None and middle is None and last is None:
        first, last = split_full_name(raw_full)

    return {
        "first_name": first,
        "middle_name": middle,
        "last_name": last,
        "full_name": join_name(first, middle, last) or raw_full,
    }


# =============================================================================
# Member
# =============================================================================


def _contact(reader: FieldReader) -> Optional[ContactInformation]:
    values = dict(
        phone_number=reader.string("phone", "contactNumberMobile", "phone"),
        email=reader.string("email"),
        address=reader.string("address", "currentAddress", "address"),
        area=reader.string("area"),
        whatsapp_number=reader.string("whatsappNo"),
        alternate_number=reader.string("alternateNumber"),
        profession=reader.string("profession"),
        location=reader.string("location"),
    )
    if not reader.present(
        "phone", "email", "address", "area", "whatsappNo", "alternateNumber", "profession", "location"
    ):
        return None
    return ContactInformation(**values)


def _employment(reader: FieldReader) -> Optional[EmploymentInformation]:
    values = dict(
        employment_status=reader.enum("employmentStatus", EmploymentStatus),
        name_of_the_organization=reader.string("nameOfTheOrganization"),
        occupation=reader.enum("occupation", Occupation),
        sector=reader.enum("sector", Sector),
        occupation_sub_category=reader.string("occupationSubCategory"),
    )
    if not reader.present(
        "employmentStatus", "nameOfTheOrganization", "occupation", "sector", "occupationSubCategory"
    ):
        return None
    return EmploymentInformation(**values)


def _marital(reader: FieldReader) -> Optional[MaritalInformation]:
    values = dict(
        marital_status=reader.enum("martialStatus", MaritalStatus, "martialStatus", "maritalStatus"),
        wedding_anniversary=reader.calendar_date(
            "weddingAnniversary", "weddingAnniversary", "weddingAnniversaryDdMmYyyy"
        ),
        spouse_name=reader.string("spouseName"),
        number_of_children=reader.integer("numberOfChildren"),
    )
    if not reader.present("martialStatus", "weddingAnniversary", "spouseName", "numberOfChildren"):
        return None
    return MaritalInformation(**values)


def _discipleship(reader: FieldReader) -> Optional[DiscipleshipInformation]:
    baptism_date = reader.string("waterBaptismDateText")
    baptism_received = reader.boolean("waterBaptism")
    prayer_completed = reader.boolean("prayerCourse")
    prayer_date = reader.string("prayerCourseDateText")
    foundation_completed = reader.boolean("foundationCourse")
    involved = reader.enum("involvedInMinistry", MinistryInvolvement)
    department = reader.enum("primaryDepartment", PrimaryDepartment)
    serving_campus = reader.string("servingCampus", "serviceCampus")
    interested = reader.enum("interestedToServe", InterestedToServe)

    values = dict(
        born_again_date=reader.string("bornAgainDateText"),
        water_baptism=(
            WaterBaptism(date=baptism_date, received=baptism_received)
            if baptism_date is not None or baptism_received is not None
            else None
        ),
        prayer_course=(
            PrayerCourse(completed=prayer_completed, date=prayer_date)
            if prayer_completed is not None or prayer_date is not None
            else None
        ),
        foundation_course=(
            FoundationCourse(completed=foundation_completed)
            if foundation_completed is not None
            else None
        ),
        attended_life_transformation_camp=reader.boolean("attendedLifeTransformationCamp"),
        holy_spirit_filling=reader.boolean(
            "holySpiritFiling", "holySpiritFiling", "holySpiritFilling"
        ),
        missionary=reader.enum("missionary", MissionaryType),
        subscribed_to_youtube_channel=reader.enum("subscribedToYoutubeChannel", SubscriptionStatus),
        subscribed_to_whatsapp=reader.enum("subscribedToWhatsapp", SubscriptionStatus),
        serving=(
            ServingInformation(
                involved=involved,
                primary_department=department,
                service_campus=serving_campus,
                interested=interested,
            )
            if any(v is not None for v in (involved, department, serving_campus, interested))
            else None
        ),
        bible_course=reader.enum("bibleCourse", BibleCourse),
    )
    if not any(v is not None for v in values.values()):
        return None
    return DiscipleshipInformation(**values)


def decode_member(payload: Any, required: Iterable[str] = ()) -> Member:
    """Decode one upstream member record.

    Args:
        payload: JSON object (dict or text)
        required: Logical fields that must resolve; see module docstring

    Returns:
        Member with absent groups set to None

    Raises:
        RecordDecodeError: If the payload is not an object or a required
            field (including an invalid memberId) does not resolve
    """
    reader = FieldReader(RawRecord.parse(payload), required=required)

    # An invalid identifier is dropped like any malformed optional field.
    member_id = reader.read("memberId", coerce=MemberID)
    names = _names(reader, "memberName")

    return Member(
        id=reader.string("id"),
        member_id=member_id,
        created_date=reader.timestamp("createdDate"),
        last_modified_date=reader.timestamp("lastModifiedDate"),
        member_name=names["full_name"],
        first_name=names["first_name"],
        middle_name=names["middle_name"],
        last_name=names["last_name"],
        gender=reader.enum("gender", Gender),
        date_of_birth=reader.calendar_date("dateOfBirth"),
        title=reader.enum("title", MemberTitle),
        member_type=reader.enum("memberType", MemberType),
        blood_group=reader.enum("bloodGroup", BloodGroup),
        preferred_languages=reader.read("preferredLanguage", coerce=parse_languages),
        attending_campus=reader.enum("attendingCampus", AttendingCampus),
        service_campus=reader.enum("serviceCampus", ServiceCampus),
        part_of_life_group=reader.boolean("partOfLifeGroup"),
        status=reader.enum("status", MemberStatus),
        campus=reader.enum("campus", Campus),
        spm=reader.boolean("spm"),
        attending_service=reader.enum("attendingService", AttendingService),
        phone=reader.string("phone", "contactNumberMobile", "phone"),
        life_group_name=reader.string("lifeGroupName", "lifeGroupLeaderName", "lifeGroupName"),
        photo_markup=reader.string("photo"),
        contact_information=_contact(reader),
        employment_information=_employment(reader),
        marital_information=_marital(reader),
        discipleship_information=_discipleship(reader),
    )


# =============================================================================
# Seeker
# =============================================================================


def decode_seeker(payload: Any, required: Iterable[str] = ()) -> Seeker:
    """Decode one upstream seeker record.

    The lead sub-record exists when either its id or its status is present.

    Raises:
        RecordDecodeError: If the payload is not an object or a required
            field does not resolve
    """
    reader = FieldReader(RawRecord.parse(payload), required=required)

    lead_id = reader.string("leadIdText", "leadIdText", "leadId")
    lead_status = reader.enum("leadStatus", LeadStatus)
    names = _names(reader, "nameLocal", "nameLocal", "fullName")

    return Seeker(
        id=reader.string("id"),
        lead=(
            Lead(id=lead_id, status=lead_status)
            if lead_id is not None or lead_status is not None
            else None
        ),
        full_name=names["full_name"],
        first_name=names["first_name"],
        last_name=names["last_name"],
        email=reader.string("email", "emailAlt", "email"),
        phone=reader.string("contactNumberMobile"),
        date_of_birth=reader.timestamp("dateOfBirth"),
        age_group_raw=reader.string("age"),
        area=reader.string("area"),
        type_of_entry=reader.enum("typeOfEntry", TypeOfEntry),
        marital_status=reader.enum("maritalStatus", MaritalStatus),
        created_date=reader.timestamp("createdDate"),
    )


# =============================================================================
# Encoding
# =============================================================================


def _wire(value: Any) -> Any:
    if isinstance(value, Picklist):
        return value.to_wire()
    return value


def _put(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = _wire(value)


def encode_member(member: Member) -> Dict[str, Any]:
    """Encode a Member as a flat upstream record under canonical keys.

    None fields are omitted; cleared groups contribute nothing.
    """
    out: Dict[str, Any] = {}
    _put(out, "id", member.id)
    _put(out, "memberId", str(member.member_id) if member.member_id else None)
    _put(out, "createdDate", format_datetime(member.created_date))
    _put(out, "lastModifiedDate", format_datetime(member.last_modified_date))
    _put(out, "memberName", member.member_name)
    _put(out, "firstName", member.first_name)
    _put(out, "middleName", member.middle_name)
    _put(out, "lastName", member.last_name)
    _put(out, "gender", member.gender)
    _put(out, "dateOfBirth", format_date(member.date_of_birth))
    _put(out, "title", member.title)
    _put(out, "memberType", member.member_type)
    _put(out, "bloodGroup", member.blood_group)
    if member.preferred_languages:
        out["preferredLanguage"] = ";".join(lang.to_wire() for lang in member.preferred_languages)
    _put(out, "attendingCampus", member.attending_campus)
    _put(out, "serviceCampus", member.service_campus)
    _put(out, "partOfLifeGroup", member.part_of_life_group)
    _put(out, "status", member.status)
    _put(out, "campus", member.campus)
    _put(out, "spm", member.spm)
    _put(out, "attendingService", member.attending_service)
    _put(out, "lifeGroupLeaderName", member.life_group_name)
    _put(out, "photo", member.photo_markup)

    # The core phone and the contact phone share one upstream key.
    _put(out, "contactNumberMobile", member.phone)

    contact = member.contact_information
    if contact is not None:
        _put(out, "contactNumberMobile", contact.phone_number)
        _put(out, "email", contact.email)
        _put(out, "currentAddress", contact.address)
        _put(out, "area", contact.area)
        _put(out, "whatsappNo", contact.whatsapp_number)
        _put(out, "alternateNumber", contact.alternate_number)
        _put(out, "profession", contact.profession)
        _put(out, "location", contact.location)

    employment = member.employment_information
    if employment is not None:
        _put(out, "employmentStatus", employment.employment_status)
        _put(out, "nameOfTheOrganization", employment.name_of_the_organization)
        _put(out, "occupation", employment.occupation)
        _put(out, "sector", employment.sector)
        _put(out, "occupationSubCategory", employment.occupation_sub_category)

    marital = member.marital_information
    if marital is not None:
        _put(out, "martialStatus", marital.marital_status)
        _put(out, "weddingAnniversary", format_date(marital.wedding_anniversary))
        _put(out, "spouseName", marital.spouse_name)
        _put(out, "numberOfChildren", marital.number_of_children)

    discipleship = member.discipleship_information
    if discipleship is not None:
        _put(out, "bornAgainDateText", discipleship.born_again_date)
        if discipleship.water_baptism is not None:
            _put(out, "waterBaptismDateText", discipleship.water_baptism.date)
            _put(out, "waterBaptism", discipleship.water_baptism.received)
        if discipleship.prayer_course is not None:
            _put(out, "prayerCourse", discipleship.prayer_course.completed)
            _put(out, "prayerCourseDateText", discipleship.prayer_course.date)
        if discipleship.foundation_course is not None:
            _put(out, "foundationCourse", discipleship.foundation_course.completed)
        _put(out, "attendedLifeTransformationCamp", discipleship.attended_life_transformation_camp)
        _put(out, "holySpiritFiling", discipleship.holy_spirit_filling)
        _put(out, "missionary", discipleship.missionary)
        _put(out, "subscribedToYoutubeChannel", discipleship.subscribed_to_youtube_channel)
        _put(out, "subscribedToWhatsapp", discipleship.subscribed_to_whatsapp)
        if discipleship.serving is not None:
            _put(out, "involvedInMinistry", discipleship.serving.involved)
            _put(out, "primaryDepartment", discipleship.serving.primary_department)
            if discipleship.serving.service_campus is not None:
                out.setdefault("serviceCampus", discipleship.serving.service_campus)
            _put(out, "interestedToServe", discipleship.serving.interested)
        _put(out, "bibleCourse", discipleship.bible_course)

    return out


def encode_seeker(seeker: Seeker) -> Dict[str, Any]:
    """Encode a Seeker as a flat upstream record under canonical keys."""
    out: Dict[str, Any] = {}
    _put(out, "id", seeker.id)
    if seeker.lead is not None:
        _put(out, "leadIdText", seeker.lead.id)
        _put(out, "leadStatus", seeker.lead.status)
    _put(out, "nameLocal", seeker.full_name)
    _put(out, "email", seeker.email)
    _put(out, "contactNumberMobile", seeker.phone)
    _put(out, "dateOfBirth", format_datetime(seeker.date_of_birth))
    _put(out, "age", seeker.age_group_raw)
    _put(out, "area", seeker.area)
    _put(out, "typeOfEntry", seeker.type_of_entry)
    _put(out, "maritalStatus", seeker.marital_status)
    _put(out, "createdDate", format_datetime(seeker.created_date))
    return out
