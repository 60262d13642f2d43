"""Typed member and seeker records.

These models are the stable shape every upstream payload variant decodes
into (see congregation.records.decoder). They are frozen: decoding builds
them once and projection returns modified copies.

A Member is a flat identity/demographic core plus four optional expansion
groups (contact, employment, marital, discipleship). A group is None when
the payload carried none of its fields; it is never a group of Nones.

Computed values (age, photo, anniversary math) are methods and properties
over stored fields and are recomputed on every access.
"""

from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from congregation.records import derive
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
    OccupationSubCategory,
    PreferredLanguage,
    PrimaryDepartment,
    Sector,
    ServiceCampus,
    SubscriptionStatus,
    TypeOfEntry,
)
from congregation.records.expand import MemberExpand
from congregation.records.fields import format_datetime
from congregation.records.ids import MemberID
from congregation.records.photo import MemberPhoto, parse_photo


class RecordModel(BaseModel):
    """Base for immutable record models."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Expansion groups
# =============================================================================


class ContactInformation(RecordModel):
    """How to reach a member."""

    phone_number: Optional[str] = Field(None, description="Primary mobile number")
    email: Optional[str] = None
    address: Optional[str] = Field(None, description="Current address")
    area: Optional[str] = None
    whatsapp_number: Optional[str] = None
    alternate_number: Optional[str] = None
    profession: Optional[str] = None
    location: Optional[str] = None


class EmploymentInformation(RecordModel):
    """Employment details.

    occupation_sub_category keeps whatever string the upstream sent; the
    picklist value and the inferred occupation are looked up on demand.
    """

    employment_status: Optional[EmploymentStatus] = None
    name_of_the_organization: Optional[str] = None
    occupation: Optional[Occupation] = None
    sector: Optional[Sector] = None
    occupation_sub_category: Optional[str] = None

    @property
    def occupation_sub_category_value(self) -> Optional[OccupationSubCategory]:
        return derive.lookup_sub_category(self.occupation_sub_category)

    @property
    def occupation_category(self) -> Optional[Occupation]:
        """The stated occupation, else one inferred from the subcategory."""
        return derive.infer_occupation(self.occupation, self.occupation_sub_category)


class MaritalInformation(RecordModel):
    marital_status: Optional[MaritalStatus] = None
    wedding_anniversary: Optional[date] = None
    spouse_name: Optional[str] = None
    number_of_children: Optional[int] = None

    @property
    def anniversary_info(self) -> Optional[derive.DateInfo]:
        return derive.date_info(self.wedding_anniversary)


class WaterBaptism(RecordModel):
    date: Optional[str] = Field(None, description="Baptism date as entered upstream")
    received: Optional[bool] = None


class PrayerCourse(RecordModel):
    completed: Optional[bool] = None
    date: Optional[str] = None


class FoundationCourse(RecordModel):
    completed: Optional[bool] = None


class ServingInformation(RecordModel):
    """Ministry service details."""

    involved: Optional[MinistryInvolvement] = None
    primary_department: Optional[PrimaryDepartment] = None
    service_campus: Optional[str] = Field(None, description="Free-text serving campus")
    interested: Optional[InterestedToServe] = None


class DiscipleshipInformation(RecordModel):
    """Spiritual journey milestones and ministry involvement."""

    born_again_date: Optional[str] = None
    water_baptism: Optional[WaterBaptism] = None
    prayer_course: Optional[PrayerCourse] = None
    foundation_course: Optional[FoundationCourse] = None
    attended_life_transformation_camp: Optional[bool] = None
    holy_spirit_filling: Optional[bool] = None
    missionary: Optional[MissionaryType] = None
    subscribed_to_youtube_channel: Optional[SubscriptionStatus] = None
    subscribed_to_whatsapp: Optional[SubscriptionStatus] = None
    serving: Optional[ServingInformation] = None
    bible_course: Optional[BibleCourse] = None


# =============================================================================
# Member
# =============================================================================


class Member(RecordModel):
    """A church member record."""

    EXPANSION_FIELDS: ClassVar[Dict[MemberExpand, str]] = {
        MemberExpand.CONTACT_INFORMATION: "contact_information",
        MemberExpand.EMPLOYMENT_INFORMATION: "employment_information",
        MemberExpand.MARTIAL_INFORMATION: "marital_information",
        MemberExpand.DISCIPLESHIP_INFORMATION: "discipleship_information",
    }

    # Identity
    id: Optional[str] = Field(None, description="Upstream record id")
    member_id: Optional[MemberID] = Field(None, description="Canonical TKT identifier")
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None

    # Names
    member_name: Optional[str] = Field(None, description="Full name")
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None

    # Demographics
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    title: Optional[MemberTitle] = None
    member_type: Optional[MemberType] = None
    blood_group: Optional[BloodGroup] = None
    preferred_languages: Optional[List[PreferredLanguage]] = None

    # Church life
    attending_campus: Optional[AttendingCampus] = None
    service_campus: Optional[ServiceCampus] = None
    part_of_life_group: Optional[bool] = None
    status: Optional[MemberStatus] = None
    campus: Optional[Campus] = None
    spm: Optional[bool] = None
    attending_service: Optional[AttendingService] = None
    phone: Optional[str] = None
    life_group_name: Optional[str] = None
    photo_markup: Optional[str] = Field(None, description="Raw rich-text photo field")

    # Expansion groups
    contact_information: Optional[ContactInformation] = None
    employment_information: Optional[EmploymentInformation] = None
    marital_information: Optional[MaritalInformation] = None
    discipleship_information: Optional[DiscipleshipInformation] = None

    @field_serializer("created_date", "last_modified_date")
    def serialize_datetime(self, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime the way the upstream API does."""
        return format_datetime(v)

    @property
    def photo(self) -> Optional[MemberPhoto]:
        return parse_photo(self.photo_markup)

    @property
    def birth_date_info(self) -> Optional[derive.DateInfo]:
        return derive.date_info(self.date_of_birth)

    @property
    def anniversary_info(self) -> Optional[derive.DateInfo]:
        if self.marital_information is None:
            return None
        return self.marital_information.anniversary_info

    def age(self, today: Optional[date] = None) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return derive.compute_age(self.date_of_birth, today)

    def group(self, name: Any) -> Optional[RecordModel]:
        """Access an expansion group by MemberExpand value or wire name."""
        return getattr(self, self.EXPANSION_FIELDS[MemberExpand.normalize(name)])


# =============================================================================
# Seeker
# =============================================================================


class Lead(RecordModel):
    """Lead tracking attached to a seeker."""

    id: Optional[str] = None
    status: Optional[LeadStatus] = None


class Seeker(RecordModel):
    """A seeker (visitor/lead) record."""

    EXPANSION_FIELDS: ClassVar[Dict[MemberExpand, str]] = {}

    id: Optional[str] = None
    lead: Optional[Lead] = None
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    age_group_raw: Optional[str] = Field(None, description="Age bucket as sent upstream")
    area: Optional[str] = None
    type_of_entry: Optional[TypeOfEntry] = None
    marital_status: Optional[MaritalStatus] = None
    created_date: Optional[datetime] = None

    @field_serializer("date_of_birth", "created_date")
    def serialize_datetime(self, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime the way the upstream API does."""
        return format_datetime(v)

    def age(self, today: Optional[date] = None) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return derive.compute_age(self.date_of_birth, today)

    def age_group(self, today: Optional[date] = None) -> Optional[str]:
        """Bucket from date of birth when known, else the upstream value."""
        age = self.age(today)
        if age is None:
            return self.age_group_raw
        return derive.age_group(age)
