"""Picklist enums for member and seeker records.

Every upstream picklist is a str Enum whose value is the canonical wire
spelling. Normalization goes through a per-enum policy registered with the
@picklist decorator:

- strict (default): unmatched input raises EnumDecodeError
- lenient: unmatched or empty input maps to UNKNOWN, whose value is ""
- fold: optional key transform applied to both input and table
  (case-insensitive enums)
- aliases: extra accepted spellings for historical or typo variants

Input is always trimmed before matching. Encoding (Picklist.to_wire, or the
module-level encode) always returns the canonical value, so an alias never
survives a round trip. The method is not called encode because the enums
are str subclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from congregation.records.errors import EnumDecodeError

P = TypeVar("P", bound="Picklist")


@dataclass
class NormalizationPolicy:
    """How raw strings map onto one picklist enum."""

    lenient: bool = False
    fold: Optional[Callable[[str], str]] = None
    aliases: Dict[str, str] = field(default_factory=dict)

    def key(self, text: str) -> str:
        return self.fold(text) if self.fold else text


_POLICIES: Dict[type, NormalizationPolicy] = {}
_TABLES: Dict[type, Dict[str, Any]] = {}


def picklist(
    lenient: bool = False,
    fold: Optional[Callable[[str], str]] = None,
    aliases: Optional[Dict[str, str]] = None,
):
    """Register the normalization policy for a Picklist subclass.

    Args:
        lenient: Map unknown values to UNKNOWN instead of raising
        fold: Key transform for case-insensitive matching
        aliases: Accepted spelling -> canonical value
    """

    def register(cls):
        if lenient and "UNKNOWN" not in cls.__members__:
            raise TypeError(f"Lenient picklist {cls.__name__} needs an UNKNOWN member")
        _POLICIES[cls] = NormalizationPolicy(lenient=lenient, fold=fold, aliases=aliases or {})
        return cls

    return register


def _table(cls: type) -> Dict[str, Any]:
    """Build (once) the accepted-spelling lookup for an enum."""
    table = _TABLES.get(cls)
    if table is None:
        policy = _POLICIES.get(cls, NormalizationPolicy())
        table = {policy.key(member.value): member for member in cls}
        for alias, canonical in policy.aliases.items():
            table[policy.key(alias)] = cls(canonical)
        _TABLES[cls] = table
    return table


class Picklist(str, Enum):
    """Base class for upstream picklist values."""

    @classmethod
    def normalize(cls: Type[P], raw: Any) -> P:
        """Map a raw upstream value to an enum member.

        Args:
            raw: Upstream value (usually a string)

        Returns:
            The matching member, or UNKNOWN for lenient enums

        Raises:
            EnumDecodeError: If a strict enum has no matching spelling
        """
        if isinstance(raw, cls):
            return raw
        policy = _POLICIES.get(cls, NormalizationPolicy())
        if isinstance(raw, str):
            member = _table(cls).get(policy.key(raw.strip()))
            if member is not None:
                return member
        if policy.lenient:
            return cls["UNKNOWN"]
        raise EnumDecodeError(cls.__name__, raw)

    @classmethod
    def is_lenient(cls) -> bool:
        return _POLICIES.get(cls, NormalizationPolicy()).lenient

    def to_wire(self) -> str:
        """Canonical wire spelling."""
        return self.value


def normalize(enum_cls: Type[P], raw: Any) -> P:
    """Normalize a raw value against any picklist enum."""
    return enum_cls.normalize(raw)


def encode(value: Picklist) -> str:
    """Encode a picklist member to its canonical spelling."""
    return value.to_wire()


def _fold_campus(text: str) -> str:
    return text.lower().replace(" ", "")


# =============================================================================
# Member core
# =============================================================================


@picklist()
class MemberTitle(Picklist):
    """Salutation on a member record."""

    DR = "Dr. (Doctor)"
    MR = "Mr."
    MRS = "Mrs."
    MS = "Ms."
    PROF = "Prof. (Professor)"
    REV = "Rev. (Reverend)"
    PS = "Ps. (Pastor)"


@picklist()
class MemberType(Picklist):
    """Membership classification."""

    TKT = "TKT"
    EFAM = "EFAM"
    SPM = "SPM"
    IOC_VILLAGES = "IOC (Villages)"
    CONFERENCE_EVENTS_ONLY = "Conference & Events only"
    TKT_TEEN_X_YOUTH = "TKT TeenXYouth"
    KINGS_KID = "Kings Kid"
    UAE = "UAE"


@picklist()
class BloodGroup(Picklist):
    A = "A"
    A_POSITIVE = "A Positive"
    A_NEGATIVE = "A Negative"
    B = "B"
    B_POSITIVE = "B Positive"
    B_NEGATIVE = "B Negative"
    O = "O"  # noqa: E741
    O_POSITIVE = "O Positive"
    O_NEGATIVE = "O Negative"
    AB = "AB"
    AB_POSITIVE = "AB Positive"
    AB_NEGATIVE = "AB Negative"
    NOT_SURE = "Not sure"


@picklist()
class PreferredLanguage(Picklist):
    ENGLISH = "English"
    TELUGU = "Telugu"
    HINDI = "Hindi"


@picklist(aliases={"West - Kukatpally": "West -Kukatpally"})
class AttendingCampus(Picklist):
    """Physical campus a member attends.

    The Kukatpally value is stored upstream without a space after the
    hyphen; both spellings are accepted.
    """

    EAST_LB_NAGAR = "East - LB Nagar"
    WEST_KUKATPALLY = "West -Kukatpally"
    WEST_HITECH_CITY = "West - HiTech City"
    CENTRAL_SECUNDERABAD = "Central - Secunderabad"


@picklist(aliases={"West - Kukatpally": "West -Kukatpally"})
class ServiceCampus(Picklist):
    """Campus where a member serves."""

    EAST_LB_NAGAR = "East - LB Nagar"
    WEST_KUKATPALLY = "West -Kukatpally"
    WEST_HITECH_CITY = "West - HiTech City"
    CENTRAL_SECUNDERABAD = "Central - Secunderabad"
    IOC = "IOC"
    NOT_APPLICABLE = "Not Applicable"


@picklist()
class MemberStatus(Picklist):
    REGULAR = "Regular"
    IRREGULAR = "Irregular"
    RELOCATED = "Relocated"
    LONG_TIME_ABSENTEE = "Long Time Absentee"
    DO_NOT_CALL = "Do not call"
    LEFT_THE_CHURCH = "Left the church"
    PROMOTED_TO_GLORY = "Promoted to Glory"
    ACTIVE = "Active"
    DO_NOT_CONTACT = "Do not contact"
    INACTIVE = "InActive"
    INACTIVE_DNC = "Inactive (DNC)"


@picklist(fold=_fold_campus)
class Campus(Picklist):
    """Campus grouping; matched ignoring case and spaces."""

    EAST_CAMPUS = "East Campus"
    WEST_CAMPUS = "West Campus"
    CAMPUS_ONE = "Campus One"
    CAMPUS_TWO = "Campus Two"
    CAMPUS_THREE = "Campus Three"
    CAMPUS_FOUR = "Campus Four"
    TEEN_X_YOUTH = "Teen X Youth"
    HITECH_CITY = "Hitech City"


@picklist(aliases={"Sunday Evening Service": "Sunday evening service"})
class AttendingService(Picklist):
    ONLINE = "Online"
    FIRST_SERVICE = "1st Service"
    SECOND_SERVICE = "2nd Service"
    FRIDAY_NIGHT_SERVICE = "Friday Night Service"
    SUNDAY_EVENING_SERVICE = "Sunday evening service"
    FRIDAY_SUNDAY_FIRST_SERVICE = "Friday & Sunday 1st service"
    FRIDAY_SUNDAY_SECOND_SERVICE = "Friday & Sunday 2nd service"
    FRIDAY_SUNDAY_EVENING = "Friday & Sunday evening"
    FRIDAY_WEST_CAMPUS = "Friday & West Campus"
    ONLY_CONFERENCES_EVENT = "Only conferences/event"
    WEST_SUN_SERVICE = "West Sun Service"
    ALL_SERVICES_CENTRAL = "All Services - Central"


@picklist()
class Gender(Picklist):
    MALE = "Male"
    FEMALE = "Female"


@picklist()
class MaritalStatus(Picklist):
    SINGLE = "Single"
    MARRIED = "Married"
    WIDOWED = "Widowed"
    DIVORCED = "Divorced"
    SEPARATED = "Separated"
    OTHER = "other"


# =============================================================================
# Employment
# =============================================================================


@picklist()
class EmploymentStatus(Picklist):
    EMPLOYED = "Employed"
    EMPLOYED_AND_BUSINESS = "Employed & Business"
    UNEMPLOYED = "Unemployed"
    STUDENT = "Student"
    HOMEMAKER = "Homemaker"
    RETIRED = "Retired"
    SELF_EMPLOYED = "Self Employed"
    BUSINESS_PRINCIPAL = "Business/Principal"
    PRIVATE = "Private"
    GOVERNMENT = "Government"
    NOT_APPLICABLE = "Not Applicable"
    OTHER = "other"


@picklist()
class Sector(Picklist):
    GOVERNMENT_PUBLIC = "Government/Public"
    PRIVATE = "Private"
    BUSINESS = "Business"
    PRIVATE_AND_BUSINESS = "Private & Business"
    GOV_PUBLIC_AND_BUSINESS = "Gov/Public & Business"
    NOT_APPLICABLE = "Not Applicable"


@picklist()
class OccupationSubCategory(Picklist):
    """Job picklist under an occupation.

    Upstream data carries values outside this list, so records keep the raw
    string and look the enum up on demand.
    """

    DOCTOR = "Doctor"
    ARCHITECT = "Architect"
    TEACHER = "Teacher"
    DENTIST = "Dentist"
    ACCOUNTANT = "Accountant"
    CHEF = "Chef"
    ELECTRICIAN = "Electrician"
    TECHNICIAN = "Technician"
    SCIENTIST = "Scientist"
    ENGINEER = "Engineer"
    ARTIST = "Artist"
    LAWYER = "Lawyer"
    WAITING_STAFF = "Waiting staff"
    PHARMACIST = "Pharmacist"
    LABOURER = "Labourer"
    NURSE = "Nurse"
    GARDENER = "Gardener"
    MECHANIC = "Mechanic"
    LIBRARIAN = "Librarian"
    TAILOR = "Tailor"
    MAIL_CARRIER = "Mail carrier"
    POLICE_OFFICER = "Police officer"
    VETERINARIAN = "Veterinarian"
    DESIGNER = "Designer"
    PAINTER_AND_DECORATOR = "Painter and decorator"
    FIREFIGHTER = "Firefighter"
    BUTCHER = "Butcher"
    AVIATOR = "Aviator"
    BUSINESSPERSON = "Businessperson"
    FARMER = "Farmer"
    PLUMBER = "Plumber"
    SECRETARY = "Secretary"
    HAIRDRESSER = "Hairdresser"
    JOURNALIST = "Journalist"
    SOLDIER = "Soldier"
    BAKERS = "Bakers"
    LIFEGUARD = "Lifeguard"
    JUDGE = "Judge"
    ESTATE_AGENT = "Estate agent"
    DRIVER = "Driver"
    FISHERMAN = "Fisherman"
    POLITICIAN = "Politician"
    CASHIER = "Cashier"
    SOFTWARE_DEVELOPER = "Software Developer"
    OPTICIAN = "Optician"
    ACTOR = "Actor"
    CONSULTANT = "Consultant"
    TRANSLATOR = "Translator"
    MODEL = "Model"
    PHOTOGRAPHER = "Photographer"
    SALESPERSON = "Salesperson"
    PRINCIPAL = "Principal"
    LIFE_COACHES = "Life Coaches"
    BANKER = "Banker"
    TRAINER_COACH = "Trainer/Coach"
    OTHERS = "Others"
    PASTOR = "Pastor"
    PASTORAL_CARE_ASST = "Pastoral care asst."
    IT = "IT/ITES"
    EDUCATION = "Education"
    HUMAN_RESOURCE = "Human Resource"
    HEALTH_CARE = "Health Care"
    CORPORATE = "Corporate"
    MINISTRY = "Ministry"
    RB_DEPARTMENT = "R&B Department"
    ELECTRONICS = "Electronics"
    CONSTRUCTION = "Construction"
    NA = "NA"
    REAL_ESTATE = "Real Estate"
    HOMEMAKER = "Homemaker"
    POLICE = "Police"
    RECRUITER = "Recruiter"
    RETAIL_CLOTHES = "Retail- Clothes"
    MACHANIC = "Machanic"
    NOT_APPLICABLE = "Not Applicable"
    OTHER = "other"


@picklist()
class Occupation(Picklist):
    MINISTRY = "Ministry"
    HEALTH_CARE = "Health Care"
    DEFENCE = "Defence"
    POLICE = "Police"
    CORPORATE = "Corporate"
    EDUCATION = "Education"
    REAL_ESTATE = "Real Estate"
    MEDIA = "Media"
    IT = "IT/ITES"
    HUMAN_RESOURCE = "Human Resource"
    BANKING = "Banking"
    OTHERS = "Others"
    NOT_APPLICABLE = "Not Applicable"
    GOVERNMENT = "Government"
    OTHER = "other"

    @property
    def subcategories(self) -> List[OccupationSubCategory]:
        """Subcategories that belong under this occupation."""
        return OCCUPATION_SUBCATEGORIES.get(self, list(OccupationSubCategory))


_Sub = OccupationSubCategory

# Occupations not listed here (others, not applicable, other, government)
# accept every subcategory.
OCCUPATION_SUBCATEGORIES: Dict[Occupation, List[OccupationSubCategory]] = {
    Occupation.HEALTH_CARE: [
        _Sub.DOCTOR, _Sub.NURSE, _Sub.PHARMACIST, _Sub.DENTIST, _Sub.LABOURER, _Sub.OTHERS,
    ],
    Occupation.EDUCATION: [_Sub.TEACHER, _Sub.PRINCIPAL, _Sub.LIBRARIAN, _Sub.OTHERS],
    Occupation.IT: [_Sub.SOFTWARE_DEVELOPER, _Sub.TECHNICIAN, _Sub.ENGINEER, _Sub.OTHERS],
    Occupation.CORPORATE: [
        _Sub.ACCOUNTANT, _Sub.CONSULTANT, _Sub.BANKER, _Sub.HUMAN_RESOURCE, _Sub.OTHERS,
    ],
    Occupation.MEDIA: [
        _Sub.JOURNALIST, _Sub.PHOTOGRAPHER, _Sub.DESIGNER, _Sub.MODEL, _Sub.OTHERS,
    ],
    Occupation.REAL_ESTATE: [_Sub.ESTATE_AGENT, _Sub.OTHERS],
    Occupation.MINISTRY: [_Sub.PASTOR, _Sub.PASTORAL_CARE_ASST, _Sub.LIFE_COACHES, _Sub.OTHERS],
    Occupation.DEFENCE: [_Sub.SOLDIER, _Sub.POLICE_OFFICER, _Sub.OTHERS],
    Occupation.POLICE: [_Sub.POLICE_OFFICER, _Sub.OTHERS],
    Occupation.HUMAN_RESOURCE: [_Sub.RECRUITER, _Sub.TRAINER_COACH, _Sub.OTHERS],
    Occupation.BANKING: [_Sub.BANKER, _Sub.CASHIER, _Sub.OTHERS],
}


# =============================================================================
# Discipleship
# =============================================================================


@picklist()
class InterestedToServe(Picklist):
    YES = "Yes"
    NO = "No"
    YES_BUT_LIMITED_TIME = "Yes but limited time"


@picklist(lenient=True)
class MinistryInvolvement(Picklist):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    VOLUNTEERS = "Volunteers"
    NO = "No"
    UNKNOWN = ""


@picklist(lenient=True)
class SubscriptionStatus(Picklist):
    YES = "Yes"
    NO = "No"
    INFORMED = "Informed"
    UNKNOWN = ""


@picklist(lenient=True)
class MissionaryType(Picklist):
    LOCAL = "Local"
    NATIONAL = "National"
    INTERNATIONAL = "International"
    LOCAL_AND_NATIONAL = "Local & National"
    ALL_THREE = "All 3"
    NOT_APPLICABLE = "Not Applicable"
    UNKNOWN = ""


@picklist(lenient=True)
class PrimaryDepartment(Picklist):
    NOT_APPLICABLE = "Not Applicable"
    OFFICE_STAFF = "Office staff"
    CHURCH = "Church"
    YOUTH_MINISTRY = "Youth ministry"
    KINGS_KIDS = "King's kids"
    HER = "HER"
    MISSIONS = "Missions"
    PRAYER_TEAM = "Prayer team"
    LIMITLESS_FOUNDATION = "Limitless foundation"
    LIFE_GROUPS = "Life groups"
    GIRL_TRIBE = "Girl tribe"
    SPM = "SPM"
    LIFE_TRANSFORMATION_CAMP = "Life transformation camp"
    FOUNDATIONS_COURSE = "Foundations course"
    PRAYER_COURSE = "Prayer course"
    BIBLE_COLLEGE = "Bible college"
    LEADERSHIP_ACADEMY = "Leadership academy"
    WORSHIP_TEAM = "Worship team"
    TECH_TEAM = "Tech team"
    VIDEO_TEAM = "Video team"
    DREAM_TEAM = "Dream team"
    STAGE_OPERATIONS = "Stage operations"
    DRAMA = "Drama"
    DANCE = "Dance"
    AUDIO = "Audio"
    MEDIA_STORE = "Media store"
    COMMUNICATION = "Communication"
    SOCIAL_MEDIA = "Social Media"
    SETUP_BREAKDOWN = "Setup/Breakdown"
    E_CHURCH = "E-Church"
    PARKING = "Parking"
    USHER_HOST = "Usher/Host"
    HOSPITALITY = "Hospitality"
    SECURITY = "Security"
    OTHERS = "others"
    PHOTOGRAPHY = "Photography"
    WELCOME_TEAM = "Welcome Team"
    SALVATION_TEAM = "Salvation Team"
    UNKNOWN = ""


@picklist(lenient=True)
class BibleCourse(Picklist):
    MODULE_1 = "Module 1"
    MODULE_2 = "Module 2"
    MODULE_3 = "Module 3"
    MODULE_4 = "Module 4"
    MODULE_5 = "Module 5"
    MODULE_6 = "Module 6"
    NO = "No"
    UNKNOWN = ""


# =============================================================================
# Seekers
# =============================================================================


@picklist(lenient=True)
class LeadStatus(Picklist):
    """Follow-up stage of a seeker lead."""

    ATTEMPTED = "Attempted"
    FOLLOW_UP = "Follow-up"
    SECOND_FOLLOW_UP = "2nd Follow up"
    THIRD_FOLLOW_UP = "3rd Follow up"
    FOURTH_FOLLOW_UP = "4th Follow up"
    LOST = "Lost"
    CONVERTED = "Converted"
    DO_NOT_CONTACT = "Do not contact"
    UNKNOWN = ""


@picklist(lenient=True, fold=str.upper)
class TypeOfEntry(Picklist):
    """How a seeker first came in; matched case-insensitively."""

    COMING_BACK = "COMING BACK"
    SALVATION = "SALVATION"
    NEW_VISITOR = "NEW VISITOR"
    NEW_VISITOR_SALVATION = "NEW VISITOR SALVATION"
    UNKNOWN = ""
