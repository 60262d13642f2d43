"""Field expansion: requesting a subset of an entity's optional groups.

Callers name the groups they want (MemberExpand values, or their wire
strings). project() returns a copy of the entity with every other group
cleared. Core identity/demographic fields are never touched.

Each entity class declares its groups in an EXPANSION_FIELDS mapping of
MemberExpand -> attribute name; entities with no groups project to an equal
copy.
"""

from typing import Any, Iterable, Optional, Set, TypeVar, Union

from pydantic import BaseModel

from congregation.records.enums import Picklist, picklist

E = TypeVar("E", bound=BaseModel)


@picklist(aliases={"maritalInformation": "martialInformation"})
class MemberExpand(Picklist):
    """Expandable member groups, by their wire names.

    The marital group keeps the upstream spelling "martialInformation" on
    the wire.
    """

    EMPLOYMENT_INFORMATION = "employmentInformation"
    CONTACT_INFORMATION = "contactInformation"
    MARTIAL_INFORMATION = "martialInformation"
    DISCIPLESHIP_INFORMATION = "discipleshipInformation"


ExpansionRequest = Optional[Iterable[Union[MemberExpand, str]]]


def expansion_set(requested: ExpansionRequest) -> Optional[Set[MemberExpand]]:
    """Normalize a caller's expansion request.

    Returns:
        Set of MemberExpand, or None when no projection was requested

    Raises:
        EnumDecodeError: If a name is not a known group
    """
    if requested is None:
        return None
    if isinstance(requested, (str, MemberExpand)):
        requested = [requested]
    return {MemberExpand.normalize(name) for name in requested}


def expansion_param(requested: ExpansionRequest) -> Optional[str]:
    """Comma-joined wire value for an "expand" query parameter."""
    groups = expansion_set(requested)
    if not groups:
        return None
    return ",".join(group.to_wire() for group in MemberExpand if group in groups)


def project(entity: E, requested: ExpansionRequest) -> E:
    """Return a copy of entity with unrequested expansion groups cleared.

    Args:
        entity: Decoded entity (never mutated)
        requested: Groups to keep; None keeps everything

    Returns:
        New entity; identical to the input outside the cleared groups
    """
    groups = expansion_set(requested)
    if groups is None:
        return entity
    fields = getattr(type(entity), "EXPANSION_FIELDS", {})
    cleared = {
        attribute: None
        for group, attribute in fields.items()
        if group not in groups and getattr(entity, attribute) is not None
    }
    return entity.model_copy(update=cleared)


def present_groups(entity: Any) -> Set[MemberExpand]:
    """The expansion groups currently present on an entity."""
    fields = getattr(type(entity), "EXPANSION_FIELDS", {})
    return {group for group, attribute in fields.items() if getattr(entity, attribute) is not None}
