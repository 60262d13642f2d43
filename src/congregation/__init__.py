"""congregation-kit: typed member and seeker records from a church CRM."""

from congregation.client import CongregationClient, SeekerFilters
from congregation.pagination import PaginationWalker

__all__ = ["CongregationClient", "SeekerFilters", "PaginationWalker"]
