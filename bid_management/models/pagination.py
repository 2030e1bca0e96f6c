"""Paginated response envelope."""

from typing import List

from .base import ApiModel
from .tender import Tender


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TenderPage(ApiModel):
    data: List[Tender]
    pagination: Pagination
