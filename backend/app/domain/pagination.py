"""Offset pagination math shared by every dog listing."""

import math
from dataclasses import dataclass
from typing import Optional

from app.exceptions import ValidationError


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class PageInfo:
    current_page: int
    page_size: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


def page_request(page: int, page_size: int, max_page_size: Optional[int] = None) -> PageRequest:
    """
    Validate 1-based page coordinates.

    `max_page_size` is an optional cap; without it any positive size is served.
    """
    if page < 1:
        raise ValidationError("page must be at least 1", field="page")
    if page_size < 1:
        raise ValidationError("limit must be at least 1", field="limit")
    if max_page_size is not None and page_size > max_page_size:
        raise ValidationError(f"limit cannot exceed {max_page_size}", field="limit")
    return PageRequest(page=page, page_size=page_size)


def page_info(request: PageRequest, total_count: int) -> PageInfo:
    """
    Build pagination metadata. A page past the end is simply empty:
    has_next is False and has_prev stays True.
    """
    total_pages = math.ceil(total_count / request.page_size) if total_count else 0
    return PageInfo(
        current_page=request.page,
        page_size=request.page_size,
        total_pages=total_pages,
        total_count=total_count,
        has_next=request.page < total_pages,
        has_prev=request.page > 1,
    )
