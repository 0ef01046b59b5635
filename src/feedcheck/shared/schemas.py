"""
Shared Schemas - Pydantic Models for Validation Results
Data models exchanged between the fetch, parse and validation layers.

These schemas provide:
- The closed error-category taxonomy
- The normalized feed representation produced by the XML parser
- The ValidationResult contract consumed by feed management code
- Batch summaries with per-category grouping

Every model serializes to the camelCase JSON shape used by downstream
consumers via ``to_json_dict()``; fields that are unset are omitted.
"""
from enum import Enum
from typing import Optional, List, Dict, Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ErrorCategory(str, Enum):
    """Failure categories reported by feed validation."""
    HTTP_STATUS = "HTTP_STATUS"
    TIMEOUT = "TIMEOUT"
    DNS_ERROR = "DNS_ERROR"
    SSL_ERROR = "SSL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    EMPTY_FEED = "EMPTY_FEED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Base schemas
class BaseSchema(BaseModel):
    """Base schema with camelCase aliases for JSON output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using JSON field names, dropping unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Feed schemas
class FeedEnclosure(BaseSchema):
    """Media attached to an RSS item."""
    url: Optional[str] = Field(None, description="Enclosure URL")
    type: Optional[str] = Field(None, description="MIME type")
    length: Optional[int] = Field(None, ge=0, description="Size in bytes")


class FeedItem(BaseSchema):
    """A single RSS item or Atom entry."""
    title: str = Field("", description="Item title")
    description: Optional[str] = Field(None, description="Item description or content")
    url: Optional[str] = Field(None, description="Item link")
    pub_date: Optional[str] = Field(None, description="Publication date as found in the feed")
    guid: Optional[str] = Field(None, description="Stable item identifier")
    author: Optional[str] = Field(None, description="Item author")
    categories: Optional[List[str]] = Field(None, description="Item categories")
    enclosure: Optional[FeedEnclosure] = Field(None, description="Attached media")


class FeedInfo(BaseSchema):
    """Normalized channel/feed information."""
    title: Optional[str] = Field(None, description="Feed title")
    description: str = Field("", description="Feed description")
    url: Optional[str] = Field(None, description="Site link of the feed")
    language: Optional[str] = Field(None, description="Declared feed language")
    items: Optional[List[FeedItem]] = Field(None, description="Feed items")

    @property
    def item_count(self) -> int:
        return len(self.items or [])


# Validation schemas
class ValidationResult(BaseSchema):
    """Outcome of validating one feed URL."""
    url: str = Field(..., description="The validated URL")
    is_valid: bool = Field(..., description="Whether the feed is usable")
    error_category: Optional[ErrorCategory] = Field(None, description="Failure category")
    error_detail: Optional[str] = Field(None, description="Human readable failure detail")
    status_code: Optional[int] = Field(None, description="HTTP status when a response was obtained")
    feed_info: Optional[FeedInfo] = Field(None, description="Parsed feed information")
    requires_special_handling: Optional[bool] = Field(None, description="Feed needs a dedicated handler")
    special_handler_type: Optional[str] = Field(None, description="Dedicated handler identifier")

    @model_validator(mode="after")
    def check_outcome_fields(self):
        if self.is_valid:
            if self.error_category is not None or self.error_detail is not None:
                raise ValueError("Valid results cannot carry error fields")
        else:
            if self.error_category is None or self.error_detail is None:
                raise ValueError("Invalid results require error_category and error_detail")
            if self.requires_special_handling is not None or self.special_handler_type is not None:
                raise ValueError("Invalid results cannot carry special handling metadata")
        return self

    @classmethod
    def failure(
        cls,
        url: str,
        category: ErrorCategory,
        detail: str,
        status_code: Optional[int] = None,
        feed_info: Optional[FeedInfo] = None,
    ) -> "ValidationResult":
        """Build an invalid result."""
        return cls(
            url=url,
            is_valid=False,
            error_category=category,
            error_detail=detail,
            status_code=status_code,
            feed_info=feed_info,
        )

    @classmethod
    def success(
        cls,
        url: str,
        feed_info: FeedInfo,
        status_code: Optional[int] = None,
        special_handler_type: Optional[str] = None,
    ) -> "ValidationResult":
        """Build a valid result, flagging special handling only when a handler applies."""
        return cls(
            url=url,
            is_valid=True,
            feed_info=feed_info,
            status_code=status_code,
            requires_special_handling=True if special_handler_type else None,
            special_handler_type=special_handler_type or None,
        )


class FeedValidationSummary(BaseSchema):
    """Aggregate outcome of a batch validation."""
    total_checked: int = Field(..., ge=0)
    valid_feeds: int = Field(..., ge=0)
    invalid_feeds: int = Field(..., ge=0)
    results: List[ValidationResult] = Field(default_factory=list)
    results_by_category: Dict[str, List[ValidationResult]] = Field(default_factory=dict)
    errors_by_category: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Iterable[ValidationResult]) -> "FeedValidationSummary":
        """
        Aggregate results, grouping invalid ones by category.

        Categories without failures are absent from both maps.
        """
        results = list(results)
        by_category: Dict[str, List[ValidationResult]] = {}

        for result in results:
            if result.is_valid or result.error_category is None:
                continue
            key = ErrorCategory(result.error_category).value
            by_category.setdefault(key, []).append(result)

        valid = sum(1 for r in results if r.is_valid)
        return cls(
            total_checked=len(results),
            valid_feeds=valid,
            invalid_feeds=len(results) - valid,
            results=results,
            results_by_category=by_category,
            errors_by_category={key: len(group) for key, group in by_category.items()},
        )
