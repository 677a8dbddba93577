"""
Request schemas.

Each write endpoint validates its body against one of these models. Fields
are snake_case with camelCase aliases accepted; unknown fields are dropped,
so server-owned values (total_amount, homemaker_id, recipient_id, role on
profile updates...) can never be smuggled in by a client.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from hustlx.errors import ValidationError
from hustlx.models.listing import LISTING_STATUSES, LISTING_TYPES
from hustlx.models.media import MEDIA_PURPOSES
from hustlx.models.order import ORDER_STATUSES
from hustlx.validators import normalize_email, validate_email, validate_username

ListingType = Literal[LISTING_TYPES]
ListingStatus = Literal[LISTING_STATUSES]
OrderStatus = Literal[ORDER_STATUSES]
MediaPurpose = Literal[MEDIA_PURPOSES]


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegistrationBase(RequestModel):
    email: str
    username: str
    password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=255)
    profile_picture: Optional[str] = None

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        if not validate_email(value):
            raise ValueError('Invalid email address')
        return normalize_email(value)

    @field_validator('username')
    @classmethod
    def check_username(cls, value):
        if not validate_username(value):
            raise ValueError('Username must be 3-50 letters, digits, dots, dashes or underscores')
        return value


class HomemakerRegistration(RegistrationBase):
    role: Literal['homemaker']
    bio: Optional[str] = None


class CustomerRegistration(RegistrationBase):
    role: Literal['customer']


class MentorRegistration(RegistrationBase):
    role: Literal['mentor']
    specialty: str = Field(min_length=1, max_length=255)
    bio: Optional[str] = None


Registration = Annotated[
    Union[HomemakerRegistration, CustomerRegistration, MentorRegistration],
    Field(discriminator='role'),
]
RegistrationAdapter = TypeAdapter(Registration)


class LoginRequest(RequestModel):
    identifier: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode='after')
    def check_identifier(self):
        if not (self.identifier or self.email or self.username):
            raise ValueError('Email or username is required')
        return self

    @property
    def login_identifier(self):
        return self.identifier or self.email or self.username


class ProfileUpdate(RequestModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    profile_picture: Optional[str] = None
    specialty: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------
class SkillCreate(RequestModel):
    category: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    level: int = Field(default=1, ge=1, le=5)


class SkillUpdate(RequestModel):
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    level: Optional[int] = Field(default=None, ge=1, le=5)


class SkillVerifyRequest(RequestModel):
    skill_id: int
    answers: Union[Dict[str, Any], List[Any]]

    @field_validator('answers')
    @classmethod
    def check_answers(cls, value):
        if not value:
            raise ValueError('Answers are required')
        return value


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------
class ListingCreate(RequestModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price: int = Field(ge=0)
    type: ListingType
    category: str = Field(min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    is_featured: bool = False
    location: Optional[str] = Field(default=None, max_length=255)
    status: ListingStatus = 'active'


class ListingUpdate(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    type: Optional[ListingType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    location: Optional[str] = Field(default=None, max_length=255)
    status: Optional[ListingStatus] = None

    @model_validator(mode='after')
    def check_not_null(self):
        # Explicit nulls are only meaningful for the optional columns
        for name in ('title', 'description', 'price', 'type', 'category', 'tags', 'images', 'is_featured', 'status'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be null')
        return self


class ListingSearch(RequestModel):
    query: Optional[str] = None
    category: Optional[str] = None
    type: Optional[ListingType] = None
    min_price: Optional[int] = Field(default=None, ge=0)
    max_price: Optional[int] = Field(default=None, ge=0)
    tags: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderCreate(RequestModel):
    listing_id: int
    quantity: int = Field(default=1, ge=1, le=10000)
    notes: Optional[str] = None
    delivery_date: Optional[datetime] = None


class OrderStatusUpdate(RequestModel):
    status: OrderStatus


class PaymentConfirmation(RequestModel):
    payment_id: str = Field(min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Reviews & media
# ---------------------------------------------------------------------------
class ReviewCreate(RequestModel):
    listing_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class UploadForm(RequestModel):
    purpose: MediaPurpose
    skill_id: Optional[int] = None
    listing_id: Optional[int] = None

    @model_validator(mode='after')
    def check_single_parent(self):
        if self.skill_id is not None and self.listing_id is not None:
            raise ValueError('Media can be attached to a skill or a listing, not both')
        return self


# ---------------------------------------------------------------------------
# AI
# ---------------------------------------------------------------------------
class SkillSuggestionRequest(RequestModel):
    interests: List[str] = Field(default_factory=list)
    experience: List[str] = Field(default_factory=list)
    hobbies: List[str] = Field(default_factory=list)
    personality_traits: List[str] = Field(default_factory=list)
    demographics: Optional[str] = None


class BusinessSuggestionRequest(RequestModel):
    skills: List[str] = Field(default_factory=list)
    current_services: List[str] = Field(default_factory=list)
    average_price: float = Field(default=0, ge=0)
    sales_data: Optional[Any] = None


class AssessmentSubmission(RequestModel):
    responses: Dict[str, Any]

    @field_validator('responses')
    @classmethod
    def check_responses(cls, value):
        if not value:
            raise ValueError('Responses are required')
        return value


class MentorRecommendationRequest(RequestModel):
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)


def validate_payload(schema, data):
    """Validate a mapping against a model or TypeAdapter, raising ValidationError"""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(data)
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError.from_pydantic(e)


def parse_body(schema):
    """Validate the JSON body of the current request"""
    from flask import request

    return validate_payload(schema, request.get_json(silent=True))
