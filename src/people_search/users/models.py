"""User profile data models."""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict
from pydantic import BaseModel, Field, validator


class UserRelevancy(str, Enum):
    """How well a profile answers a search query, as judged by the LLM."""
    HIGH = "HIGH"
    MID = "MID"
    LOW = "LOW"


@dataclass
class UserProfile:
    """
    A person profile as stored and searched by the system.

    Every descriptive field is optional because profiles come from sources
    of very different richness (free text, CRM records, spreadsheets).

    Attributes:
        name: Full name
        email: Email address
        role: Job title or professional role
        location: City, country or region
        skills: Technical skills, languages and tools
        previous_companies: Companies the person worked at
        interests: Personal or professional interests
        experience: Summary of professional experience
        description: Original free-text description, if any
        id: Identifier assigned by the source system
        uuid: Identifier assigned when the profile is saved
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[List[str]] = None
    previous_companies: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    experience: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None
    uuid: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_metadata(self) -> Dict[str, Any]:
        """Metadata stored next to the profile embedding."""
        return {
            "uuid": self.uuid,
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "location": self.location,
            "skills": self.skills,
            "previous_companies": self.previous_companies,
            "interests": self.interests,
            "experience": self.experience,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        for key in ("created_at", "updated_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


class ExtractedUser(BaseModel):
    """Schema the language model fills when extracting a profile from text."""

    id: Optional[Union[int, str]] = Field(None, description="Identifier mentioned in the text, if any")
    name: Optional[str] = Field(None, description="The person's full name")
    email: Optional[str] = Field(None, description="The person's email address")
    role: Optional[str] = Field(None, description="Their job title or professional role")
    location: Optional[str] = Field(None, description="City, country, or region where they're based")
    skills: Optional[List[str]] = Field(
        None, description="Technical skills, programming languages, tools they know"
    )
    previous_companies: Optional[List[str]] = Field(
        None, description="Companies they previously worked at"
    )
    interests: Optional[List[str]] = Field(
        None, description="Personal interests, hobbies, or professional preferences"
    )
    experience: Optional[str] = Field(None, description="Summary of their professional experience")

    @validator('name', 'email', 'role', 'location', 'experience')
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Models sometimes answer "" or "null" instead of null."""
        if v is None:
            return None
        v = v.strip()
        if not v or v.lower() == "null":
            return None
        return v

    def to_user_profile(self) -> UserProfile:
        """Convert to UserProfile dataclass."""
        return UserProfile(
            id=str(self.id) if self.id is not None else None,
            name=self.name,
            email=self.email,
            role=self.role,
            location=self.location,
            skills=self.skills,
            previous_companies=self.previous_companies,
            interests=self.interests,
            experience=self.experience,
        )


class RelevancyJudgment(BaseModel):
    """LLM verdict on whether a profile matches a query."""

    relevancy: UserRelevancy = Field(..., description="HIGH, MID or LOW")
    reason: Optional[str] = Field(None, description="One sentence justification")

    @validator('relevancy', pre=True)
    def normalize_relevancy(cls, v: Any) -> Any:
        """Accept "high", " Mid " and similar spellings."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


@dataclass
class PersonMatch:
    """
    A profile returned by a people search.

    Attributes:
        id: Stored profile identifier
        name: Full name ("Unknown" when missing)
        match_score: Vector similarity as a percentage (0-100)
        match_reason: LLM explanation of why the person matches
    """
    id: str
    name: str
    match_score: int
    match_reason: str
    email: Optional[str] = None
    location: Optional[str] = None
    role: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience: Optional[str] = None
    interests: List[str] = field(default_factory=list)
    previous_companies: List[str] = field(default_factory=list)
    description: str = ""

    def __post_init__(self) -> None:
        """Validate match."""
        if not 0 <= self.match_score <= 100:
            raise ValueError("Match score must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "location": self.location,
            "role": self.role,
            "skills": self.skills,
            "experience": self.experience,
            "interests": self.interests,
            "previous_companies": self.previous_companies,
            "description": self.description,
            "match_score": self.match_score,
            "match_reason": self.match_reason,
        }
