from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict

from src.domain.exceptions import ApiError


class OwnerLink(BaseModel):
    """Flattened view of a repository owner, enough to render an avatar link."""
    model_config = ConfigDict(frozen=True)

    avatar_url: str = Field("", description="URL of the owner's avatar image")
    url: str = Field("", description="URL of the owner's profile page")


class DisplayRecord(BaseModel):
    """
    Immutable row of the top repositories table.
    A list of these is produced per fetch and replaced wholesale on the next one.
    """
    # Enforces immutability: once created, fields cannot be modified.
    model_config = ConfigDict(frozen=True)

    id: Union[int, str] = Field(..., description="Opaque identifier, unique per result set")
    rank: int = Field(..., ge=1, description="1-based position in the API response")
    name: str = Field("", description="Name of the repository")
    url: str = Field("", description="Link to the repository")
    owner: OwnerLink = Field(default_factory=OwnerLink)
    stars: int = Field(0, ge=0, description="Total number of stargazers")
    forks: int = Field(0, ge=0, description="Total number of forks")
    description: Optional[str] = Field(None, description="Repository description, may be empty")
    language: Optional[str] = Field(None, description="Primary language, absent when GitHub has none")


class SearchSuccess(BaseModel):
    """The search endpoint answered 200; ``items`` are the raw results in API order."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    items: List[Dict[str, Any]] = Field(default_factory=list)

    def unwrap(self) -> List[Dict[str, Any]]:
        return self.items


class SearchFailure(BaseModel):
    """The search endpoint answered with a non-200 status."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    status: int
    reason: str

    def unwrap(self) -> List[Dict[str, Any]]:
        raise ApiError(status=self.status, reason=self.reason)


SearchOutcome = Union[SearchSuccess, SearchFailure]
