"""Pydantic schemas for the generated image history."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, RootModel


class HistoryImage(BaseModel):
    """Metadata of one generated image."""

    id: int
    filename: str
    prompt: str
    aspectRatio: str
    width: int
    height: int
    createdAt: str


class GeneratorHistory(BaseModel):
    """Ordered images produced by one generator."""

    images: List[HistoryImage] = Field(default_factory=list)


class HistoryFile(RootModel[Dict[str, GeneratorHistory]]):
    """On-disk history: generator id -> generator history."""


class GetImageHistoryInput(BaseModel):
    """Input schema for get-image-history."""

    generatorId: Optional[str] = Field(
        None, description="Generator ID; all generators when omitted"
    )
