# agamotto/schemas/tag.py
from pydantic import BaseModel, Field
from typing import List

# Request schemas
class TagCreate(BaseModel):
    """Schema for creating a tag (color is assigned automatically)"""
    name: str = Field(..., min_length=1, max_length=100)

# Response schemas
class TagResponse(BaseModel):
    """Schema for tag response"""
    name: str
    color: str
    date_created: int
    date_last_used: int
    total_instances: int
    
    class Config:
        from_attributes = True

class TagListResponse(BaseModel):
    """Schema for list of tags"""
    tags: List[TagResponse]
    total: int
    max_tags: int

class AvailableColorsResponse(BaseModel):
    colors: List[str]
