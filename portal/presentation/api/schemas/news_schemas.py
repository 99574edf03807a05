from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NewsCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    slug: Optional[str] = None
    excerpt: str = ""
    content: str = ""
    category: str = ""
    author: str = ""
    author_title: str = ""
    date: str = ""
    read_time: str = Field(default="", alias="readTime")
    image: str = ""
    featured: bool = False
    status: str = "draft"
    tags: List[str] = Field(default_factory=list)


class NewsUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    author: Optional[str] = None
    author_title: Optional[str] = None
    date: Optional[str] = None
    read_time: Optional[str] = Field(default=None, alias="readTime")
    image: Optional[str] = None
    featured: Optional[bool] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
