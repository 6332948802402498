from pydantic import BaseModel, Field


class NewsEventRequest(BaseModel):
    newsText: str = Field(..., min_length=1)


class NewsScanRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=200)
