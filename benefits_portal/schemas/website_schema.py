from typing import List, Optional

from pydantic import Field

from benefits_portal.schemas.base_schema import CamelModel


class ImageResizeRequest(CamelModel):
    image: str = Field(min_length=1)
    max_width: Optional[int] = Field(default=None, gt=0, le=4000)
    max_height: Optional[int] = Field(default=None, gt=0, le=4000)
    quality: Optional[int] = Field(default=None, ge=1, le=100)


class ImageResizeResponse(CamelModel):
    image: str
    original_size_kb: int = Field(alias="originalSizeKB")
    resized_size_kb: int = Field(alias="resizedSizeKB")


class FaqEntry(CamelModel):
    question: str
    answer: str


class KeyContact(CamelModel):
    name: str
    role: str
    contact: str


class Resource(CamelModel):
    title: str
    description: str
    url: str


class BenefitDetail(CamelModel):
    id: str
    title: str
    subtitle: str = ""
    description: str = ""
    overview: str = ""
    eligibility: str = ""
    how_to_enroll: str = ""
    faq: List[FaqEntry] = []
    key_contacts: List[KeyContact] = []
    additional_resources: List[Resource] = []
    images: List[str] = []
