import re
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_list_name(raw: str) -> str:
    """Make a wishlist title safe for use as a file name."""
    return _UNSAFE_NAME_CHARS.sub("_", raw.strip())


class WishlistItem(BaseModel):
    """One entry scraped from a wishlist page."""
    name: str = ""
    manufacturer: str = ""
    options: List[str] = Field(default_factory=list)
    product_link: str = ""
    external_link: str = ""

    def is_retained(self) -> bool:
        return bool(self.name or self.product_link or self.external_link)


class WishlistBatch(BaseModel):
    list_name: str
    source_url: str = ""
    items: List[WishlistItem] = Field(default_factory=list)

    @property
    def output_filename(self) -> str:
        return f"{self.list_name}.csv"


class UrlStatus(Enum):
    DONE = "DONE"
    FAILED = "FAILED"


class UrlOutcome(BaseModel):
    url: str
    status: UrlStatus
    output_path: Optional[str] = None
    item_count: int = 0
    error: Optional[str] = None


class PipelineReport(BaseModel):
    outcomes: List[UrlOutcome] = Field(default_factory=list)

    @property
    def failed(self) -> List[UrlOutcome]:
        return [o for o in self.outcomes if o.status == UrlStatus.FAILED]

    @property
    def succeeded(self) -> List[UrlOutcome]:
        return [o for o in self.outcomes if o.status == UrlStatus.DONE]
