from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_ORDER_FIELDS = (
    "walletAddress",
    "name",
    "symbol",
    "supply",
    "decimals",
    "description",
    "imageLink",
)


class OrderSubmission(BaseModel):
    """Raw fields of a ``POST /save-order`` body. Nothing is required here;
    emptiness is checked by the order service so it can answer with 400."""

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: Optional[str] = Field(default=None, alias="walletAddress")
    name: Optional[str] = None
    symbol: Optional[str] = None
    supply: Optional[str] = None
    decimals: Optional[str] = None
    description: Optional[str] = None
    image_link: Optional[str] = Field(default=None, alias="imageLink")

    def missing_fields(self) -> List[str]:
        values = self.model_dump(by_alias=True)
        return [
            key
            for key in REQUIRED_ORDER_FIELDS
            if not (values.get(key) or "").strip()
        ]


class StoredUpload(BaseModel):
    filename: str
    content_type: str
    path: Path


class Order(BaseModel):
    """
    Token launch order as written to the document store.
    Collection: "orders"
    """

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(..., alias="walletAddress")
    name: str
    symbol: str
    supply: str
    decimals: str
    description: str
    image_path: str = Field(..., alias="imagePath", description="Image URL or stored file path")
    time: str = Field(..., description="ISO-8601 UTC timestamp set at insert")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)
