from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class CategoryIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class ProductIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list)
    category_id: str = Field(alias="categoryId", min_length=1)


class ProductUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId", min_length=1)


def to_row(model: BaseModel) -> dict:
    """Payload Supabase: champs renseignés uniquement, Decimal sérialisé en str."""
    data = model.model_dump(exclude_unset=True)
    if isinstance(data.get("price"), Decimal):
        data["price"] = str(data["price"])
    return data
