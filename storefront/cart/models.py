from pydantic import AliasChoices, BaseModel, Field


class CartAddRequest(BaseModel):
    product_id: str = Field(validation_alias=AliasChoices("productId", "product_id"), min_length=1)
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(BaseModel):
    item_id: str = Field(validation_alias=AliasChoices("cartItemId", "itemId", "item_id"), min_length=1)
    # <= 0 supprime la ligne
    quantity: int
