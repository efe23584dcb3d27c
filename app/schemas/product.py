from datetime import datetime
from uuid import UUID
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError
from typing import Annotated, Any, Dict, List, Literal, Optional

NAME_PATTERN = r"^[a-zA-Z0-9'&\-\s]+$"

Category = Literal["electronics", "clothing", "others"]
ColorName = Annotated[str, StringConstraints(min_length=2, max_length=20)]
VariantName = Annotated[str, StringConstraints(min_length=2, max_length=50)]
SizeName = Annotated[str, StringConstraints(min_length=1, max_length=10)]


def _has_max_decimals(value: float, places: int) -> bool:
    scaled = value * 10 ** places
    return abs(scaled - round(scaled)) < 1e-6


class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(min_length=3, max_length=100, pattern=NAME_PATTERN)
    brand: str = Field(min_length=2, max_length=50)
    seller: str = Field(min_length=2, max_length=50)
    product_description: str = Field(min_length=20, max_length=1000)
    price: float = Field(ge=0, le=999999.99)
    discount: Optional[float] = Field(default=None, ge=0, le=100)
    ratings: Optional[float] = Field(default=None, ge=0, le=5)
    cod_availability: bool
    total_stock_availability: int = Field(ge=0, le=999999)
    category: Category
    colors: List[ColorName] = Field(min_length=1)
    variants: List[VariantName] = Field(default_factory=list)
    size: List[SizeName] = Field(default_factory=list)
    is_active: bool = Field(alias="isActive")
    is_featured: bool = Field(default=False, alias="isFeatured")

    @field_validator("variants", "size", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("is_featured", mode="before")
    @classmethod
    def featured_default(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("price")
    @classmethod
    def price_precision(cls, value: float) -> float:
        if not _has_max_decimals(value, 2):
            raise PydanticCustomError("number_precision", "Price can only have up to 2 decimal places")
        return value

    @field_validator("ratings")
    @classmethod
    def ratings_precision(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not _has_max_decimals(value, 1):
            raise PydanticCustomError("number_precision", "Rating can only have 1 decimal place")
        return value

    @field_validator("colors")
    @classmethod
    def colors_unique(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise PydanticCustomError("array_unique", "Colors must be unique")
        return value

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: str
    brand: str
    seller: str
    product_description: str
    price: float
    discount: Optional[float] = None
    ratings: Optional[float] = None
    cod_availability: bool
    total_stock_availability: int
    category: Category
    colors: List[str]
    variants: List[str]
    size: List[str]
    is_active: bool = Field(validation_alias=AliasChoices("isActive", "is_active"), serialization_alias="isActive")
    is_featured: bool = Field(validation_alias=AliasChoices("isFeatured", "is_featured"), serialization_alias="isFeatured")
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"), serialization_alias="createdAt")
    updated_at: datetime = Field(validation_alias=AliasChoices("updatedAt", "updated_at"), serialization_alias="updatedAt")


class ProductResponse(BaseModel):
    success: bool = True
    data: ProductOut
    message: Optional[str] = None


class ProductListResponse(BaseModel):
    success: bool = True
    data: List[ProductOut]
    total: int
    page: int
    limit: int
    total_pages: int = Field(validation_alias=AliasChoices("totalPages", "total_pages"), serialization_alias="totalPages")


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class BulkCreateSuccess(BaseModel):
    id: UUID
    name: str
    message: str = "Created successfully"


class BulkItemError(BaseModel):
    field: str
    message: str


class BulkCreateFailure(BaseModel):
    index: int
    error: BulkItemError
    errors: Optional[Dict[str, List[str]]] = None


class BulkCreateResults(BaseModel):
    total: int
    success: List[BulkCreateSuccess] = Field(default_factory=list)
    failed: List[BulkCreateFailure] = Field(default_factory=list)


class BulkCreateResponse(BaseModel):
    success: bool = True
    message: str
    results: BulkCreateResults


class DeletedCount(BaseModel):
    deleted_count: int = Field(validation_alias=AliasChoices("deletedCount", "deleted_count"), serialization_alias="deletedCount")


class DeleteManyResponse(BaseModel):
    success: bool = True
    message: str
    data: DeletedCount


class RulesResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
