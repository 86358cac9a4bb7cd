from pydantic import BaseModel, EmailStr, Field, AliasChoices
from typing import List

class FranchiseAdminRef(BaseModel):
    email: EmailStr

class FranchiseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    admins: List[FranchiseAdminRef] = []

class FranchiseAdminResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True

class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1)

class StoreResponse(BaseModel):
    id: int
    name: str
    franchise_id: int = Field(
        ...,
        validation_alias=AliasChoices("franchise_id", "franchiseId"),
        serialization_alias="franchiseId",
    )

    class Config:
        from_attributes = True

class FranchiseResponse(BaseModel):
    id: int
    name: str
    admins: List[FranchiseAdminResponse] = []
    stores: List[StoreResponse] = []

    class Config:
        from_attributes = True

class FranchiseListResponse(BaseModel):
    franchises: List[FranchiseResponse]
    more: bool
