from pydantic import BaseModel, EmailStr, Field, AliasChoices, field_validator
from typing import List, Optional
from models.user import Role

class RoleResponse(BaseModel):
    role: Role
    object_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("object_id", "objectId"),
        serialization_alias="objectId",
    )

    class Config:
        from_attributes = True

class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=1)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator('name', 'password')
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('must not be blank')
        return v

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    roles: List[RoleResponse] = []

    class Config:
        from_attributes = True

class AuthResponse(BaseModel):
    user: UserResponse
    token: str

class MessageResponse(BaseModel):
    message: str
