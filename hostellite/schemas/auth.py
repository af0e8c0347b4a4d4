from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    email: str  # plain str to allow .local and other dev domains
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default="", alias="_id")
    name: str = ""
    email: str = ""
    role: str = "user"


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str
    user: UserOut = Field(default_factory=UserOut)
