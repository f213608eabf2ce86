from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionResponse(BaseModel):
    user_id: int
    username: str
    role: str
    dive_center_id: int
