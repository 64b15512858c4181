from pydantic import BaseModel, EmailStr

# Login steps take the email as typed; a malformed address is just an unknown
# account and gets the same answer as one
class LoginRequest(BaseModel):
    email: str
    password: str

class VerifyOTPRequest(BaseModel):
    email: str
    otp: str

class CreateAdminRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
