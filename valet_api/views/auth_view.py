from fastapi import APIRouter, Depends
from sqlmodel import Session
from valet_api.controllers.auth_controller import AuthController
from valet_api.database import get_db
from valet_api.schemas.valet_schemas import SignupRequest, LoginRequest, UserResponse


router = APIRouter(prefix="/api/auth")

@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(signup_request: SignupRequest, db: Session = Depends(get_db)):
    return AuthController.signup(signup_request, db)

@router.post("/login", response_model=UserResponse)
def login(login_request: LoginRequest, db: Session = Depends(get_db)):
    return AuthController.login(login_request, db)
