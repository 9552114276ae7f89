import logging
from fastapi import HTTPException
from sqlmodel import Session
from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import IntegrityError
from valet_api.schemas.valet_schemas import SignupRequest, LoginRequest, UserResponse
from werkzeug.security import generate_password_hash, check_password_hash
from valet_api.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

ROLES = ("user", "manager", "driver", "admin", "valet")


class AuthController:
    @staticmethod
    def signup(signup_request: SignupRequest, db: Session) -> UserResponse:
        role = signup_request.role or "user"
        if role not in ROLES:
            raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(ROLES)}.")

        try:
            query_user = text("SELECT id FROM users WHERE email = :email")
            existing_user = db.execute(query_user, {"email": signup_request.email}).fetchone()
            if existing_user:
                raise HTTPException(status_code=400, detail="User already exists.")

            query_insert_user = text('''
            INSERT INTO users (name, email, password, role, created_at)
            VALUES (:name, :email, :password, :role, :created_at)
            RETURNING id
                ''').bindparams(bindparam("created_at", type_=DateTime(timezone=True)))

            user_id = db.execute(query_insert_user, {
                "name": signup_request.name,
                "email": signup_request.email,
                "password": generate_password_hash(signup_request.password),
                "role": role,
                "created_at": utcnow(),
            }).fetchone()[0]

            db.commit()
            logger.info(f"Signed up user {user_id} with role {role}")
            return UserResponse(id=user_id, name=signup_request.name, email=signup_request.email, role=role)

        except HTTPException as http_exc:
            raise http_exc

        # LOST THE RACE AGAINST A CONCURRENT SIGNUP WITH THE SAME EMAIL
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=400, detail="User already exists.")

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to sign up user: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while signing up.")

    @staticmethod
    def login(login_request: LoginRequest, db: Session) -> UserResponse:
        try:
            query = text("SELECT id, name, email, password, role FROM users WHERE email = :email")
            user = db.execute(query, {"email": login_request.email}).fetchone()
        except Exception as e:
            logger.error(f"Failed to look up user for login: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while logging in.")

        if not user or not check_password_hash(user.password, login_request.password):
            logger.info("Rejected login attempt")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        return UserResponse(id=user.id, name=user.name, email=user.email, role=user.role)
