# server/api/auth.py

import logging
from fastapi import APIRouter, Body, Cookie, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from config import Settings, get_settings
from core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    decode_access_token,
    set_token_cookie,
)
from database import get_db
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_REQUIRED = "로그인 필요"
USER_EXISTS = "이미 존재하는 사용자입니다"


def login_required_response(settings: Settings) -> JSONResponse:
    """
    Soft error body returned for a missing or invalid session cookie.
    The status code is configurable (200 by default).
    """
    return JSONResponse(
        status_code=settings.auth_error_status,
        content={"error": LOGIN_REQUIRED}
    )


@router.post("/register", status_code=201)
def register(
    username: str = Body(...),
    password: str = Body(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user_exists = db.query(UserModel).filter(UserModel.username == username).first()
        if user_exists:
            return JSONResponse(status_code=400, content={"message": USER_EXISTS})

        new_user = UserModel(
            username=username,
            hashed_password=get_password_hash(settings, password)
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError:
        # lost a race against a concurrent registration of the same name
        db.rollback()
        return JSONResponse(status_code=400, content={"message": USER_EXISTS})
    except Exception:
        db.rollback()
        logger.exception("register failed for %s", username)
        return JSONResponse(status_code=500, content={"message": "서버 오류가 발생했습니다"})

    logger.info("registered user %s", new_user.username)
    return {"username": new_user.username, "_id": new_user.id}


@router.post("/login")
def login(
    response: Response,
    username: str = Body(...),
    password: str = Body(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = db.query(UserModel).filter(UserModel.username == username).first()
        if not user:
            return JSONResponse(status_code=401, content={"error": "사용자가 존재하지 않습니다"})

        if not verify_password(settings, password, user.hashed_password):
            return JSONResponse(status_code=401, content={"error": "비밀번호가 일치하지 않습니다"})

        payload = {"id": user.id, "username": user.username}
        token = create_access_token(settings, payload)
    except Exception:
        logger.exception("login failed for %s", username)
        return JSONResponse(status_code=500, content={"error": "서버에 연결할 수 없습니다"})

    set_token_cookie(response, settings, token)
    return payload


@router.get("/profile")
def profile(token: str | None = Cookie(None), settings: Settings = Depends(get_settings)):
    info = decode_access_token(settings, token)
    if info is None:
        return login_required_response(settings)
    return info


@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    set_token_cookie(response, settings, "", max_age=0)
    return {"message": "로그아웃 되었습니다"}
