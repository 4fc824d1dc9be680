# server/api/post.py

import logging
from fastapi import APIRouter, Cookie, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from api.auth import login_required_response
from config import Settings, get_settings
from core.security import decode_access_token
from core.utils import save_upload, remove_upload
from database import get_db
from models.post import Post


logger = logging.getLogger(__name__)

router = APIRouter()

# Number of posts returned by /postList
LATEST_POSTS = 3


@router.post("/postWrite")
def write_post(
    files: UploadFile | None = File(None),
    title: str | None = Form(None),
    summary: str | None = Form(None),
    content: str | None = Form(None),
    token: str | None = Cookie(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Creates a post authored by the user in the session cookie.
    The optional file is stored as the post's cover.
    """
    user_info = decode_access_token(settings, token)
    if user_info is None:
        return login_required_response(settings)

    saved_path = None
    try:
        if files is not None and files.filename:
            saved_path = save_upload(files, settings.upload_dir)

        post = Post(
            title=title,
            summary=summary,
            content=content,
            cover=f"uploads/{saved_path.name}" if saved_path else None,
            author=user_info["username"],
        )
        db.add(post)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("post write failed for %s", user_info.get("username"))
        if saved_path is not None:
            remove_upload(saved_path)
        return JSONResponse(status_code=500, content={"error": "게시글 작성 실패"})

    logger.info("post %s written by %s", post.id, post.author)
    return {"message": "게시글 작성 완료"}


@router.get("/postList")
def list_posts(db: Session = Depends(get_db)):
    try:
        posts = (
            db.query(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(LATEST_POSTS)
            .all()
        )
    except Exception:
        logger.exception("post list failed")
        return JSONResponse(status_code=500, content={"error": "게시글 목록 조회 실패"})

    return [post.to_dict() for post in posts]
