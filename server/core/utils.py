# server/core/utils.py

import time
import random
import shutil
import logging
from pathlib import Path
from fastapi import UploadFile


logger = logging.getLogger(__name__)


def generate_filename(original_name: str | None) -> str:
    """
    Builds "<epoch millis>-<random>" plus the original extension,
    e.g. photo.png -> 1718000000000-482910374.png
    """
    unique_suffix = f"{int(time.time() * 1000)}-{round(random.random() * 1e9)}"
    return unique_suffix + Path(original_name or "").suffix


def save_upload(uploaded_file: UploadFile, upload_dir: Path) -> Path:
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / generate_filename(uploaded_file.filename)
    try:
        with path.open("wb") as buffer:
            shutil.copyfileobj(uploaded_file.file, buffer)
    except Exception:
        remove_upload(path)
        raise
    logger.info("saved upload %s as %s", uploaded_file.filename, path.name)
    return path


def remove_upload(path: Path):
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    else:
        logger.info("removed orphaned upload %s", path.name)
