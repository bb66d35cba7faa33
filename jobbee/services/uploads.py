# jobbee/services/uploads.py
import logging
import os
from typing import Iterable

from jobbee.config import Config
from jobbee.errors import ErrorHandler

logger = logging.getLogger(__name__)

SUPPORTED_RESUME_EXTENSIONS = ('.docx', '.pdf')


class ResumeStorage:
    """Validates, names and stores uploaded resumes on local disk."""

    def __init__(self, upload_path: str = None, max_file_size: int = None):
        self.upload_path = upload_path or Config.UPLOAD_PATH
        self.max_file_size = max_file_size or Config.MAX_FILE_SIZE

    def validate(self, filename: str, size: int):
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in SUPPORTED_RESUME_EXTENSIONS:
            raise ErrorHandler('Please upload document file.', 400)
        if size > self.max_file_size:
            mb = self.max_file_size / (1024 * 1024)
            raise ErrorHandler(f'Please upload file less than {mb:g}MB.', 400)

    @staticmethod
    def resume_name(user_name: str, job_id: str, filename: str) -> str:
        ext = os.path.splitext(filename)[1].lower()
        return f"{user_name.strip().replace(' ', '_')}_{job_id}{ext}"

    def save(self, name: str, content: bytes) -> str:
        os.makedirs(self.upload_path, exist_ok=True)
        path = os.path.join(self.upload_path, os.path.basename(name))
        try:
            with open(path, 'wb') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Resume upload failed for {name}: {e}")
            raise ErrorHandler('Resume upload failed.', 500)
        return path

    def delete(self, names: Iterable[str]):
        for name in names:
            if not name:
                continue
            path = os.path.join(self.upload_path, os.path.basename(name))
            try:
                os.unlink(path)
            except FileNotFoundError:
                logger.warning(f"Resume already removed: {path}")
            except OSError as e:
                logger.error(f"Failed to delete resume {path}: {e}")
