import os
import uuid
import pathlib
import logging

logger = logging.getLogger(__name__)


def generate_stored_filename(original_name: str) -> str:
    """Random internal file name that keeps the original extension."""
    file_extension = os.path.splitext(original_name or "")[1].lower()
    return f"{uuid.uuid4().hex}{file_extension}"


def save_file_bytes(content: bytes, original_name: str, upload_dir: str) -> str:
    """
    Writes uploaded bytes under upload_dir with a random name and returns that name.
    """
    if not original_name:
        raise ValueError("No file name provided.")

    pathlib.Path(upload_dir).mkdir(parents=True, exist_ok=True)
    filename = generate_stored_filename(original_name)
    file_path = os.path.join(upload_dir, filename)

    try:
        with open(file_path, "wb") as f:
            f.write(content)
        return filename
    except OSError as e:
        logger.error(f"Failed to save uploaded file {original_name} to {file_path}: {e}")
        raise


def stored_file_path(filename: str, upload_dir: str) -> str:
    return os.path.join(upload_dir, os.path.basename(filename))


def delete_stored_file(filename: str, upload_dir: str) -> bool:
    """
    Best-effort removal of a stored upload. Returns False when nothing was deleted.
    """
    if not filename:
        return False

    local_file_path = stored_file_path(filename, upload_dir)
    if not os.path.exists(local_file_path):
        logger.warning(f"Stored file not found, skipping delete: {local_file_path}")
        return False
    try:
        os.remove(local_file_path)
        logger.info(f"Deleted stored file: {local_file_path}")
        return True
    except OSError as e:
        logger.warning(f"Failed to delete stored file {local_file_path}: {e}")
        return False
