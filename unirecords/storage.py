import logging
import os
import uuid

from flask import current_app

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
SEMINAR_EXTENSIONS = (".doc", ".docx", ".pdf")


def file_extension(filename):
    return os.path.splitext(filename or "")[1].lower()


def extension_allowed(filename, allowed):
    return file_extension(filename) in allowed


class BlobStorage:
    """Uploaded files on local disk, addressed by ``/uploads/<subfolder>/<name>``.

    Files are written outside the database transaction; a file whose owning
    row fails to save is left behind.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.config.setdefault("UPLOAD_FOLDER", os.path.join(app.instance_path, "uploads"))
        app.extensions["blob_storage"] = self

    @property
    def root(self):
        return current_app.config["UPLOAD_FOLDER"]

    def store(self, file, subfolder):
        folder = os.path.join(self.root, subfolder)
        os.makedirs(folder, exist_ok=True)
        name = f"{uuid.uuid4().hex}{file_extension(file.filename)}"
        file.save(os.path.join(folder, name))
        logger.info("Stored upload %s/%s", subfolder, name)
        return f"{URL_PREFIX}/{subfolder}/{name}"

    def full_path(self, path):
        if not path or not path.startswith(URL_PREFIX + "/"):
            return None
        relative = path[len(URL_PREFIX) + 1:]
        root = os.path.abspath(self.root)
        full = os.path.abspath(os.path.join(root, *relative.split("/")))
        if os.path.commonpath([root, full]) != root:
            return None
        return full

    def delete(self, path):
        if self.exists(path):
            os.remove(self.full_path(path))
            logger.info("Deleted upload %s", path)
            return True
        return False

    def exists(self, path):
        full = self.full_path(path)
        return bool(full) and os.path.isfile(full)
