import mimetypes
import os
import uuid
from django.core.files import File
from django.core.files.storage import default_storage
from . import models
import logging

LOG = logging.getLogger(__name__)


def submission_dir(submission):
    return "journals/%s/articles/%s" % (submission.journal_id, submission.pk)


def unique_key(submission, source_path):
    "a new storage key for a file belonging to `submission`. the key keeps the file's extension"
    ext = os.path.splitext(source_path)[1].lower()
    return "%s/%s%s" % (submission_dir(submission), uuid.uuid4().hex, ext)


class FileStore:
    "copies files into a Django storage backend and keeps a record of them"

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def add(self, source_path, key):
        "copies the file at `source_path` into storage as `key`. returns the id of the stored file"
        with open(source_path, "rb") as fh:
            path = self.storage.save(key, File(fh, name=os.path.basename(source_path)))
        mimetype, _ = mimetypes.guess_type(source_path)
        try:
            stored = models.StoredFile.objects.create(
                path=path, mimetype=mimetype or "application/octet-stream"
            )
        except Exception:
            # nothing refers to the file without its record
            self.storage.delete(path)
            raise
        LOG.info("stored %r as %r", source_path, path)
        return stored.pk

    def delete(self, file_id):
        stored = models.StoredFile.objects.get(pk=file_id)
        self.storage.delete(stored.path)
        stored.delete()
        LOG.info("deleted stored file %r", stored.path)
