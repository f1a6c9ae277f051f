"binds the PDF files supplied with a bepress record to the publication as galleys"

import os
from . import models, codes, extract, logic
from .files import unique_key
from .utils import StateError, utcnow
import logging

LOG = logging.getLogger(__name__)

LABEL = "PDF"


def match_paths(galley_map, pdf_paths, primary_locale):
    """returns a list of (path, locale) pairs to attach.
    each galley identifier in `galley_map` selects the first path whose filename contains it.
    with no galley identifiers every path is attached in the primary locale."""
    if not galley_map:
        return [(path, primary_locale) for path in pdf_paths]

    pairs = []
    for locale, identifier_list in galley_map.items():
        for identifier in identifier_list:
            for path in pdf_paths:
                if identifier in os.path.basename(path):
                    pairs.append((path, locale))
                    break
            else:
                LOG.warning("no file found for galley %r", identifier)
    return pairs


def attach(path, locale, submission, publication, editor, genre_key, file_store, on_stored=None):
    """creates a galley for the file at `path` and links it to a newly stored submission file.
    `on_stored` is called with the id of the stored file as soon as the file is stored"""
    journal = submission.journal
    primary_locale = journal.primary_locale
    filename = os.path.basename(path)

    galley = models.Galley.objects.create(
        publication=publication,
        locale=locale or primary_locale,
        name={primary_locale: filename},
        seq=1,
        label=LABEL,
    )

    genre = logic.genre(journal, genre_key)
    if not genre:
        raise StateError(
            codes.MISSING_GENRE,
            "no genre %r for journal %s" % (genre_key, journal),
            {
                "genre": genre_key.upper(),
                "title": models.localized(publication.title, primary_locale),
            },
        )

    file_id = file_store.add(path, unique_key(submission, path))
    if on_stored:
        on_stored(file_id)
    now = utcnow()
    submission_file = models.SubmissionFile.objects.create(
        submission=submission,
        file_id=file_id,
        genre=genre,
        file_stage=models.FILE_STAGE_PROOF,
        uploader=editor,
        created_at=now,
        updated_at=now,
        assoc_type=models.ASSOC_REPRESENTATION,
        assoc_id=galley.pk,
        name={locale or primary_locale: filename},
    )

    galley.submission_file = submission_file
    galley.save(update_fields=["submission_file"])
    LOG.info("attached %r to %s as galley %s", filename, publication, galley.pk)
    return galley


def attach_galleys(
    document, pdf_paths, submission, publication, editor, genre_key, file_store, on_stored=None
):
    "attaches the record's PDF files to `publication`. returns the list of created galleys"
    primary_locale = submission.journal.primary_locale
    galley_map = extract.localized(document, "galley", "galleys", primary_locale)
    return [
        attach(path, locale, submission, publication, editor, genre_key, file_store, on_stored)
        for path, locale in match_paths(galley_map, pdf_paths, primary_locale)
    ]
