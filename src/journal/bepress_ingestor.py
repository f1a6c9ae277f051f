"""imports a single bepress article record, with its PDF files, into a journal.

an import finds or creates the issue and section of the article and then creates a
submission with one published publication, its authors, licensing, controlled vocabulary
and galleys. if any step fails the records created by this import are deleted again and
the errors are available from `BepressImporter.errors` and `BepressImporter.messages()`.

issues and sections are shared with other articles. an issue created by a failed import
is deleted, a section is never deleted."""

from functools import partial
from django.conf import settings
from . import models, codes, extract, logic, authors, submissions, galleys, events
from .files import FileStore
from .utils import StateError, RollbackError, first
import logging

LOG = logging.getLogger(__name__)

# import states, in order
INIT = "init"
ISSUE_RESOLVED = "issue-resolved"
SECTION_RESOLVED = "section-resolved"
SUBMISSION_BUILT = "submission-built"
AUTHORS_ASSIGNED = "authors-assigned"
FINALIZED = "finalized"
FAILED = "failed"


class UndoLog:
    "compensating actions for the records created during an import, undone in reverse order"

    def __init__(self):
        self.actions = []

    def add(self, label, fn):
        self.actions.append((label, fn))

    def __len__(self):
        return len(self.actions)

    def undo(self, params=None, log_context=None):
        """calls each action, most recent first.
        raises a RollbackError on the first action that fails. remaining actions are not attempted"""
        while self.actions:
            label, fn = self.actions.pop()
            try:
                fn()
                LOG.info("removed %s", label, extra=log_context)
            except Exception as err:
                LOG.exception("failed to remove %s", label, extra=log_context)
                item_params = dict(params or {})
                item_params["item"] = label
                raise RollbackError(
                    codes.ROLLBACK_FAILED,
                    "failed to remove %s: %s" % (label, err),
                    item_params,
                ) from err


class BepressImporter:
    def __init__(
        self,
        journal,
        user,
        editor,
        xml_article,
        pdf_paths,
        volume,
        number,
        default_email,
        genre_key=None,
        file_store=None,
        indexer=None,
        catalog=None,
    ):
        """`xml_article` is the parsed bepress record, an element with a `document` child.
        `pdf_paths` is a list of paths to the article's PDF files.
        `catalog` renders an error key and its parameters as a message, see `codes.message`."""
        self.journal = journal
        self.user = user
        self.editor = editor
        self.xml_article = getattr(xml_article, "getroot", lambda: xml_article)()
        self.pdf_paths = list(pdf_paths or [])
        self.volume = volume
        self.number = number
        self.default_email = default_email
        self.genre_key = genre_key or settings.IMPORT_GENRE_KEY
        self.file_store = file_store or FileStore()
        self.indexer = indexer or events.SearchIndexNotifier()
        self.catalog = catalog or codes.message

        self.state = INIT
        self.errors = []  # [(key, params), ...]
        self.undo_log = UndoLog()
        self.titles = {}
        self.title = None
        self.issue = None
        self.section = None
        self.submission = None
        self.publication = None

    @property
    def log_context(self):
        return {
            "journal": str(self.journal),
            "volume": self.volume,
            "number": self.number,
            "title": self.title,
            "state": self.state,
        }

    def ready(self):
        """all inputs required to attempt an import are present.
        volume and number are not checked here. a missing or non-numeric volume or number
        is reported as an error when the issue is resolved, rather than silently ignored"""
        return all(
            [
                self.journal,
                self.user,
                self.editor,
                self.xml_article is not None,
                self.pdf_paths,
                self.default_email,
            ]
        )

    def messages(self):
        "the errors of the last import, rendered by the catalog"
        return [self.catalog(key, params) for key, params in self.errors]

    def record_error(self, err):
        "keeps the error key and its parameters. the article title is always available to the catalog"
        params = {"title": self.title}
        params.update({k: v for k, v in err.params.items() if v is not None})
        self.errors.append((err.code, params))
        LOG.error(err.message, extra=self.log_context)

    #
    # rollback
    #

    def delete_stored_file(self, file_id):
        "deletes a stored file and the submission files using it"
        # stored files are protected while a submission file refers to them
        models.SubmissionFile.objects.filter(file_id=file_id).delete()
        self.file_store.delete(file_id)

    def track_stored_file(self, file_id):
        self.undo_log.add(
            "stored file %s" % file_id, partial(self.delete_stored_file, file_id)
        )

    def rollback(self):
        if not len(self.undo_log):
            return
        LOG.warning(
            "rolling back %s created records", len(self.undo_log), extra=self.log_context
        )
        try:
            self.undo_log.undo({"title": self.title}, self.log_context)
        except RollbackError as err:
            self.record_error(err)
            raise

    def fail(self, err):
        self.record_error(err)
        self.state = FAILED
        self.rollback()

    #
    # import
    #

    def resolve_issue(self, document):
        "the issue of the article, or None. a new issue is deleted again on rollback"
        try:
            issue, created = logic.resolve_issue(
                self.journal, self.volume, self.number, document, self.title
            )
        except StateError as err:
            # recorded here, the missing issue is what stops the import
            self.record_error(err)
            return None
        if created:
            self.undo_log.add("issue %s" % issue.pk, issue.delete)
        return issue

    def _import(self, document):
        journal = self.journal
        locale = journal.primary_locale

        self.issue = self.resolve_issue(document)
        if not self.issue:
            raise StateError(codes.MISSING_ISSUE, "no issue found or created")
        self.state = ISSUE_RESOLVED

        self.section, _ = logic.resolve_section(journal, document, locale)
        if not self.section:
            raise StateError(codes.MISSING_SECTION, "no section found or created")
        self.state = SECTION_RESOLVED

        self.submission, field_data = submissions.create_submission(
            journal, document, self.issue
        )
        self.undo_log.add("submission %s" % self.submission.pk, self.submission.delete)
        date_published = field_data["date_published"]
        self.publication = submissions.create_publication(
            self.submission,
            document,
            self.issue,
            self.section,
            self.titles,
            date_published,
        )
        self.state = SUBMISSION_BUILT

        authors.map_authors(
            document,
            self.submission,
            self.publication,
            self.default_email,
            logic.author_group(journal),
        )
        self.state = AUTHORS_ASSIGNED

        submissions.assign_editor(self.submission, self.editor)

        doi = submissions.find_doi(document, field_data)
        if doi:
            submissions.register_doi(self.publication, doi)

        submissions.apply_license(
            self.submission,
            self.publication,
            field_data.get("license_url"),
            date_published,
        )
        # controlled vocabulary goes in after the licensing update
        submissions.insert_vocabularies(self.publication, document)

        galleys.attach_galleys(
            document,
            self.pdf_paths,
            self.submission,
            self.publication,
            self.editor,
            self.genre_key,
            self.file_store,
            on_stored=self.track_stored_file,
        )

        self.indexer.submission_metadata_changed(self.submission)
        self.indexer.submission_files_changed(self.submission)
        self.indexer.submission_changes_finished()

        self.state = FINALIZED
        LOG.info("imported article as %s", self.submission, extra=self.log_context)
        return {"issue": self.issue, "section": self.section, "article": self.submission}

    def import_article(self):
        """imports the article. returns a map of the issue, section and submission ('article'),
        or None if the article could not be imported.
        a failure to undo a partial import raises a RollbackError."""
        if not self.ready():
            LOG.warning("missing required inputs, nothing imported", extra=self.log_context)
            return None

        document = extract.child(self.xml_article, "document")
        if document is None:
            LOG.warning("no 'document' in record, nothing imported", extra=self.log_context)
            return None

        self.titles = extract.article_titles(document, self.journal.primary_locale)
        self.title = first(self.titles.get(self.journal.primary_locale))
        LOG.info("importing article", extra=self.log_context)

        try:
            return self._import(document)

        except StateError as err:
            self.fail(err)
            return None

        except Exception:
            LOG.exception(
                "unhandled exception attempting to import article", extra=self.log_context
            )
            self.state = FAILED
            self.rollback()
            raise


def import_article(*args, **kwargs):
    """convenience. imports a single article.
    returns a pair of (result, errors), see `BepressImporter.import_article`"""
    importer = BepressImporter(*args, **kwargs)
    return importer.import_article(), importer.errors
