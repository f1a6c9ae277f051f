"""creates the submission and its single publication from a bepress record.

the steps are called in order by the importer, see `bepress_ingestor._import`"""

from collections import OrderedDict
from django.core.exceptions import ValidationError
from django.core.validators import URLValidator
from et3 import render
from et3.extract import path as p
from . import models, codes, extract, logic
from .authors import flatten
from .utils import StateError, valid_date, iso1
import logging

LOG = logging.getLogger(__name__)


def exclude_if_empty(val):
    if not val:
        return render.EXCLUDE_ME
    return val


def valid_url(val):
    "returns the url if it's well formed, else None"
    if not val:
        return None
    try:
        URLValidator()(val.strip())
        return val.strip()
    except ValidationError:
        LOG.warning("discarding invalid license url %r", val)
        return None


# the named `field` values we care about in the record's `fields`
FIELDS = {
    "license_url": [p("distribution_license", None), valid_url, exclude_if_empty],
    "publication_date": [p("publication_date", None), exclude_if_empty],
    "doi": [p("doi", None), exclude_if_empty],
}

VOCABULARIES = [
    (models.KEYWORD, "keyword", "keywords"),
    (models.SUBJECT, "subject-area", "subject-areas"),
    (models.DISCIPLINE, "discipline", "disciplines"),
]


def fields(document):
    """returns the values of the record's `fields` described by `FIELDS`.
    fields without a value are ignored. a repeated field replaces an earlier one"""
    values = {}
    fields_node = extract.child(document, "fields")
    if fields_node is not None:
        for field in fields_node.findall("field"):
            value = extract.child_value(field, "value")
            if value is not None:
                values[field.get("name")] = value
    return render.render_item(FIELDS, values)


def pages(document):
    "'12-34' if the record has both a first and a last page"
    first_page = extract.child_value(document, "fpage")
    last_page = extract.child_value(document, "lpage")
    if first_page and last_page:
        return "%s-%s" % (first_page, last_page)


#
# 1. submission
#


def create_submission(journal, document, issue):
    """creates a published submission in the production stage.
    returns a pair of (submission, field data). the field data includes the effective
    `date_published`: the record's own publication date if valid, else the issue's"""
    field_data = fields(document)
    date_published = valid_date(field_data.get("publication_date")) or issue.date_published
    date_submitted = (
        valid_date(extract.child_value(document, "submission-date")) or date_published
    )
    field_data["date_published"] = date_published

    submission = models.Submission.objects.create(
        journal=journal,
        locale=journal.primary_locale,
        status=models.STATUS_PUBLISHED,
        stage=models.STAGE_PRODUCTION,
        submission_progress=0,
        date_submitted=date_submitted,
        date_last_activity=date_published,
    )
    LOG.info("created new Submission %s", submission.pk)
    return submission, field_data


#
# 2. publication
#


def create_publication(submission, document, issue, section, titles, date_published):
    "creates version 1 of the submission and makes it the current publication"
    locale = submission.locale
    if not titles:
        raise StateError(codes.MISSING_TITLE, "no title found in any locale")

    abstracts = extract.localized(document, "abstract", "abstracts", locale)
    publication = models.Publication.objects.create(
        submission=submission,
        section=section,
        issue=issue,
        version=1,
        status=models.STATUS_PUBLISHED,
        languages=[iso1(locale)],
        title=flatten(titles),
        abstract=flatten(abstracts),
        pages=pages(document),
        access_status=models.ACCESS_OPEN,
        seq=submission.pk,
        date_published=date_published,
    )

    submission.current_publication = publication
    submission.save(update_fields=["current_publication", "last_modified"])
    LOG.info("created new Publication %s", publication)
    return publication


#
# 4. editor
#


def assign_editor(submission, editor):
    "assigns `editor` to the submission through the first manager group on the submission's stage"
    group = logic.editor_group(submission.journal, submission.stage)
    if not group:
        raise StateError(
            codes.MISSING_EDITOR_GROUP,
            "no manager group assigned to stage %s" % submission.stage,
        )
    return models.StageAssignment.objects.create(
        submission=submission, user_group=group, user=editor
    )


#
# 5. doi
#


def find_doi(document, field_data):
    "the 'doi' field if present, else an `article-id` of type 'doi'"
    if field_data.get("doi"):
        return field_data["doi"]
    article_id = extract.child(document, "article-id")
    if article_id is not None and article_id.get("pub-id-type") == "doi":
        return extract.text(article_id)


def register_doi(publication, doi):
    publication.doi = doi
    publication.save(update_fields=["doi", "last_modified"])
    LOG.info("registered doi %r for %s", doi, publication)


#
# 6. licensing
#


def apply_license(submission, publication, license_url, date_published):
    """sets the copyright holder, copyright year and license of the publication.
    values from the record win. anything missing comes from the journal's defaults"""
    journal = submission.journal
    groups = models.UserGroup.objects.filter(
        pk__in=publication.author_set.values_list("user_group", flat=True)
    )
    holder = publication.author_string(groups)

    overlay = {}
    if holder:
        overlay[models.COPYRIGHT_HOLDER] = {journal.primary_locale: holder}
    if date_published:
        overlay[models.COPYRIGHT_YEAR] = date_published.year
    if license_url:
        overlay[models.LICENSE_URL] = license_url

    if not overlay.get(models.COPYRIGHT_HOLDER):
        overlay[models.COPYRIGHT_HOLDER] = journal.license_default(
            models.COPYRIGHT_HOLDER, publication
        )
    if (
        not overlay.get(models.COPYRIGHT_YEAR)
        and submission.status == models.STATUS_PUBLISHED
    ):
        overlay[models.COPYRIGHT_YEAR] = journal.license_default(
            models.COPYRIGHT_YEAR, publication
        )
    if not overlay.get(models.LICENSE_URL):
        overlay[models.LICENSE_URL] = journal.license_default(
            models.LICENSE_URL, publication
        )

    for key, val in overlay.items():
        setattr(publication, key, val)
    publication.save()
    return publication


#
# 7. controlled vocabulary
#


def insert_terms(publication, vocab, terms):
    "replaces the publication's `vocab` entries with the given {locale: [term, ...]}"
    models.ControlledVocabEntry.objects.filter(
        publication=publication, vocab=vocab
    ).delete()
    entries = [
        models.ControlledVocabEntry(
            publication=publication, vocab=vocab, locale=locale, seq=i + 1, term=term
        )
        for locale, term_list in terms.items()
        for i, term in enumerate(term_list)
    ]
    return models.ControlledVocabEntry.objects.bulk_create(entries)


def insert_vocabularies(publication, document):
    "keywords, subjects and disciplines. returns a map of {vocab: {locale: [term, ...]}}"
    locale = publication.submission.locale
    inserted = OrderedDict()
    for vocab, singular, plural in VOCABULARIES:
        terms = extract.split_terms(extract.localized(document, singular, plural, locale))
        insert_terms(publication, vocab, terms)
        inserted[vocab] = terms
    return inserted
