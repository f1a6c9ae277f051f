"""find-or-create logic for the entities shared between imported articles.

issues and sections are reused across imports. nothing here locks, two imports running
at the same time for the same volume and number may both create an issue."""

from django.conf import settings
from django.db import DatabaseError, transaction
from . import models, codes, extract
from .utils import StateError, date_parts, isint, todt
import logging

LOG = logging.getLogger(__name__)

DEFAULT_SECTION = "Articles"

#
# issues
#


def find_issue(journal, volume, number):
    "returns the earliest published issue for the given volume and number, if any"
    return (
        models.Issue.objects.filter(
            journal=journal, volume=volume, number=number, published=True
        )
        .order_by("id")
        .first()
    )


def issue_date(pub_date_node, title):
    """returns the publication date of a new issue from the article's `publication-date`.
    a year and a month are required, a missing day is the first of the month."""
    year, month, day = date_parts(extract.text(pub_date_node))
    params = {"title": title}
    if not year or not month:
        raise StateError(
            codes.MISSING_PUB_DATE,
            "publication date must have at least a year and a month",
            params,
        )
    day = day or 1
    try:
        return todt("%04d-%02d-%02d" % (year, month, day))
    except ValueError as err:
        raise StateError(codes.MISSING_PUB_DATE, str(err), params)


def resolve_issue(journal, volume, number, document, title=None):
    """returns a pair of (issue, created).
    an existing published issue is returned unchanged. otherwise a new published issue is
    created using the article's publication date. if the new issue can't be saved the
    issue is None."""
    params = {"title": title}
    if not volume or not number or not isint(volume) or not isint(number):
        raise StateError(
            codes.MISSING_VOLUME_NUMBER,
            "bad volume (%r) or number (%r)" % (volume, number),
            params,
        )
    volume, number = int(volume), int(number)

    issue = find_issue(journal, volume, number)
    if issue:
        LOG.info("Issue found, reusing %s", issue)
        return issue, False

    date_published = issue_date(extract.child(document, "publication-date"), title)
    issue = models.Issue(
        journal=journal,
        title={
            journal.primary_locale: "Vol. %s, No. %s (%s)"
            % (volume, number, date_published.year)
        },
        volume=volume,
        number=number,
        year=date_published.year,
        published=True,
        current=False,
        date_published=date_published,
        access_status=models.ACCESS_OPEN,
        show_volume=True,
        show_number=True,
        show_year=True,
        show_title=False,
    )
    try:
        with transaction.atomic():
            issue.save()
    except DatabaseError:
        LOG.exception("failed to create issue %s.%s", volume, number)
        return None, False
    LOG.info("created new Issue %s", issue)
    return issue, True


#
# sections
#


def section_name(document):
    """derives a section name from the article's `document-type` or `type`.
    'book_review' => 'Book Review'"""
    raw = extract.child_value(document, "document-type") or extract.child_value(
        document, "type"
    )
    if not raw:
        return DEFAULT_SECTION
    words = raw.replace("_", " ").lower().split(" ")
    name = " ".join(word[:1].upper() + word[1:] for word in words).strip()
    return name or DEFAULT_SECTION


def find_section(journal, name, locale):
    for section in models.Section.objects.filter(journal=journal):
        if models.localized(section.title, locale) == name:
            return section


def resolve_section(journal, document, locale):
    """returns a pair of (section, created).
    sections are matched on their title in `locale`. if a new section can't be saved the
    section is None"""
    name = section_name(document)
    section = find_section(journal, name, locale)
    if section:
        LOG.info("Section found, reusing %s", section)
        return section, False

    section = models.Section(
        journal=journal,
        title={locale: name},
        abbrev={locale: name[:3].upper()},
        policy={locale: settings.IMPORT_SECTION_POLICY},
        abstracts_not_required=True,
        meta_indexed=True,
        meta_reviewed=False,
        editor_restricted=True,
        hide_title=False,
        hide_author=False,
    )
    try:
        with transaction.atomic():
            section.save()
    except DatabaseError:
        LOG.exception("failed to create section %r", name)
        return None, False
    LOG.info("created new Section %s", section)
    return section, True


#
# groups and genres
#


def author_group(journal):
    "the first author group of the journal, if any"
    return models.UserGroup.objects.filter(
        journal=journal, role=models.ROLE_AUTHOR
    ).first()


def editor_group(journal, stage):
    "the first manager group of the journal that is assigned to the given workflow `stage`, if any"
    for group in models.UserGroup.objects.filter(
        journal=journal, role=models.ROLE_MANAGER
    ):
        if group.assigned_to_stage(stage):
            return group


def genre(journal, key):
    return models.Genre.objects.filter(journal=journal, entry_key=key.upper()).first()
