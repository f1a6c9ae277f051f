"converts the `authors` of a bepress record into Author records"

from collections import OrderedDict
from . import models, extract
from .utils import first, last
import logging

LOG = logging.getLogger(__name__)


def flatten(localized_map):
    "{locale: [a, b]} => {locale: b}. a later value for the same locale replaces an earlier one"
    return OrderedDict((locale, last(values)) for locale, values in localized_map.items())


def placeholder_author(submission, publication, default_email, user_group=None):
    "an article without any author information is attributed to the journal itself"
    journal = submission.journal
    locale = journal.primary_locale
    return models.Author.objects.create(
        submission=submission,
        publication=publication,
        given_name={locale: journal.localized_name(locale)},
        family_name={locale: ""},
        email=default_email,
        seq=1,
        primary_contact=True,
        include_in_browse=True,
        user_group=user_group,
    )


def preferred_names(author_node, given, family, locale):
    """returns the author's preferred public names as {locale: name}.
    an explicit `preferredname` is used as-is. otherwise, if the author has a middle name or
    a suffix, the full name is assembled from its parts. otherwise there is no preferred name."""
    preferred = extract.localized(author_node, "preferredname", "preferrednames", locale)
    if preferred:
        return OrderedDict((loc, first(names)) for loc, names in preferred.items())

    middle = extract.localized(author_node, "mname", "mnames", locale)
    suffix = extract.localized(author_node, "suffix", "suffixes", locale)
    if not middle and not suffix:
        return OrderedDict()

    def part(localized_map, loc):
        return first(localized_map.get(loc)) or ""

    # given names are always present, at least in the primary locale
    result = OrderedDict()
    for loc in given:
        parts = [part(given, loc), part(middle, loc), part(family, loc), part(suffix, loc)]
        result[loc] = " ".join(p for p in parts if p).strip()
    return result


def author_from_node(author_node, index, submission, publication, default_email, user_group=None):
    "creates an Author from an `author` element. `index` is the 0-based position of the author"
    journal = submission.journal
    locale = journal.primary_locale

    given = extract.localized(author_node, "fname", "fnames", locale)
    family = extract.localized(author_node, "lname", "lnames", locale)

    # a lone name may appear as a family name. given names are required, family names are not
    if not given and family:
        given, family = family, OrderedDict()

    if not given:
        given = OrderedDict([(locale, [journal.localized_name(locale)])])
    if not family:
        family = OrderedDict([(locale, [""])])

    affiliation = flatten(extract.localized(author_node, "institution", "institutions", locale))

    author = models.Author.objects.create(
        submission=submission,
        publication=publication,
        given_name=flatten(given),
        family_name=flatten(family),
        preferred_public_name=preferred_names(author_node, given, family, locale),
        affiliation=affiliation or {locale: ""},
        email=extract.child_value(author_node, "email") or default_email,
        seq=index + 1,
        primary_contact=index == 0,
        include_in_browse=True,
        user_group=user_group,
    )
    LOG.debug("created Author %r for %s", author, submission)
    return author


def map_authors(document, submission, publication, default_email, user_group=None):
    """creates an Author for each `author` in the record's `authors`, in document order.
    returns the list of created authors"""
    authors_node = extract.child(document, "authors")
    author_nodes = [] if authors_node is None else authors_node.findall("author")
    if not author_nodes:
        LOG.info("no authors found, attributing %s to the journal", submission)
        return [placeholder_author(submission, publication, default_email, user_group)]

    return [
        author_from_node(node, index, submission, publication, default_email, user_group)
        for index, node in enumerate(author_nodes)
    ]
