"""pulls localized metadata out of a bepress article record.

bepress records express most values in one of two ways, a single element:

    <title locale="en_US">A Study</title>

or a container of many:

    <titles>
        <title locale="en_US">A Study</title>
        <title locale="fr_CA">Une étude</title>
    </titles>

elements without a `locale` attribute belong to the journal's primary locale."""

from collections import OrderedDict
import html
import logging

LOG = logging.getLogger(__name__)

TERM_SEPARATOR = ";"


def text(node):
    "the decoded, stripped text of `node` and its descendants. None if there isn't any"
    if node is None:
        return None
    value = html.unescape("".join(node.itertext())).strip()
    return value or None


def child(node, name):
    "first child of `node` called `name`"
    if node is None:
        return None
    return node.find(name)


def child_value(node, name):
    return text(child(node, name))


def localized(node, singular, plural, default_locale):
    """returns an ordered map of {locale: [text, ...]} for the `singular` elements of `node`.
    a lone `singular` element wins over a `plural` container. empty elements are skipped."""
    result = OrderedDict()
    if node is None:
        return result

    def add(element):
        value = text(element)
        if value is None:
            return
        locale = element.get("locale") or default_locale
        result.setdefault(locale, []).append(value)

    element = node.find(singular)
    if element is not None:
        add(element)
        return result

    container = node.find(plural)
    if container is not None:
        for element in container.findall(singular):
            add(element)
    return result


def article_titles(document, primary_locale):
    """the localized titles of the article in `document`.
    if there is no title in the primary locale, the first title found is also used as the primary title"""
    titles = localized(document, "title", "titles", primary_locale)
    if titles and primary_locale not in titles:
        locale, title_list = next(iter(titles.items()))
        LOG.info(
            "no %r title found, using the %r title as the primary title",
            primary_locale,
            locale,
        )
        titles[primary_locale] = list(title_list)
    return titles


def split_terms(localized_map):
    """controlled vocabulary values may pack many terms into one element, separated by ';'.
    returns a new map with one term per entry"""
    result = OrderedDict()
    for locale, value_list in localized_map.items():
        terms = result.setdefault(locale, [])
        for value in value_list:
            terms.extend(
                term.strip() for term in value.split(TERM_SEPARATOR) if term.strip()
            )
    return result
