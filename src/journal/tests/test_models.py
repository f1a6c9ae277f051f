from datetime import datetime
import pytz
from unittest.mock import patch
from . import base
from journal import models, utils


class ModelsBase(base.BaseCase):
    def setUp(self):
        super().setUp()
        self.issue = models.Issue.objects.create(
            journal=self.journal,
            volume=1,
            number=1,
            year=2017,
            published=True,
            date_published=datetime(2017, 6, 1, tzinfo=pytz.utc),
        )
        self.submission = models.Submission.objects.create(
            journal=self.journal, locale="en_US"
        )
        self.publication = models.Publication.objects.create(
            submission=self.submission,
            issue=self.issue,
            date_published=datetime(2018, 2, 3, tzinfo=pytz.utc),
        )

    def author(self, given, family, seq, user_group=None, **kwargs):
        return models.Author.objects.create(
            submission=self.submission,
            publication=self.publication,
            given_name={"en_US": given},
            family_name={"en_US": family},
            email="author@example.org",
            seq=seq,
            user_group=user_group,
            **kwargs
        )


class AuthorString(ModelsBase):
    def setUp(self):
        super().setUp()
        self.translator_group = models.UserGroup.objects.create(
            journal=self.journal,
            role=models.ROLE_AUTHOR,
            name={"en_US": "Translator"},
            show_title=True,
        )
        self.groups = [self.author_group, self.translator_group]

    def test_no_authors(self):
        self.assertEqual("", self.publication.author_string(self.groups))

    def test_single_group(self):
        self.author("Jane", "Doe", 1, self.author_group)
        self.author("John", "Smith", 2, self.author_group)
        expected = "Jane Doe, John Smith"
        self.assertEqual(expected, self.publication.author_string(self.groups))

    def test_group_titles(self):
        "a change of group ends the previous group. groups that show their title are named"
        self.author("Jane", "Doe", 1, self.author_group)
        self.author("Jean", "Dupont", 2, self.translator_group)
        self.author("Ann", "Other", 3, self.author_group)
        expected = "Jane Doe; Jean Dupont (Translator); Ann Other"
        self.assertEqual(expected, self.publication.author_string(self.groups))

    def test_trailing_group_title(self):
        self.author("Jean", "Dupont", 1, self.translator_group)
        expected = "Jean Dupont (Translator)"
        self.assertEqual(expected, self.publication.author_string(self.groups))

    def test_unlisted_group_not_named(self):
        "a group's title is only shown if the group was given"
        self.author("Jean", "Dupont", 1, self.translator_group)
        self.assertEqual("Jean Dupont", self.publication.author_string([]))

    def test_sequence_order(self):
        self.author("John", "Smith", 2, self.author_group)
        self.author("Jane", "Doe", 1, self.author_group)
        expected = "Jane Doe, John Smith"
        self.assertEqual(expected, self.publication.author_string(self.groups))

    def test_preferred_name(self):
        self.author(
            "Bob",
            "Smith",
            1,
            self.author_group,
            preferred_public_name={"en_US": "Robert Smith"},
        )
        self.assertEqual("Robert Smith", self.publication.author_string(self.groups))


class LicenseDefault(ModelsBase):
    def test_holder_context(self):
        "the journal holds copyright by default"
        expected = {"en_US": "Journal of Tests", "fr_CA": "Revue des tests"}
        actual = self.journal.license_default(models.COPYRIGHT_HOLDER, self.publication)
        self.assertEqual(expected, actual)

    def test_holder_author(self):
        self.journal.copyright_holder_type = models.HOLDER_AUTHOR
        self.author("Jane", "Doe", 1, self.author_group)
        expected = {"en_US": "Jane Doe"}
        actual = self.journal.license_default(models.COPYRIGHT_HOLDER, self.publication)
        self.assertEqual(expected, actual)

    def test_holder_other(self):
        self.journal.copyright_holder_type = models.HOLDER_OTHER
        self.journal.copyright_holder_other = {"en_US": "Society of Tests"}
        expected = {"en_US": "Society of Tests"}
        actual = self.journal.license_default(models.COPYRIGHT_HOLDER, self.publication)
        self.assertEqual(expected, actual)

    def test_year_issue_basis(self):
        actual = self.journal.license_default(models.COPYRIGHT_YEAR, self.publication)
        self.assertEqual(2017, actual)

    def test_year_issue_basis_unpublished_issue(self):
        "the current year is used when the issue isn't published"
        self.issue.published = False
        now = datetime(2022, 1, 1, tzinfo=pytz.utc)
        with patch("journal.models.utcnow", return_value=now):
            actual = self.journal.license_default(models.COPYRIGHT_YEAR, self.publication)
        self.assertEqual(2022, actual)

    def test_year_submission_basis(self):
        self.journal.copyright_year_basis = models.YEAR_BASIS_SUBMISSION
        actual = self.journal.license_default(models.COPYRIGHT_YEAR, self.publication)
        self.assertEqual(2018, actual)

    def test_license_url(self):
        url = "https://creativecommons.org/licenses/by/4.0/"
        self.journal.license_url = url
        actual = self.journal.license_default(models.LICENSE_URL, self.publication)
        self.assertEqual(url, actual)

    def test_unknown_field(self):
        self.assertRaises(
            ValueError, self.journal.license_default, "pants", self.publication
        )


class Models(ModelsBase):
    def test_localized_name(self):
        self.assertEqual("Journal of Tests", self.journal.localized_name())
        self.assertEqual("Revue des tests", self.journal.localized_name("fr_CA"))
        # falls back to any name
        self.assertEqual("Journal of Tests", self.journal.localized_name("es_ES"))

    def test_localized_fields_keep_order(self):
        "localized values come back out of the database in the order they went in"
        self.publication.title = {"fr_CA": "Une étude", "en_US": "A Study"}
        self.publication.save()
        pub = utils.freshen(self.publication)
        self.assertEqual(["fr_CA", "en_US"], list(pub.title.keys()))

    def test_deleting_submission_cascades(self):
        self.author("Jane", "Doe", 1, self.author_group)
        self.submission.current_publication = self.publication
        self.submission.save()
        self.submission.delete()
        self.assertEqual(0, models.Publication.objects.count())
        self.assertEqual(0, models.Author.objects.count())
        # shared entities are untouched
        self.assertEqual(1, models.Issue.objects.count())

    def test_user_group_stages(self):
        self.assertTrue(self.manager_group.assigned_to_stage(models.STAGE_PRODUCTION))
        self.assertFalse(self.author_group.assigned_to_stage(models.STAGE_PRODUCTION))
