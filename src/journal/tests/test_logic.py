from datetime import datetime
import pytz
from unittest.mock import patch
from django.db import DatabaseError
from django.test import override_settings
from . import base
from journal import logic, models, codes
from journal.utils import StateError


class Issues(base.BaseCase):
    def setUp(self):
        super().setUp()
        self.doc = self.document("<publication-date>2019-03-15</publication-date>")

    def test_create_issue(self):
        self.assertEqual(0, models.Issue.objects.count())
        issue, created = logic.resolve_issue(self.journal, "5", "2", self.doc)
        self.assertTrue(created)
        self.assertTrue(issue.pk)
        issue = self.freshen(issue)
        self.assertEqual({"en_US": "Vol. 5, No. 2 (2019)"}, issue.title)
        self.assertEqual((5, 2, 2019), (issue.volume, issue.number, issue.year))
        self.assertEqual(datetime(2019, 3, 15, tzinfo=pytz.utc), issue.date_published)
        self.assertTrue(issue.published)
        self.assertFalse(issue.current)
        self.assertEqual(models.ACCESS_OPEN, issue.access_status)
        self.assertTrue(issue.show_volume and issue.show_number and issue.show_year)
        self.assertFalse(issue.show_title)

    def test_existing_issue_reused(self):
        "resolving the same issue twice returns the same issue and creates nothing new"
        issue1, created1 = logic.resolve_issue(self.journal, "5", "2", self.doc)
        issue2, created2 = logic.resolve_issue(self.journal, "5", "2", self.doc)
        self.assertEqual(issue1.pk, issue2.pk)
        self.assertEqual((True, False), (created1, created2))
        self.assertEqual(1, models.Issue.objects.count())

    def test_existing_issue_needs_no_date(self):
        "an existing issue is found without looking at the article's publication date"
        logic.resolve_issue(self.journal, "5", "2", self.doc)
        issue, created = logic.resolve_issue(self.journal, "5", "2", self.document(""))
        self.assertFalse(created)

    def test_unpublished_issue_not_reused(self):
        models.Issue.objects.create(
            journal=self.journal, volume=5, number=2, year=2019, published=False
        )
        issue, created = logic.resolve_issue(self.journal, "5", "2", self.doc)
        self.assertTrue(created)
        self.assertEqual(2, models.Issue.objects.count())

    def test_day_defaults_to_first(self):
        doc = self.document("<publication-date>2019-03</publication-date>")
        issue, _ = logic.resolve_issue(self.journal, "5", "2", doc)
        self.assertEqual(datetime(2019, 3, 1, tzinfo=pytz.utc), issue.date_published)

    def test_bad_volume_number(self):
        cases = [("", "2"), ("5", ""), (None, "2"), ("five", "2"), ("5", "2b")]
        for volume, number in cases:
            with self.assertRaises(StateError) as cm:
                logic.resolve_issue(self.journal, volume, number, self.doc, "A Study")
            self.assertEqual(codes.MISSING_VOLUME_NUMBER, cm.exception.code)
            self.assertEqual({"title": "A Study"}, cm.exception.params)
        self.assertEqual(0, models.Issue.objects.count())

    def test_incomplete_pub_date(self):
        "a new issue needs a year and a month"
        cases = [
            "",
            "<publication-date>2019</publication-date>",
            "<publication-date></publication-date>",
            "<publication-date>pants</publication-date>",
        ]
        for given in cases:
            with self.assertRaises(StateError) as cm:
                logic.resolve_issue(self.journal, "5", "2", self.document(given))
            self.assertEqual(codes.MISSING_PUB_DATE, cm.exception.code)
        self.assertEqual(0, models.Issue.objects.count())

    def test_issue_not_saved(self):
        "an issue that can't be saved is unresolved"
        with patch.object(models.Issue, "save", side_effect=DatabaseError("boom")):
            issue, created = logic.resolve_issue(self.journal, "5", "2", self.doc)
        self.assertEqual((None, False), (issue, created))


class Sections(base.BaseCase):
    def test_section_name(self):
        cases = [
            ("<document-type>book_review</document-type>", "Book Review"),
            ("<document-type>ARTICLE</document-type>", "Article"),
            ("<type>research article</type>", "Research Article"),
            (
                "<document-type>editorial</document-type><type>article</type>",
                "Editorial",
            ),
            ("<document-type></document-type><type>article</type>", "Article"),
            ("<document-type>_</document-type>", "Articles"),
            ("", "Articles"),
        ]
        for given, expected in cases:
            self.assertEqual(expected, logic.section_name(self.document(given)), given)

    def test_create_section(self):
        doc = self.document("<document-type>book_review</document-type>")
        with override_settings(IMPORT_SECTION_POLICY="Imported."):
            section, created = logic.resolve_section(self.journal, doc, "en_US")
        self.assertTrue(created)
        section = self.freshen(section)
        self.assertEqual({"en_US": "Book Review"}, section.title)
        self.assertEqual({"en_US": "BOO"}, section.abbrev)
        self.assertEqual({"en_US": "Imported."}, section.policy)
        self.assertTrue(section.abstracts_not_required)
        self.assertTrue(section.meta_indexed)
        self.assertFalse(section.meta_reviewed)
        self.assertTrue(section.editor_restricted)
        self.assertFalse(section.hide_title)
        self.assertFalse(section.hide_author)

    def test_existing_section_reused(self):
        doc = self.document("")
        section1, created1 = logic.resolve_section(self.journal, doc, "en_US")
        section2, created2 = logic.resolve_section(self.journal, doc, "en_US")
        self.assertEqual(section1.pk, section2.pk)
        self.assertEqual((True, False), (created1, created2))
        self.assertEqual(1, models.Section.objects.count())

    def test_section_matched_in_locale(self):
        "sections are matched on their title in the given locale only"
        models.Section.objects.create(journal=self.journal, title={"fr_CA": "Articles"})
        section, created = logic.resolve_section(self.journal, self.document(""), "en_US")
        self.assertTrue(created)

    def test_section_not_saved(self):
        with patch.object(models.Section, "save", side_effect=DatabaseError("boom")):
            section, created = logic.resolve_section(
                self.journal, self.document(""), "en_US"
            )
        self.assertEqual((None, False), (section, created))


class Groups(base.BaseCase):
    def test_author_group(self):
        self.assertEqual(self.author_group, logic.author_group(self.journal))

    def test_no_author_group(self):
        self.author_group.delete()
        self.assertEqual(None, logic.author_group(self.journal))

    def test_editor_group(self):
        "the first manager group assigned to the stage"
        models.UserGroup.objects.create(
            journal=self.journal,
            role=models.ROLE_MANAGER,
            name={"en_US": "Another manager"},
            stages=[models.STAGE_PRODUCTION],
        )
        group = logic.editor_group(self.journal, models.STAGE_PRODUCTION)
        self.assertEqual(self.manager_group, group)

    def test_editor_group_stage(self):
        self.manager_group.stages = [models.STAGE_SUBMISSION]
        self.manager_group.save()
        self.assertEqual(None, logic.editor_group(self.journal, models.STAGE_PRODUCTION))

    def test_editor_group_role(self):
        "only manager groups are considered"
        self.manager_group.delete()
        self.author_group.stages = [models.STAGE_PRODUCTION]
        self.author_group.save()
        self.assertEqual(None, logic.editor_group(self.journal, models.STAGE_PRODUCTION))

    def test_genre(self):
        self.assertEqual(self.genre, logic.genre(self.journal, "submission"))
        self.assertEqual(None, logic.genre(self.journal, "pants"))
