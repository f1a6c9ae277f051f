from datetime import datetime
import pytz
from . import base
from journal import utils


class Errors(base.SimpleBaseCase):
    def test_state_error(self):
        "plain state errors have all the bits we expect"
        try:
            raise utils.StateError("some-code", "msg")
        except utils.StateError as err:
            self.assertEqual(err.message, "msg")
            self.assertEqual(err.code, "some-code")
            self.assertEqual(err.params, {})
            # bit naff
            self.assertTrue(err.trace.strip().startswith('File "'))

    def test_state_error_params(self):
        err = utils.StateError("some-code", "msg", {"title": "A Study"})
        self.assertEqual(err.params, {"title": "A Study"})

    def test_rollback_error(self):
        "a rollback error is also a state error"
        err = utils.RollbackError("rollback-failed", "msg")
        self.assertTrue(isinstance(err, utils.StateError))


class Utils(base.SimpleBaseCase):
    def test_isint(self):
        cases = [("1", True), (2, True), ("", False), (None, False), ("2a", False)]
        for given, expected in cases:
            self.assertEqual(expected, utils.isint(given), given)

    def test_first_last(self):
        self.assertEqual(1, utils.first([1, 2, 3]))
        self.assertEqual(3, utils.last([1, 2, 3]))
        self.assertEqual(None, utils.first([]))
        self.assertEqual(None, utils.first(None))
        self.assertRaises(TypeError, utils.first, {})

    def test_firstnn(self):
        self.assertEqual("a", utils.firstnn([None, "", "a", "b"]))

    def test_iso1(self):
        cases = [("en_US", "en"), ("fr_CA", "fr"), ("pt-BR", "pt"), ("de", "de")]
        for given, expected in cases:
            self.assertEqual(expected, utils.iso1(given))


class Dates(base.SimpleBaseCase):
    def test_date_parts(self):
        cases = [
            ("2019-03-15", (2019, 3, 15)),
            ("2019-03", (2019, 3, None)),
            ("2019", (2019, None, None)),
            ("March 2019", (2019, 3, None)),
            ("2019-03-15T00:00:00-07:00", (2019, 3, 15)),
            ("", (None, None, None)),
            (None, (None, None, None)),
            ("pants", (None, None, None)),
        ]
        for given, expected in cases:
            self.assertEqual(expected, utils.date_parts(given), given)

    def test_valid_date(self):
        expected = datetime(2019, 3, 15, tzinfo=pytz.utc)
        self.assertEqual(expected, utils.valid_date("2019-03-15"))

    def test_valid_date_partial(self):
        "dates missing a day or month are not valid"
        for given in ["2019", "2019-03", "", None, "2019-02-30", "pants"]:
            self.assertEqual(None, utils.valid_date(given), given)

    def test_todt(self):
        cases = [
            ("2019-03-15", datetime(2019, 3, 15, tzinfo=pytz.utc)),
            ("2019-03-15T08:00:00+08:00", datetime(2019, 3, 15, tzinfo=pytz.utc)),
            (None, None),
        ]
        for given, expected in cases:
            self.assertEqual(expected, utils.todt(given))

    def test_ymdhms(self):
        dt = datetime(2019, 3, 15, 1, 2, 3, tzinfo=pytz.utc)
        self.assertEqual("2019-03-15T01:02:03Z", utils.ymdhms(dt))


class JSON(base.SimpleBaseCase):
    def test_json_dumps_dates(self):
        dt = datetime(2019, 3, 15, tzinfo=pytz.utc)
        self.assertEqual('{"date": "2019-03-15T00:00:00Z"}', utils.json_dumps({"date": dt}))

    def test_ordered_json_loads(self):
        data = utils.ordered_json_loads(b'{"fr_CA": "b", "en_US": "a"}')
        self.assertEqual(["fr_CA", "en_US"], list(data.keys()))
