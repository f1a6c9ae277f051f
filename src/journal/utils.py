from collections import OrderedDict
import json
import pytz
from dateutil import parser
from datetime import datetime
from rfc3339 import rfc3339
import traceback
import logging

LOG = logging.getLogger(__name__)

lfilter = lambda func, *iterable: list(filter(func, *iterable))


def formatted_traceback(errobj):
    return "".join(traceback.format_tb(errobj.__traceback__))


class StateError(RuntimeError):
    """a fatal condition encountered while importing.
    carries an error key and the parameters needed to localize it"""

    idx_code = 0
    idx_message = 1
    idx_params = 2

    @property
    def code(self):
        return self.args[self.idx_code]

    @property
    def message(self):
        return self.args[self.idx_message]

    @property
    def params(self):
        if len(self.args) < 3:
            return {}
        return self.args[self.idx_params] or {}

    @property
    def trace(self):
        return formatted_traceback(self)


class RollbackError(StateError):
    "a compensating deletion failed and has left orphaned records behind"
    pass


def freshen(obj):
    return type(obj).objects.get(pk=obj.pk)


def isint(v):
    try:
        int(v)
        return True
    except (ValueError, TypeError):
        return False


def nth(idx, x):
    # 'nth' implies a sequential collection
    if isinstance(x, dict):
        raise TypeError
    if x is None:
        return x
    try:
        return x[idx]
    except IndexError:
        return None


def first(x):
    return nth(0, x)


def last(x):
    return nth(-1, x)


def firstnn(x):
    "given sequential `x`, returns the first non-nil value"
    return first(lfilter(None, x))


def iso1(locale):
    "'en_US' => 'en'"
    return locale.replace("-", "_").split("_")[0]


#
# dates
#


def todt(val):
    "turn almost any formatted datetime string into a UTC datetime object"
    if val is None:
        return None
    dt = val
    if not isinstance(dt, datetime):
        dt = parser.parse(val, fuzzy=False)  # raises ValueError

    if not dt.tzinfo:
        # no timezone (naive), assume UTC and make it explicit
        LOG.debug("encountered naive timestamp %r from %r. UTC assumed.", dt, val)
        return pytz.utc.localize(dt)

    else:
        # ensure tz is UTC
        if dt.tzinfo != pytz.utc:
            LOG.debug("converting an aware dt that isn't in utc TO utc: %r", dt)
            return dt.astimezone(pytz.utc)
    return dt


def utcnow():
    "returns a UTC datetime stamp with a UTC timezone object attached"
    return datetime.now(pytz.utc).replace(microsecond=0)


def date_parts(val):
    """returns a triple of (year, month, day) found in the given date string.
    parts not present in the string are returned as None.

    dateutil fills missing parts from a default date, so the string is parsed against
    two different defaults: any part that differs between the two wasn't in the string."""
    nothing = (None, None, None)
    if not val or not str(val).strip():
        return nothing
    try:
        a = parser.parse(val, default=datetime(1, 1, 1))
        b = parser.parse(val, default=datetime(2, 2, 2))
    except (ValueError, OverflowError):
        return nothing
    pairs = [(a.year, b.year), (a.month, b.month), (a.day, b.day)]
    return tuple(x if x == y else None for x, y in pairs)


def valid_date(val):
    """returns a UTC datetime if `val` is a complete and valid calendar date, else None.
    partial dates ('2019', 'March 2019') are not valid."""
    if None in date_parts(val):
        return None
    try:
        return todt(val)
    except (ValueError, OverflowError):
        return None


def ymdhms(dt):
    "returns an rfc3339 representation of a datetime object"
    if dt:
        dt = todt(dt)  # convert to utc, etc
        return rfc3339(dt, utc=True)


#
# json
#


def json_loads(data, *args, **kwargs):
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data, *args, **kwargs)


def ordered_json_loads(data):
    "same as json_loads, just ensures order is preserved when loading maps"
    return json_loads(data, object_pairs_hook=OrderedDict)


def json_dumps(obj, **kwargs):
    "drop-in for json.dumps that handles datetime objects."

    def _handler(obj):
        if hasattr(obj, "isoformat"):
            return ymdhms(obj)
        else:
            raise TypeError(
                "Object of type %s with value of %s is not JSON serializable"
                % (type(obj), repr(obj))
            )

    return json.dumps(obj, default=_handler, **kwargs)
