# -*- coding: utf-8 -*-
"""abq.fields
License:  MIT
About:
The contact field catalog, value shapes, label cleaning and preferred
value selection shared by the formatter, the query builder and the
launchers.

"""
import enum
from collections import namedtuple


class Kind(enum.Enum):
    """The shape of the value(s) held by a field."""
    PLAIN = "plain"
    MULTILINE = "multiline"
    DATE = "date"
    MULTI_STRING = "multistring"
    MULTI_ADDRESS = "multiaddress"
    MULTI_PROFILE = "multiprofile"


class Preference(enum.Enum):
    """Which labeled value to prefer when launching applications."""
    NONE = "none"
    HOME = "home"
    WORK = "work"


class DisplayForm(enum.Enum):
    """How much of a record to display."""
    PLAIN = "plain"
    STANDARD = "standard"
    BRIEF = "brief"
    LONG = "long"
    RAW = "raw"


class Scope(enum.Enum):
    """Which fields participate in a search."""
    NAMES = "names"
    GROUPS = "groups"
    ALL = "all"


# key:   the record key holding the value(s).
# label: the display label.
# kind:  the value shape (Kind).
# width: the display width of the label.
FieldSpec = namedtuple("FieldSpec", ["key", "label", "kind", "width"])

# one value from a multi-valued field
Entry = namedtuple("Entry", ["label", "value", "primary"], defaults=(False,))

# the fetched value of one field for one record; `value` is a str, a
# date, or a tuple of Entry depending on `kind`
FieldValue = namedtuple("FieldValue", ["kind", "value"])

AddressValue = namedtuple(
    "AddressValue",
    ["street", "city", "state", "zipcode", "country", "countrycode"],
    defaults=(None, None, None, None, None, None))

SocialProfile = namedtuple("SocialProfile", ["service", "username"])

# standard labels are stored wrapped, e.g. _$!<Work>!$_
HOME_LABEL = "_$!<Home>!$_"
WORK_LABEL = "_$!<Work>!$_"
MOBILE_LABEL = "_$!<Mobile>!$_"
HOMEPAGE_LABEL = "_$!<HomePage>!$_"

NAME_LABEL = "Name"
UID_LABEL = "UID"


def _spec(key, label, kind):
    return FieldSpec(key, label, kind, len(label))


# display order; the name fields must stay first and contiguous
FIELDS = (
    _spec("first", "First Name", Kind.PLAIN),
    _spec("middle", "Middle Name", Kind.PLAIN),
    _spec("last", "Last Name", Kind.PLAIN),
    _spec("nickname", "Nickname", Kind.PLAIN),
    _spec("maiden", "Maiden Name", Kind.PLAIN),
    _spec("company", "Organization", Kind.PLAIN),
    _spec("addresses", "Address", Kind.MULTI_ADDRESS),
    _spec("phones", "Phone", Kind.MULTI_STRING),
    _spec("emails", "Email", Kind.MULTI_STRING),
    _spec("title", "Job Title", Kind.PLAIN),
    _spec("websites", "URL", Kind.MULTI_STRING),
    _spec("birthday", "Birthday", Kind.DATE),
    _spec("related", "Related", Kind.MULTI_STRING),
    _spec("profiles", "Profile", Kind.MULTI_PROFILE),
    _spec("notes", "Note", Kind.MULTILINE),
)

FIELD = {spec.key: spec for spec in FIELDS}

NAME_FIELDS = FIELDS[:FIELDS.index(FIELD["maiden"]) + 1]

# standard and plain display stop after email
STANDARD_FIELDS = FIELDS[:FIELDS.index(FIELD["emails"]) + 1]


def clean_label(label):
    """Strip the decoration from a stored label.

    Standard labels come out of the store wrapped, e.g. `_$!<Work>!$_`;
    user-defined labels are unadorned and returned as they are.

    Args:
        label (str):    the stored label.

    Returns:
        kind (str):     the text between the first '<' and the last '>',
    or the label itself.

    """
    if not label:
        return ""
    start = label.find("<")
    end = label.rfind(">")
    if start != -1 and end > start:
        return label[start + 1:end]
    return label


def abbreviate(label, abbrev=True):
    """Clean a label and optionally shorten it to its first character."""
    kind = clean_label(label)
    return kind[:1] if abbrev else kind


def label_matches(label, wanted):
    """Compare a stored label to a standard label, ignoring decoration
    and case.

    """
    return clean_label(label).casefold() == clean_label(wanted).casefold()


def value_with_label(entries, wanted):
    """Returns the value of the first entry whose label matches.

    Args:
        entries (iterable): Entry tuples.
        wanted (str):       the label to look for.

    Returns:
        value (obj or None):    the matching value.

    """
    for entry in entries or ():
        if label_matches(entry.label, wanted):
            return entry.value
    return None


def select_preferred(entries, preference, field=None):
    """Select the single best value of a multi-valued field.

    With no preference the primary entry wins, then home, then work.
    Preferring home tries home (and 'home page' for URLs), then work.
    Preferring work only tries work.

    Args:
        entries (iterable):         Entry tuples of one field.
        preference (Preference):    the requested preference.
        field (FieldSpec):          the field the entries belong to.

    Returns:
        value (obj or None):    the selected value.

    """
    entries = tuple(entries or ())
    if preference is Preference.NONE:
        for entry in entries:
            if entry.primary:
                return entry.value
        preference = Preference.HOME
    if preference is Preference.HOME:
        value = value_with_label(entries, HOME_LABEL)
        if value is None and field is FIELD["websites"]:
            value = value_with_label(entries, HOMEPAGE_LABEL)
        if value is not None:
            return value
    return value_with_label(entries, WORK_LABEL)


def format_address(address):
    """Format an address as `street, city state zip`, leaving out empty
    parts.

    """
    locality = " ".join(
        part for part in (address.city, address.state, address.zipcode)
        if part)
    return ", ".join(part for part in (address.street, locality) if part)
