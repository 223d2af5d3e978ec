# -*- coding: utf-8 -*-
"""abq.store
License:  MIT
About:
A read-only contact store backed by a directory of YAML files. Each
`*.yml` file holds one `contact:` or one `group:` record.

"""
import os
from datetime import date, datetime

import tzlocal
import yaml
from dateutil import parser as dtparser

from abq.errors import error_pass
from abq.fields import (AddressValue, Entry, FieldValue, Kind,
                        SocialProfile)
from abq.query import (AllOf, AnyOf, Contains, GroupNameContains,
                       UidContains)

# the key holding the value of each entry in a multi-string field
ENTRY_KEYS = {
    "phones": "number",
    "emails": "email",
    "websites": "url",
    "related": "name",
}

# parsing a date string against both defaults reveals missing parts
DATE_SENTINELS = (datetime(2000, 1, 1), datetime(2004, 2, 2))


class Record():
    """A person or group loaded from a data file.

    Attributes:
        kind (str):     Record.PERSON or Record.GROUP.
        uid (str):      the record uid.
        data (dict):    the record data.
        path (str):     the file the record was read from.

    """
    PERSON = "person"
    GROUP = "group"

    def __init__(self, kind, uid, data, path):
        self.kind = kind
        self.uid = uid
        self.data = data
        self.path = path

    def __repr__(self):
        return f"Record({self.kind!r}, {self.uid!r})"

    @property
    def id(self):
        """The store-qualified identifier, `<uid>:<kind>`."""
        return f"{self.uid}:{self.kind}"


def strip_store_suffix(record_id):
    """Remove the trailing `:<store>` suffix from a record identifier."""
    head, sep, _ = record_id.rpartition(":")
    return head if sep else record_id


def _text_or_none(value):
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


class ContactStore():
    """Loads person and group records and answers queries against them.

    Attributes:
        data_dir (str):     directory containing the record files.
        people (dict):      person records by uid.
        groups (dict):      group records by uid.

    """
    def __init__(self, data_dir):
        """Initializes a ContactStore() object."""
        self.data_dir = data_dir
        self.ltz = tzlocal.get_localzone()
        self.people = {}
        self.groups = {}
        self._parse_files()

    def _date_or_none(self, value):
        """Convert a date, datetime or date-like string to a date or
        datetime, or None. A string must give the year, month and day;
        partial dates such as '1980' or '1980-05' are treated as absent.

        Args:
            value (obj):    the stored value.

        Returns:
            dateobj (date or datetime): the parsed value or None.

        """
        if isinstance(value, datetime):
            dateobj = value
        elif isinstance(value, date):
            return value
        elif isinstance(value, str):
            try:
                parsed = [dtparser.parse(value, default=default)
                          for default in DATE_SENTINELS]
            except (TypeError, ValueError, OverflowError,
                    dtparser.ParserError):
                return None
            dateobj, other = parsed
            if (dateobj.year, dateobj.month, dateobj.day) != \
                    (other.year, other.month, other.day):
                return None
        else:
            return None
        if dateobj.tzinfo:
            dateobj = dateobj.astimezone(tz=self.ltz)
        return dateobj

    def _parse_files(self):
        """Read record files from `data_dir` into `people` and
        `groups`.

        """
        uids = {}
        with os.scandir(self.data_dir) as scanned:
            entries = sorted(scanned, key=lambda entry: entry.name)
        for entry in entries:
            if not (entry.name.endswith('.yml') and entry.is_file()):
                continue
            fullpath = entry.path
            data = None
            try:
                with open(fullpath, "r", encoding="utf-8") as entry_file:
                    data = yaml.safe_load(entry_file)
            except (OSError, IOError, yaml.YAMLError):
                error_pass(
                    f"failure reading or parsing {fullpath} - SKIPPING")
                continue
            if not isinstance(data, dict):
                error_pass(f"no data in {fullpath} - SKIPPING")
                continue
            if isinstance(data.get('contact'), dict):
                kind = Record.PERSON
                record = data['contact']
                target = self.people
            elif isinstance(data.get('group'), dict):
                kind = Record.GROUP
                record = data['group']
                target = self.groups
            else:
                error_pass(f"no data in {fullpath} - SKIPPING")
                continue
            uid = record.get('uid')
            if not uid:
                error_pass(f"no uid param in {fullpath} - SKIPPING")
                continue
            uid = str(uid)
            dupid = uids.get(uid)
            if dupid:
                error_pass(
                    "duplicate UID detected:\n"
                    f"  {uid}\n"
                    f"  {dupid}\n"
                    f"  {fullpath}\n"
                    f"SKIPPING {fullpath}")
                continue
            uids[uid] = fullpath
            target[uid] = Record(kind, uid, record, fullpath)

    def _entries(self, spec, items):
        """Build the Entry tuples of a multi-valued field."""
        if not isinstance(items, list):
            return ()
        entries = []
        for item in items:
            if not isinstance(item, dict):
                continue
            label = item.get("description") or ""
            primary = bool(item.get("primary"))
            if spec.kind is Kind.MULTI_STRING:
                value = _text_or_none(item.get(ENTRY_KEYS[spec.key]))
            elif spec.kind is Kind.MULTI_ADDRESS:
                street = ", ".join(
                    str(item[key]) for key in ("address1", "address2")
                    if item.get(key))
                value = AddressValue(
                    street=street or None,
                    city=_text_or_none(item.get("city")),
                    state=_text_or_none(item.get("state")),
                    zipcode=_text_or_none(item.get("zipcode")),
                    country=_text_or_none(item.get("country")),
                    countrycode=_text_or_none(item.get("countrycode")))
                if not any(value):
                    value = None
            else:
                service = _text_or_none(item.get("service"))
                username = _text_or_none(item.get("username"))
                value = None
                if service or username:
                    value = SocialProfile(service or "", username or "")
            if value is not None:
                entries.append(Entry(label, value, primary))
        return tuple(entries)

    def value(self, record, spec):
        """Fetch the value of one field of a person.

        Args:
            record (Record):    the person.
            spec (FieldSpec):   the field to fetch.

        Returns:
            value (FieldValue or None): the value, or None if absent.

        """
        raw = record.data.get(spec.key)
        if raw is None:
            return None
        if spec.kind in (Kind.PLAIN, Kind.MULTILINE):
            value = _text_or_none(raw)
        elif spec.kind is Kind.DATE:
            value = self._date_or_none(raw)
        elif spec.kind in (Kind.MULTI_STRING, Kind.MULTI_ADDRESS,
                           Kind.MULTI_PROFILE):
            value = self._entries(spec, raw) or None
        else:
            raise ValueError(f"unknown field kind {spec.kind}")
        if value is None:
            return None
        return FieldValue(spec.kind, value)

    def values(self, record, fields):
        """Fetch the values of several fields of a person into a new
        mapping of field key to FieldValue. Absent fields are left out.

        """
        values = {}
        for spec in fields:
            value = self.value(record, spec)
            if value is not None:
                values[spec.key] = value
        return values

    @staticmethod
    def _search_text(value):
        """Returns the searchable strings of a FieldValue."""
        if value.kind in (Kind.PLAIN, Kind.MULTILINE):
            return [value.value]
        if value.kind is Kind.DATE:
            return [value.value.isoformat()]
        texts = []
        for entry in value.value:
            if value.kind is Kind.MULTI_STRING:
                texts.append(entry.value)
            else:
                texts.extend(part for part in entry.value if part)
        return texts

    def _matches(self, predicate, record):
        """Evaluate a query predicate against one record."""
        if isinstance(predicate, AllOf):
            return all(self._matches(child, record)
                       for child in predicate.children)
        if isinstance(predicate, AnyOf):
            return any(self._matches(child, record)
                       for child in predicate.children)
        if isinstance(predicate, UidContains):
            return predicate.term.casefold() in record.id.casefold()
        if isinstance(predicate, GroupNameContains):
            if record.kind != Record.GROUP:
                return False
            name = self.group_name(record)
            return predicate.term.casefold() in name.casefold()
        if isinstance(predicate, Contains):
            if record.kind != Record.PERSON:
                return False
            value = self.value(record, predicate.field)
            if value is None:
                return False
            term = predicate.term.casefold()
            return any(term in text.casefold()
                       for text in self._search_text(value))
        raise ValueError(f"unknown predicate {predicate!r}")

    def records_matching(self, predicate, kind=Record.PERSON):
        """Returns the records of one kind matching a predicate.

        Args:
            predicate (tuple):  a predicate from abq.query.
            kind (str):         Record.PERSON or Record.GROUP.

        Returns:
            records (list):     the matching records.

        """
        pool = self.groups if kind == Record.GROUP else self.people
        return [record for record in pool.values()
                if self._matches(predicate, record)]

    def all_groups(self):
        """Returns every group record."""
        return list(self.groups.values())

    @staticmethod
    def group_name(group):
        """Returns the name of a group."""
        return _text_or_none(group.data.get("name")) or ""

    def members(self, group):
        """Returns the person records belonging to a group. Unknown
        member uids are ignored.

        """
        members = group.data.get("members") or []
        if not isinstance(members, list):
            return []
        return [self.people[str(uid)] for uid in members
                if str(uid) in self.people]

    @staticmethod
    def description(record):
        """Returns the raw form of a record, its YAML document."""
        key = "group" if record.kind == Record.GROUP else "contact"
        return yaml.dump(
            {key: record.data},
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True)
