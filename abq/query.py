# -*- coding: utf-8 -*-
"""abq.query
License:  MIT
About:
Search predicates handed to the contact store, and result ordering.

"""
import locale
from collections import namedtuple

from abq.fields import FIELDS, NAME_FIELDS, Scope

# case-insensitive substring match against one field
Contains = namedtuple("Contains", ["field", "term"])
# case-insensitive substring match against a group name
GroupNameContains = namedtuple("GroupNameContains", ["term"])
# case-insensitive substring match against a record uid
UidContains = namedtuple("UidContains", ["term"])
AnyOf = namedtuple("AnyOf", ["children"])
AllOf = namedtuple("AllOf", ["children"])

PERSON_ORDER = ("last", "first", "company")
GROUP_ORDER = ("name",)


def build_query(terms, scope=Scope.ALL, uid=None):
    """Build a predicate requiring every term to match somewhere.

    Each term becomes a disjunction over the fields in scope (or a group
    name match for group searches); a uid, if given, is required as
    well.

    Args:
        terms (list):   the search terms.
        scope (Scope):  the fields to search.
        uid (str):      a uid to require.

    Returns:
        predicate (AllOf):  the conjunction of all clauses.

    """
    fields = NAME_FIELDS if scope is Scope.NAMES else FIELDS
    clauses = []
    for term in terms:
        if scope is Scope.GROUPS:
            clauses.append(GroupNameContains(term))
        else:
            clauses.append(
                AnyOf(tuple(Contains(spec, term) for spec in fields)))
    if uid:
        clauses.append(UidContains(uid))
    return AllOf(tuple(clauses))


def collation_key(text):
    """Returns a locale-aware, case-insensitive sort key."""
    if text is None:
        text = ""
    return locale.strxfrm(str(text).casefold())


def sort_records(records, order):
    """Sort records by each key in `order` in turn. The sort is stable.

    Args:
        records (iterable): Record objects.
        order (tuple):      record keys, most significant first.

    Returns:
        records (list):     the sorted records.

    """
    def _key(record):
        return tuple(collation_key(record.data.get(name)) for name in order)

    return sorted(records, key=_key)
