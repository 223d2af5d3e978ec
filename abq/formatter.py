# -*- coding: utf-8 -*-
"""abq.formatter
License:  MIT
About:
Renders person and group records as text for the terminal, driven by
the field catalog in abq.fields.

"""
import re

from rich.text import Text

from abq.fields import (FIELD, FIELDS, HOME_LABEL, MOBILE_LABEL,
                        NAME_FIELDS, NAME_LABEL, STANDARD_FIELDS,
                        UID_LABEL, WORK_LABEL, DisplayForm, Kind,
                        abbreviate, format_address, value_with_label)
from abq.query import PERSON_ORDER, sort_records
from abq.store import strip_store_suffix

BRIEF_PHONE_LABELS = (MOBILE_LABEL, HOME_LABEL, WORK_LABEL)
BRIEF_EMAIL_LABELS = (HOME_LABEL, WORK_LABEL)
NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def formatted_name(values):
    """Build a display name from fetched name values.

    The nickname is used instead of the first name when present. The
    organization is used only when there is neither a first name (or
    nickname) nor a last name.

    Args:
        values (dict):  FieldValue objects by field key.

    Returns:
        name (str):     the display name, possibly empty.

    """
    first = values.get("nickname") or values.get("first")
    last = values.get("last")
    if first or last:
        return " ".join(value.value for value in (first, last) if value)
    organization = values.get("company")
    if organization:
        return organization.value
    return ""


def format_date(value):
    """Format a date as 'Weekday, Month Day, Year'."""
    return f"{value:%A}, {value:%B} {value.day}, {value:%Y}"


def match_summary(count):
    """Returns the summary line for a result count, or None for a single
    match.

    """
    if count == 1:
        return None
    return f"{count} matches"


class Formatter():
    """Formats records for display.

    Attributes:
        store (ContactStore):   the store records come from.
        form (DisplayForm):     the display form.
        show_uid (bool):        append the record uid.
        abbrev (bool):          abbreviate multi-value labels in the
    standard and plain forms.
        styles (dict):          rich Style objects by element name
    ('label', 'name', 'value', 'group').

    """
    def __init__(
            self,
            store,
            form=DisplayForm.STANDARD,
            show_uid=False,
            abbrev=True,
            styles=None):
        """Initializes a Formatter() object."""
        self.store = store
        self.form = form
        self.show_uid = show_uid
        self.abbrev = abbrev
        self.styles = styles or {}
        self._renderers = {
            Kind.PLAIN: self._render_plain,
            Kind.MULTILINE: self._render_multiline,
            Kind.DATE: self._render_date,
            Kind.MULTI_STRING: self._render_multistring,
            Kind.MULTI_ADDRESS: self._render_address,
            Kind.MULTI_PROFILE: self._render_profile,
        }

    @property
    def _collapsed(self):
        return self.form in (DisplayForm.STANDARD, DisplayForm.PLAIN)

    def _style(self, name):
        return self.styles.get(name)

    def _label(self, text, label, width):
        """Append a right-aligned label, unless labels are off (width is
        None).

        """
        if width is None:
            return
        text.append(f"{label:>{width}}", style=self._style("label"))
        text.append(": ")

    @staticmethod
    def _blank(text, width):
        if width is not None:
            text.append(" " * (width + 2))

    def _label_width(self, values):
        """Returns the widest label among the fetched values."""
        width = 0
        for key, value in values.items():
            spec = FIELD[key]
            if self._collapsed and spec in NAME_FIELDS:
                this_width = len(NAME_LABEL)
            elif spec.kind is Kind.MULTI_PROFILE:
                this_width = max(
                    len(entry.value.service) for entry in value.value)
            else:
                this_width = spec.width
            width = max(width, this_width)
        return width

    def _render_plain(self, text, spec, value, width):
        self._label(text, spec.label, width)
        text.append(value.value, style=self._style("value"))
        text.append("\n")

    def _render_multiline(self, text, spec, value, width):
        lines = NEWLINE_RE.split(value.value.rstrip("\r\n"))
        for index, line in enumerate(lines):
            if index == 0:
                self._label(text, spec.label, width)
            else:
                self._blank(text, width)
            text.append(line, style=self._style("value"))
            text.append("\n")

    def _render_date(self, text, spec, value, width):
        self._label(text, spec.label, width)
        text.append(format_date(value.value), style=self._style("value"))
        text.append("\n")

    def _render_entries(self, text, spec, value, width, render):
        abbrev = self.abbrev and self._collapsed
        for index, entry in enumerate(value.value):
            if index == 0:
                self._label(text, spec.label, width)
            else:
                self._blank(text, width)
            text.append(render(entry.value), style=self._style("value"))
            kind = abbreviate(entry.label, abbrev)
            if kind:
                text.append(f" ({kind})")
            text.append("\n")

    def _render_multistring(self, text, spec, value, width):
        self._render_entries(text, spec, value, width, str)

    def _render_address(self, text, spec, value, width):
        self._render_entries(text, spec, value, width, format_address)

    def _render_profile(self, text, spec, value, width):
        for entry in value.value:
            self._label(text, entry.value.service, width)
            text.append(entry.value.username, style=self._style("value"))
            text.append("\n")

    def _render(self, text, spec, value, width):
        try:
            renderer = self._renderers[value.kind]
        except KeyError as exc:
            raise ValueError(f"no renderer for {value.kind}") from exc
        renderer(text, spec, value, width)

    def _brief(self, values):
        """Render a person on one line: name, then the first phone
        number of each kind and the first email of each kind.

        """
        text = Text()
        name = formatted_name(values)
        if name:
            text.append(name, style=self._style("name"))
            text.append(" ")
        for key, labels in (("phones", BRIEF_PHONE_LABELS),
                            ("emails", BRIEF_EMAIL_LABELS)):
            entries = values.get(key)
            if not entries:
                continue
            for label in labels:
                value = value_with_label(entries.value, label)
                if value is not None:
                    text.append(f"{value} ({abbreviate(label)}) ")
        text.append("\n")
        return text

    def format_person(self, record):
        """Render one person in the configured display form.

        Args:
            record (Record):    the person to render.

        Returns:
            text (Text):    the rendered record.

        """
        if self.form is DisplayForm.RAW:
            return Text(self.store.description(record))

        fields = STANDARD_FIELDS if self._collapsed else FIELDS
        values = self.store.values(record, fields)

        if self.form is DisplayForm.BRIEF:
            return self._brief(values)

        width = self._label_width(values)
        if self.form is DisplayForm.PLAIN:
            width = None

        text = Text()
        name_shown = False
        for spec in fields:
            value = values.get(spec.key)
            if value is None:
                continue
            if self._collapsed and spec in NAME_FIELDS:
                if not name_shown:
                    self._label(text, NAME_LABEL, width)
                    text.append(
                        formatted_name(values), style=self._style("name"))
                    text.append("\n")
                    name_shown = True
                continue
            self._render(text, spec, value, width)

        if self.show_uid:
            self._label(text, UID_LABEL, width)
            text.append(strip_store_suffix(record.id))
            text.append("\n")

        text.append("\n")
        return text

    def format_group(self, group):
        """Render one group: its name, its member count and, in the long
        form, the name of each member.

        Args:
            group (Record): the group to render.

        Returns:
            text (Text):    the rendered group.

        """
        if self.form is DisplayForm.RAW:
            return Text(self.store.description(group))

        text = Text()
        text.append(self.store.group_name(group), style=self._style("group"))
        if self.form is DisplayForm.BRIEF:
            text.append("\n")
            return text

        members = sort_records(self.store.members(group), PERSON_ORDER)
        count = len(members)
        text.append(f" ({count} member{'' if count == 1 else 's'})\n")

        if self.form is DisplayForm.LONG:
            name_fields = NAME_FIELDS + (FIELD["company"],)
            for member in members:
                name = formatted_name(self.store.values(member, name_fields))
                text.append("\t")
                text.append(name, style=self._style("name"))
                text.append("\n")
        return text

    def format(self, record):
        """Render a person or a group."""
        if record.kind == record.GROUP:
            return self.format_group(record)
        return self.format_person(record)
