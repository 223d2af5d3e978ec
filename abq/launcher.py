# -*- coding: utf-8 -*-
"""abq.launcher
License:  MIT
About:
Opens companion applications (contacts editor, browser, maps, email)
for a person, using the value preferred by the --home/--work options.

"""
import os
import subprocess
from urllib.parse import quote_plus

from abq.errors import error_pass
from abq.fields import FIELD, format_address, select_preferred

GOOGLE_MAPS_URL = "https://maps.google.com/maps?q={}"
OSM_URL = "https://www.openstreetmap.org/search?query={}"

MAP_PROVIDERS = {
    "google": GOOGLE_MAPS_URL,
    "osm": OSM_URL,
}


class Launcher():
    """Hands resource locators to external applications.

    Attributes:
        store (ContactStore):   the store records come from.
        opener (str):           command used to open a locator.
        editor (str):           editor used to edit a record file.

    """
    def __init__(self, store, opener="xdg-open", editor=None):
        """Initializes a Launcher() object."""
        self.store = store
        self.opener = opener
        self.editor = editor or os.environ.get("EDITOR")

    def _preferred(self, record, key, preference):
        spec = FIELD[key]
        value = self.store.value(record, spec)
        if value is None:
            return None
        return select_preferred(value.value, preference, spec)

    def open_url(self, url):
        """Open a locator with the configured opener. Failures are
        reported but not fatal.

        Args:
            url (str):  the locator to open.

        """
        try:
            subprocess.run([self.opener, url], check=True)
        except (OSError, subprocess.SubprocessError):
            error_pass(f"failure opening {url} with {self.opener}")

    def open_contact(self, record, edit=False):
        """Show a person in the contacts editor, or edit its file with
        $EDITOR.

        Args:
            record (Record):    the person to show.
            edit (bool):        open the record for editing.

        """
        if not edit:
            self.open_url(record.path)
        elif self.editor:
            try:
                subprocess.run([self.editor, record.path], check=True)
            except (OSError, subprocess.SubprocessError):
                error_pass(f"failure editing file {record.path}")
        else:
            error_pass("$EDITOR is required and not set")

    def open_browser(self, record, preference):
        """Open the preferred URL of a person."""
        url = self._preferred(record, "websites", preference)
        if url:
            self.open_url(url)

    def open_map(self, record, preference, provider="google"):
        """Open the preferred address of a person with a map provider."""
        address = self._preferred(record, "addresses", preference)
        if address:
            query = quote_plus(format_address(address))
            self.open_url(MAP_PROVIDERS[provider].format(query))

    def open_email(self, record, preference):
        """Start a new message to the preferred email of a person."""
        email = self._preferred(record, "emails", preference)
        if email:
            self.open_url(f"mailto:{email}")

    def dispatch(self, record, options):
        """Run the highest priority launch requested in `options`.

        Priority: contacts editor, browser, Google Maps, OpenStreetMap,
        email.

        Args:
            record (Record):    the person to launch for.
            options (Options):  the parsed options.

        Returns:
            launched (bool):    whether a launch was requested.

        """
        if options.contacts_app:
            self.open_contact(record, options.edit)
        elif options.url:
            self.open_browser(record, options.preference)
        elif options.map:
            self.open_map(record, options.preference, "google")
        elif options.osm:
            self.open_map(record, options.preference, "osm")
        elif options.email:
            self.open_email(record, options.preference)
        else:
            return False
        return True
