#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""abq
Version:  0.1.0
License:  MIT
About:
A terminal address book query tool. Searches a local, file-based contact
store by name (or any field), prints matching records, and optionally
opens a companion application (contacts editor, browser, map, email)
for the first match.

usage: abq [options] term [term ...]

  -s, --std             display records in standard form (default)
  -b, --brief           display records in brief form
  -l, --long            display records in long form
  -r, --raw             display records in raw form
  -P, --plain           display records without labels

  -a, --all             search all person fields (default)
  -n, --name            search name fields only
  -g, --group           search group names only

  -u, --uid[=id]        display unique ids; search for id if given
      --groups          list all groups

  -A, --address         open contacts editor with person
  -e, --edit            edit person with $EDITOR
  -U, --url             open browser with URL of person
  -M, --map             open Google Maps with address of person
  -O, --osm             open OpenStreetMap with address of person
  -E, --email           open email application with message for person
  -H, --home            use 'home' values for applications
  -W, --work            use 'work' values for applications


Copyright © 2012 Mike Carlton

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

"""
import argparse
import configparser
import locale
import os
import sys
from collections import namedtuple

from rich.color import ColorParseError
from rich.console import Console
from rich.style import Style

from abq.errors import error_exit
from abq.fields import DisplayForm, Preference, Scope
from abq.formatter import Formatter, match_summary
from abq.launcher import Launcher
from abq.query import GROUP_ORDER, PERSON_ORDER, build_query, sort_records
from abq.store import ContactStore, Record

APP_NAME = "abq"
APP_VERS = "0.1.0"
APP_COPYRIGHT = "Copyright © 2012 Mike Carlton."
APP_LICENSE = "Released under MIT license."
DEFAULT_DATA_DIR = f"$HOME/.local/share/{APP_NAME}"
DEFAULT_CONFIG_FILE = f"$HOME/.config/{APP_NAME}/config"
DEFAULT_CONFIG = (
    "[main]\n"
    f"data_dir = {DEFAULT_DATA_DIR}\n"
    "# command used to open URLs, maps and email\n"
    "opener = xdg-open\n"
    "# standard, brief, long, raw or plain\n"
    "default_form = standard\n"
    "# show labels as a single character in standard/plain form\n"
    "abbreviate_labels = true\n"
    "\n"
    "[colors]\n"
    "disable_colors = false\n"
    "disable_bold = false\n"
    "# set to 'true' if your terminal pager supports color\n"
    "# output and you would like color output when using\n"
    "# the '--pager' ('-p') option\n"
    "color_pager = false\n"
    "# custom colors\n"
    "#label = bright_black\n"
    "#name = yellow\n"
    "#value = default\n"
    "#group = blue\n"
    "#summary = bright_black\n"
)

Options = namedtuple(
    "Options",
    [
        "terms",
        "form",
        "scope",
        "preference",
        "show_uid",
        "uid",
        "list_groups",
        "contacts_app",
        "edit",
        "url",
        "map",
        "osm",
        "email",
        "pager",
        "abbrev",
    ])


class Config():
    """Reads the configuration file.

    Attributes:
        config_file (str):  application config file.
        data_dir (str):     directory containing contact records.
        dflt_config (str):  the default config if none is present.

    """
    def __init__(
            self,
            config_file,
            data_dir,
            dflt_config):
        """Initializes a Config() object."""
        self.config_file = config_file
        self.data_dir = data_dir
        self.config_dir = os.path.dirname(self.config_file)
        self.dflt_config = dflt_config

        self.opener = "xdg-open"
        self.default_form = DisplayForm.STANDARD
        self.abbrev = True

        # default colors
        self.color_label = "bright_black"
        self.color_name = "yellow"
        self.color_value = "default"
        self.color_group = "blue"
        self.color_summary = "bright_black"
        self.color_bold = True
        self.color_pager = False
        self.styles = {}

        self._default_config()
        self._parse_config()
        self._verify_data_dir()

    def _default_config(self):
        """Create a default configuration directory and file if they
        do not already exist.

        """
        if not os.path.exists(self.config_file):
            try:
                os.makedirs(self.config_dir, exist_ok=True)
                with open(self.config_file, "w",
                          encoding="utf-8") as config_file:
                    config_file.write(self.dflt_config)
            except IOError:
                error_exit(
                    "Config file doesn't exist "
                    "and can't be created")

    def _apply_colors(self):
        """Build styles from the configured colors, keeping the previous
        style for invalid color names.

        """
        for name, color, bold in (
                ("label", self.color_label, False),
                ("name", self.color_name, self.color_bold),
                ("value", self.color_value, False),
                ("group", self.color_group, self.color_bold),
                ("summary", self.color_summary, False)):
            try:
                self.styles[name] = Style(color=color, bold=bold)
            except ColorParseError:
                pass

    def _parse_config(self):
        """Read and parse the configuration file."""
        config = configparser.ConfigParser()
        if not os.path.isfile(self.config_file):
            error_exit("Config file not found")
        try:
            config.read(self.config_file, encoding="utf-8")
        except configparser.Error:
            error_exit("Error reading config file")

        # apply default colors
        self._apply_colors()

        if "main" in config:
            main = config["main"]
            if main.get("data_dir"):
                self.data_dir = os.path.expandvars(
                    os.path.expanduser(main.get("data_dir")))
            self.opener = main.get("opener", self.opener)
            form = main.get("default_form", "standard").lower()
            try:
                self.default_form = DisplayForm(form)
            except ValueError:
                error_exit(f"Invalid default_form '{form}' in config file")
            try:
                self.abbrev = main.getboolean("abbreviate_labels", True)
            except ValueError:
                error_exit("Invalid abbreviate_labels in config file")

        if "colors" in config:
            colors = config["colors"]
            self.color_label = colors.get("label", self.color_label)
            self.color_name = colors.get("name", self.color_name)
            self.color_value = colors.get("value", self.color_value)
            self.color_group = colors.get("group", self.color_group)
            self.color_summary = colors.get("summary", self.color_summary)

            try:
                # disable colors
                if colors.getboolean("disable_colors", False):
                    self.color_label = "default"
                    self.color_name = "default"
                    self.color_value = "default"
                    self.color_group = "default"
                    self.color_summary = "default"

                # disable bold
                if colors.getboolean("disable_bold", False):
                    self.color_bold = False

                # color paging (disabled by default)
                self.color_pager = colors.getboolean("color_pager", False)
            except ValueError:
                error_exit("Invalid boolean in [colors] section")

            # try to apply requested custom colors
            self._apply_colors()

    def _verify_data_dir(self):
        """Create the contacts data directory if it doesn't exist."""
        if not os.path.exists(self.data_dir):
            try:
                os.makedirs(self.data_dir)
            except IOError:
                error_exit(
                    f"{self.data_dir} doesn't exist "
                    "and can't be created"
                )
        elif not os.path.isdir(self.data_dir):
            error_exit(f"{self.data_dir} is not a directory")
        elif not os.access(self.data_dir, os.R_OK | os.X_OK):
            error_exit(
                "You don't have read/execute permissions to "
                f"{self.data_dir}")


class UsageParser(argparse.ArgumentParser):
    """An ArgumentParser that answers bad options with the full help
    text and a zero exit status.

    """
    def error(self, message):
        self.print_help(sys.stderr)
        sys.exit(0)


def _expand_uid_option(argv):
    """Split the optional value of --uid into its own option.

    `--uid=<id>` becomes `--uid --uid-match <id>`. A bare `--uid` or
    `-u` never consumes the following search term, and `-u` combines
    with other short flags (`-ul`).

    """
    expanded = []
    positional = False
    for arg in argv:
        if positional or arg == "--":
            positional = True
            expanded.append(arg)
        elif arg.startswith("--uid="):
            expanded.extend(["--uid", "--uid-match", arg[len("--uid="):]])
        else:
            expanded.append(arg)
    return expanded


def parse_args(argv=None):
    """Parse command line arguments.

    Args:
        argv (list):    the arguments, defaults to sys.argv[1:].

    Returns:
        parser (ArgumentParser):    the argument parser.
        args (Namespace):           the command line arguments provided.

    """
    if argv is None:
        argv = sys.argv[1:]
    parser = UsageParser(
        prog=APP_NAME,
        description='Search the address book and display matches.')
    parser.add_argument(
        'terms',
        nargs='*',
        metavar='term',
        help='search term(s); every term must match')
    parser.add_argument(
        '-c',
        '--config',
        dest='config',
        metavar='<file>',
        help='config file')

    form = parser.add_argument_group('display forms')
    for short, long, value, text in (
            ('-s', '--std', DisplayForm.STANDARD,
             'display records in standard form (default)'),
            ('-b', '--brief', DisplayForm.BRIEF,
             'display records in brief form'),
            ('-l', '--long', DisplayForm.LONG,
             'display records in long form'),
            ('-r', '--raw', DisplayForm.RAW,
             'display records in raw form'),
            ('-P', '--plain', DisplayForm.PLAIN,
             'display records without labels')):
        form.add_argument(
            short,
            long,
            dest='form',
            action='store_const',
            const=value,
            help=text)

    scope = parser.add_argument_group('search scope')
    parser.set_defaults(scope=Scope.ALL)
    for short, long, value, text in (
            ('-a', '--all', Scope.ALL,
             'search all person fields (default)'),
            ('-n', '--name', Scope.NAMES,
             'search name fields only'),
            ('-g', '--group', Scope.GROUPS,
             'search group names only')):
        scope.add_argument(
            short,
            long,
            dest='scope',
            action='store_const',
            const=value,
            help=text)

    parser.add_argument(
        '-u',
        '--uid',
        dest='show_uid',
        action='store_true',
        help='display unique ids; search for id if given (--uid=<id>)')
    parser.add_argument(
        '--uid-match',
        dest='uid',
        help=argparse.SUPPRESS)
    parser.add_argument(
        '--groups',
        dest='list_groups',
        action='store_true',
        help='list all groups')

    gui = parser.add_argument_group('applications')
    for short, long, dest, text in (
            ('-A', '--address', 'contacts_app',
             'open contacts editor with person'),
            ('-e', '--edit', 'edit',
             'edit person with $EDITOR'),
            ('-U', '--url', 'url',
             'open browser with URL of person'),
            ('-M', '--map', 'map',
             'open Google Maps with address of person'),
            ('-O', '--osm', 'osm',
             'open OpenStreetMap with address of person'),
            ('-E', '--email', 'email',
             'open email application with message for person')):
        gui.add_argument(
            short,
            long,
            dest=dest,
            action='store_true',
            help=text)
    parser.set_defaults(preference=Preference.NONE)
    gui.add_argument(
        '-H',
        '--home',
        dest='preference',
        action='store_const',
        const=Preference.HOME,
        help="use 'home' values for applications")
    gui.add_argument(
        '-W',
        '--work',
        dest='preference',
        action='store_const',
        const=Preference.WORK,
        help="use 'work' values for applications")

    parser.add_argument(
        '-p',
        '--pager',
        dest='pager',
        action='store_true',
        help='page output')
    parser.add_argument(
        '-V',
        '--version',
        dest='version',
        action='store_true',
        help='show version info')
    args = parser.parse_intermixed_args(_expand_uid_option(argv))
    return parser, args


def make_options(args, config):
    """Combine parsed arguments and configuration into Options."""
    return Options(
        terms=tuple(args.terms),
        form=args.form or config.default_form,
        scope=args.scope,
        preference=args.preference,
        show_uid=args.show_uid or args.uid is not None,
        uid=args.uid or None,
        list_groups=args.list_groups,
        contacts_app=args.contacts_app or args.edit,
        edit=args.edit,
        url=args.url,
        map=args.map,
        osm=args.osm,
        email=args.email,
        pager=args.pager,
        abbrev=config.abbrev)


def run(options, store, formatter, launcher, console, summary_style=None):
    """Search, print the results and launch an application for the
    first match if requested.

    Args:
        options (Options):          the parsed options.
        store (ContactStore):       the contact store.
        formatter (Formatter):      renders each record.
        launcher (Launcher):        opens applications.
        console (Console):          output console.
        summary_style (Style):      style of the match summary.

    """
    if options.list_groups:
        for group in sort_records(store.all_groups(), GROUP_ORDER):
            console.print(formatter.format_group(group), end="")
        return

    predicate = build_query(options.terms, options.scope, options.uid)
    if options.scope is Scope.GROUPS:
        kind, order = Record.GROUP, GROUP_ORDER
    else:
        kind, order = Record.PERSON, PERSON_ORDER
    results = store.records_matching(predicate, kind)

    for record in sort_records(results, order):
        console.print(formatter.format(record), end="")
        if kind == Record.PERSON and launcher.dispatch(record, options):
            break

    summary = match_summary(len(results))
    if summary:
        console.print(summary, style=summary_style)


def main(argv=None):
    """Entry point. Parses arguments, reads the configuration, searches
    the contact store and prints the results.

    """
    if os.environ.get("XDG_CONFIG_HOME"):
        config_file = os.path.join(
            os.path.expandvars(os.path.expanduser(
                os.environ["XDG_CONFIG_HOME"])), APP_NAME, "config")
    else:
        config_file = os.path.expandvars(
            os.path.expanduser(DEFAULT_CONFIG_FILE))

    if os.environ.get("XDG_DATA_HOME"):
        data_dir = os.path.join(
            os.path.expandvars(os.path.expanduser(
                os.environ["XDG_DATA_HOME"])), APP_NAME)
    else:
        data_dir = os.path.expandvars(
            os.path.expanduser(DEFAULT_DATA_DIR))

    parser, args = parse_args(argv)

    if args.version:
        print(f"{APP_NAME} {APP_VERS}")
        print(APP_COPYRIGHT)
        print(APP_LICENSE)
        return

    if not (args.terms or args.uid or args.list_groups):
        parser.print_help(sys.stderr)
        sys.exit(0)

    if args.config:
        config_file = os.path.expandvars(
            os.path.expanduser(args.config))

    config = Config(
        config_file,
        data_dir,
        DEFAULT_CONFIG)
    options = make_options(args, config)

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        # unsupported locale settings, keep the C collation order
        pass

    store = ContactStore(config.data_dir)
    formatter = Formatter(
        store,
        form=options.form,
        show_uid=options.show_uid,
        abbrev=options.abbrev,
        styles=config.styles)
    launcher = Launcher(store, opener=config.opener)
    console = Console(highlight=False, soft_wrap=True)

    # render the output with a pager if --pager or -p
    if options.pager:
        with console.pager(styles=config.color_pager):
            run(options, store, formatter, launcher, console,
                config.styles.get("summary"))
    else:
        run(options, store, formatter, launcher, console,
            config.styles.get("summary"))


def cli():
    """Console script entry point."""
    try:
        main()
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


# entry point
if __name__ == "__main__":
    cli()
