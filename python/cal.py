#!/usr/bin/env python3
"""
Name: cal
Description: displays a month or a whole year as a Sunday-first calendar
License: gpl
"""

import sys
import os
import re
import argparse
from collections import namedtuple
from datetime import date

VERSION = '1.0.0'

EX_SUCCESS = 0
EX_FAILURE = 1

WEEKDAY_NAMES = ('Su', 'Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa')
MONTH_NAMES = ('', 'January', 'February', 'March', 'April', 'May', 'June',
               'July', 'August', 'September', 'October', 'November', 'December')
DAY_LABELS = tuple(f"{day:>2}" for day in range(1, 32))
BLANK = '  '

MONTH_WIDTH = 20
YEAR_WIDTH = 64
GUTTER = '  '
ROWS, COLUMNS = 6, 7

# Bold, black on bright white.
HIGHLIGHT_ON = '\033[1;30;107m'
HIGHLIGHT_OFF = '\033[0m'

# Days before the first of each month in a common year.
_DAYS_BEFORE = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)

_INTEGER = re.compile(r'^[+-]?[0-9]+$')

DateRequest = namedtuple('DateRequest', ['mode', 'year', 'month', 'title'])


class CalError(ValueError):
    """Invalid command-line input."""


# --- Date arithmetic ---

def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def ordinal(year: int, month: int, day: int) -> int:
    """
    Proleptic Gregorian day number, with 0001-01-01 as day 1.

    Works for any integer year and lets `day` run outside the month, so
    day 0 is the last day of the previous month.
    """
    y = year - 1
    days = y * 365 + y // 4 - y // 100 + y // 400 + _DAYS_BEFORE[month] + day
    if month > 2 and is_leap_year(year):
        days += 1
    return days


def days_in_month(year: int, month: int) -> int:
    """Returns the number of days in a month via day zero of the next one."""
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    return ordinal(next_year, next_month, 0) - ordinal(year, month, 0)


def first_weekday(year: int, month: int) -> int:
    """Weekday of the first of the month, Sunday = 0 .. Saturday = 6."""
    # Day 1 of the ordinal is a Monday.
    return ordinal(year, month, 1) % 7


# --- Month model ---

def highlight(cell: str) -> str:
    return f"{HIGHLIGHT_ON}{cell}{HIGHLIGHT_OFF}"


class MonthView:
    """One calendar month. Holds no state beyond its (year, month) pair."""

    def __init__(self, year: int, month: int):
        self.year = year
        self.month = month

    def __eq__(self, other):
        if not isinstance(other, MonthView):
            return NotImplemented
        return (self.year, self.month) == (other.year, other.month)

    def __hash__(self):
        return hash((self.year, self.month))

    def __repr__(self):
        return f"MonthView({self.year}, {self.month})"

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month]

    @property
    def title(self) -> str:
        return f"{self.name} {self.year}"

    def contains(self, day) -> bool:
        return day is not None and (day.year, day.month) == (self.year, self.month)

    def grid(self, today=None, decorate=None) -> list:
        """
        Returns a 6x7 grid of two-character cells, Sunday first.

        When `today` falls in this month and a `decorate` function is given,
        today's cell is passed through it.
        """
        days = list(DAY_LABELS[:days_in_month(self.year, self.month)])
        if decorate is not None and self.contains(today):
            days[today.day - 1] = decorate(days[today.day - 1])

        cells = [BLANK] * first_weekday(self.year, self.month) + days
        cells += [BLANK] * (ROWS * COLUMNS - len(cells))

        return [cells[row * COLUMNS:(row + 1) * COLUMNS] for row in range(ROWS)]

    def __str__(self):
        return render_month(self)


# --- Layout ---

def center(text: str, width: int) -> str:
    """
    Centers `text` in exactly `width` characters, left padding with
    (width - len) // 2 spaces. Text that doesn't fit is truncated.
    """
    if len(text) >= width:
        return text[:width]
    offset = (width - len(text)) // 2
    return ' ' * offset + text + ' ' * (width - len(text) - offset)


def weekday_header() -> str:
    return ' '.join(WEEKDAY_NAMES)


def render_month(view, today=None, decorate=None) -> str:
    """Title, weekday header and six week rows for a single month."""
    lines = [center(view.title, MONTH_WIDTH), weekday_header()]
    lines.extend(' '.join(row) for row in view.grid(today, decorate))
    return ''.join(line + '\n' for line in lines)


def render_section(views, today=None, decorate=None) -> str:
    """Several months side by side, separated by a two-space gutter."""
    grids = [view.grid(today, decorate) for view in views]

    lines = [
        GUTTER.join(center(view.name, MONTH_WIDTH) for view in views),
        GUTTER.join(weekday_header() for _ in views),
    ]
    for i in range(ROWS):
        lines.append(GUTTER.join(' '.join(grid[i]) for grid in grids))

    return ''.join(line + '\n' for line in lines)


def render_year(year: int, title=None, today=None, decorate=None) -> str:
    """
    A year heading followed by four sections of three months, one blank
    line between sections. `title` is printed as given; it defaults to
    the year number.
    """
    if title is None:
        title = str(year)

    sections = []
    for first in range(1, 13, 3):
        views = [MonthView(year, month) for month in range(first, first + 3)]
        sections.append(render_section(views, today, decorate))

    return center(title, YEAR_WIDTH) + '\n' + '\n'.join(sections)


# --- Command line ---

def parse_int(token: str, what: str) -> int:
    if not _INTEGER.match(token):
        raise CalError(f"bad {what}: '{token}'")
    return int(token)


def resolve(args, today=None) -> DateRequest:
    """Turns positional arguments into a DateRequest. Raises CalError."""
    if today is None:
        today = date.today()

    if len(args) == 0:
        return DateRequest('current', today.year, today.month, None)

    if len(args) == 1:
        year = parse_int(args[0], 'year')
        return DateRequest('year', year, None, args[0])

    if len(args) == 2:
        month = parse_int(args[0], 'month')
        year = parse_int(args[1], 'year')
        if not 1 <= month <= 12:
            raise CalError(f"bad month: {month}")
        return DateRequest('month', year, month, None)

    raise CalError("too many arguments")


def render(request, today=None, decorate=None) -> str:
    if request.mode == 'year':
        return render_year(request.year, request.title, today, decorate)
    return render_month(MonthView(request.year, request.month), today, decorate)


def choose_decorator(color: str, stream):
    """Returns the cell decorator for the --color setting, or None."""
    if color == 'always' or (color == 'auto' and stream.isatty()):
        return highlight
    return None


def main(argv=None):
    """Parses arguments and prints the requested calendar."""
    program_name = os.path.basename(sys.argv[0])

    parser = argparse.ArgumentParser(
        description="Displays a calendar.",
        usage="%(prog)s [--color WHEN] [[month] year]"
    )
    parser.add_argument('-V', '--version', action='version',
                        version=f'%(prog)s {VERSION}')
    parser.add_argument('--color', choices=('auto', 'always', 'never'), default='auto',
                        help='Highlight today: auto (only on a terminal), always or never.')
    parser.add_argument('args', nargs='*', help='Month and/or year.')

    parsed_args = parser.parse_args(argv)

    today = date.today()
    try:
        request = resolve(parsed_args.args, today)
    except CalError as e:
        print(f"{program_name}: {e}", file=sys.stderr)
        sys.exit(EX_FAILURE)

    decorate = choose_decorator(parsed_args.color, sys.stdout)
    sys.stdout.write(render(request, today, decorate))
    sys.stdout.flush()
    return EX_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
