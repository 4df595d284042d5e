import calendar
import re
from datetime import datetime

from config import (DEFAULT_CALENDARS, DEFAULT_SERVICES, DEFAULT_TIMEFRAME_MONTHS,
                    MIN_SERVICES_COUNT, DEFAULT_AGGREGATION)
from counts import AggregationType


def default_filter_options(today=None):
    """Filter options used when the user doesn't choose their own"""
    from_date, to_date = default_date_range(DEFAULT_TIMEFRAME_MONTHS, today)
    return {
        'calendars': list(DEFAULT_CALENDARS),
        'services': list(DEFAULT_SERVICES),
        'from_date': from_date,
        'to_date': to_date,
        'min_services_count': MIN_SERVICES_COUNT,
        'aggregation_type': AggregationType(DEFAULT_AGGREGATION)
    }


def default_date_range(months=DEFAULT_TIMEFRAME_MONTHS, today=None):
    """Today at 00:00 until the same day `months` later at 23:59:59"""
    today = today or datetime.now()
    from_date = today.replace(hour=0, minute=0, second=0, microsecond=0)

    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp e.g. Aug 31 + 6 months to Feb 28/29
    day = min(from_date.day, calendar.monthrange(year, month)[1])

    to_date = from_date.replace(year=year, month=month, day=day,
                                hour=23, minute=59, second=59, microsecond=999999)
    return from_date, to_date


def parse_start_date(value):
    """Parse an ISO startDate ('2024-01-10T09:00:00Z') into a naive datetime, or None"""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def filter_events(events, relevant_calendars, from_date, to_date):
    """Keep events of the given calendars that start within [from_date, to_date]"""
    calendar_ids = {str(c) for c in relevant_calendars}
    filtered = []

    for event in events:
        start = parse_start_date(event.get('startDate'))
        if start is None:
            continue

        event_calendar = event.get('calendar') or {}
        if str(event_calendar.get('domainIdentifier')) not in calendar_ids:
            continue

        if from_date <= start <= to_date:
            filtered.append(event)

    print(f"✅ {len(filtered)} of {len(events)} events in calendars {sorted(calendar_ids)} "
          f"between {from_date.date()} and {to_date.date()}")
    return filtered


def parse_id_list(text):
    """'6, 69 72' -> [6, 69, 72]"""
    ids = []
    for token in re.split(r'[,\s]+', text.strip()):
        if not token:
            continue
        if not token.isdigit():
            raise ValueError(f"Not a valid id: {token!r}")
        ids.append(int(token))
    return ids


def _ask_date(prompt):
    while True:
        value = input(prompt).strip()
        try:
            return datetime.strptime(value, '%Y-%m-%d')
        except ValueError:
            print("Please enter a date as YYYY-MM-DD.")


def get_user_filter_options():
    """Get user input for the filter options with defaults"""
    options = default_filter_options()

    print(f"\n🔎 FILTER SETTINGS")
    print("="*50)
    print(f"   Calendars: {options['calendars']}")
    print(f"   Services: {options['services']}")
    print(f"   From {options['from_date']:%Y-%m-%d} to {options['to_date']:%Y-%m-%d}")
    print(f"   Minimum # services: {options['min_services_count']}")
    print(f"   Aggregation: {options['aggregation_type'].value}")

    while True:
        choice = input(f"\nUse default filter settings? (y/n): ").strip().lower()
        if choice in ['y', 'yes']:
            return options
        elif choice in ['n', 'no']:
            break
        else:
            print("Please enter 'y' or 'n'.")

    while True:
        try:
            options['calendars'] = parse_id_list(input("Enter calendar ids (e.g. 2, 5): "))
            options['services'] = parse_id_list(input("Enter service ids (e.g. 6, 69, 72): "))
            break
        except ValueError:
            print("Please enter numeric ids separated by commas.")

    options['from_date'] = _ask_date("Enter start date (YYYY-MM-DD): ")
    to_date = _ask_date("Enter end date (YYYY-MM-DD): ")
    options['to_date'] = to_date.replace(hour=23, minute=59, second=59, microsecond=999999)

    while True:
        try:
            min_count = float(input("Enter minimum # services per person: "))
            if min_count < 0:
                raise ValueError
            options['min_services_count'] = min_count
            break
        except ValueError:
            print("Please enter a non-negative number.")

    while True:
        choice = input("Count every service or split per event? (service/event): ").strip().upper()
        if choice in ['SERVICE', 'EVENT']:
            options['aggregation_type'] = AggregationType(choice)
            break
        print("Please enter 'service' or 'event'.")

    return options
