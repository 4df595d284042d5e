import requests

from config import CHURCHTOOLS_BASE_URL, CHURCHTOOLS_TOKEN
from filters import filter_events

TIMEOUT = 30


def make_request(endpoint, params=None):
    """Make request to the ChurchTools REST API, returns the 'data' member or None"""
    if not CHURCHTOOLS_BASE_URL:
        print("❌ CHURCHTOOLS_BASE_URL is not configured")
        return None

    url = f"{CHURCHTOOLS_BASE_URL}/api/{endpoint}"
    headers = {'Accept': 'application/json'}
    if CHURCHTOOLS_TOKEN:
        headers['Authorization'] = f"Login {CHURCHTOOLS_TOKEN}"

    try:
        response = requests.get(url, params=params or {}, headers=headers, timeout=TIMEOUT)
    except requests.RequestException as e:
        print(f"Network Error: {e}")
        return None

    if response.status_code != 200:
        print(f"HTTP Error {response.status_code}: {response.text[:200]}")
        return None

    try:
        body = response.json()
    except ValueError:
        print(f"API Error: {endpoint} did not return JSON")
        return None

    if isinstance(body, dict) and 'data' in body:
        return body['data']
    return body


def fetch_events(relevant_calendars, from_date, to_date):
    """Fetch events including their service assignments, filtered by calendar and date range"""
    print(f"\n📅 Fetching events for calendars: {relevant_calendars}")

    params = {
        'include': 'eventServices',
        'from': from_date.strftime('%Y-%m-%d'),
        'to': to_date.strftime('%Y-%m-%d')
    }
    all_events = make_request('events', params)
    if not all_events:
        print("⚠️ No events returned")
        return []

    # The server doesn't reliably honour the params, filter again locally
    return filter_events(all_events, relevant_calendars, from_date, to_date)


def fetch_services_dict():
    """Build service_id -> service mapping"""
    services = make_request('services')
    if not services:
        print("⚠️ No services returned")
        return {}

    lookup = {}
    for service in services:
        sid = service.get('id')
        if sid is not None:
            lookup[sid] = service

    print(f"✅ Loaded {len(lookup)} services")
    return lookup


def fetch_calendars():
    calendars = make_request('calendars') or []
    print(f"✅ Loaded {len(calendars)} calendars")
    return calendars


def fetch_service_groups():
    """Build service_group_id -> name mapping"""
    groups = make_request('servicegroups') or []
    return {g['id']: g.get('name', '') for g in groups if g.get('id') is not None}


def services_by_group(services):
    """Group services by their service group id"""
    by_group = {}
    for service in services:
        group_id = service.get('serviceGroupId')
        if group_id is None:
            continue
        by_group.setdefault(group_id, []).append({
            'id': service.get('id'),
            'name': service.get('nameTranslated') or service.get('name', '')
        })

    return by_group


def print_available_calendars(calendars):
    """Print the calendars with their ids, handy for choosing calendar ids"""
    print(f"\n📅 Available calendars:")
    for cal in calendars:
        print(f"   {cal.get('id', '?'):>5}  {cal.get('name', '?')}")


def print_available_services(services_dict):
    """Print the services per service group, handy for choosing service ids"""
    group_names = fetch_service_groups()
    for group_id, services in services_by_group(services_dict.values()).items():
        print(f"\n📋 {group_names.get(group_id, group_id)}")
        for service in services:
            print(f"   {service['id']:>5}  {service['name']}")


def print_event_services(events, services_dict, relevant_services):
    """Console printout for debugging, shows each event with its relevant services"""
    relevant_services = set(relevant_services)
    for event in events:
        print(f"Event: {event.get('name')} ({event.get('startDate')} - {event.get('endDate')})")
        assignments = event.get('eventServices') or []
        if not assignments:
            print("  No services for this event.")
        for assignment in assignments:
            if assignment.get('serviceId') not in relevant_services:
                continue
            service = services_dict.get(assignment['serviceId']) or {}
            person_name = assignment.get('name')
            print(f"  {service.get('name', '?')} {'?' if person_name is None else person_name}")
        print("-" * 37)
