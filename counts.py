from collections import defaultdict
from datetime import datetime
from enum import Enum


class AggregationType(str, Enum):
    """How a person's assignments within one event are weighted"""
    SERVICE = 'SERVICE'  # every assignment counts 1
    EVENT = 'EVENT'      # one event counts 1, split across the person's assignments


def _event_date(event):
    """Return the YYYY-MM-DD part of an event's startDate, or None"""
    start = event.get('startDate')
    if not isinstance(start, str):
        return None
    try:
        datetime.strptime(start[:10], '%Y-%m-%d')
    except ValueError:
        return None
    return start[:10]


def _relevant_assignments(event, relevant_services):
    """Yield (person_name, service_id) for each relevant assignment of an event"""
    for assignment in event.get('eventServices') or []:
        service_id = assignment.get('serviceId')
        if service_id is None or service_id not in relevant_services:
            continue
        person_name = assignment.get('name')
        yield ('?' if person_name is None else person_name), service_id


def _service_name(services_dict, service_id):
    service = services_dict.get(service_id)
    if service is None:
        service = services_dict.get(str(service_id))
    if not service or service.get('name') is None:
        return '?'
    return service['name']


def _increment(aggregation_type, assignments_in_event):
    if aggregation_type == AggregationType.EVENT:
        return 1 / assignments_in_event
    return 1


def count_per_person(events, services_dict, relevant_services,
                     min_services_count=1, aggregation_type=AggregationType.SERVICE):
    """
    Count the number of assignments per person and service.

    Args:
        events: list of event dicts (with 'startDate' and 'eventServices')
        services_dict: mapping of service id -> service dict (for the readable name)
        relevant_services: service ids to include, all other assignments are skipped
        min_services_count: only keep persons whose total count is >= this value
        aggregation_type: SERVICE counts every assignment, EVENT splits one unit
            across all of a person's assignments in the same event

    Returns:
        list of {'person', 'serviceName', 'count'} dicts
    """
    aggregation_type = AggregationType(aggregation_type)
    relevant_services = set(relevant_services)
    print(f"📊 Counting services per person for services: {list(relevant_services)}")

    # (person, serviceName) -> count, insertion order = first seen
    counts = {}

    for event in events:
        if not _event_date(event):
            continue

        services_per_person = defaultdict(list)
        for person_name, service_id in _relevant_assignments(event, relevant_services):
            services_per_person[person_name].append(_service_name(services_dict, service_id))

        for person_name, service_names in services_per_person.items():
            increment = _increment(aggregation_type, len(service_names))
            for service_name in service_names:
                key = (person_name, service_name)
                counts[key] = counts.get(key, 0) + increment

    totals = defaultdict(float)
    for (person_name, _), count in counts.items():
        totals[person_name] += count

    data_points = [
        {'person': person_name, 'serviceName': service_name, 'count': count}
        for (person_name, service_name), count in counts.items()
        if totals[person_name] >= min_services_count
    ]

    print(f"✅ {len(data_points)} data points for "
          f"{sum(1 for t in totals.values() if t >= min_services_count)} of {len(totals)} persons")
    return data_points


def cumulative_person_time(events, relevant_services,
                           min_services_count=1, aggregation_type=AggregationType.SERVICE):
    """
    Count the number of assignments per person and event date.

    Same filtering and weighting as count_per_person, bucketed by the
    calendar day of each event instead of the service name. Persons below
    min_services_count (summed over all dates) are dropped.

    Returns:
        list of {'person', 'count', 'date'} dicts, date as YYYY-MM-DD
    """
    aggregation_type = AggregationType(aggregation_type)
    relevant_services = set(relevant_services)
    print(f"📈 Cumulating services per person over time for services: {list(relevant_services)}")

    # person -> date -> count
    counts_by_person = {}

    for event in events:
        event_date = _event_date(event)
        if not event_date:
            continue

        assignments = list(_relevant_assignments(event, relevant_services))

        services_per_person = defaultdict(int)
        for person_name, _ in assignments:
            services_per_person[person_name] += 1

        for person_name, _ in assignments:
            increment = _increment(aggregation_type, services_per_person[person_name])
            dates = counts_by_person.setdefault(person_name, {})
            dates[event_date] = dates.get(event_date, 0) + increment

    data_points = []
    for person_name, dates in counts_by_person.items():
        if sum(dates.values()) < min_services_count:
            continue
        for event_date, count in dates.items():
            data_points.append({'person': person_name, 'count': count, 'date': event_date})

    print(f"✅ {len(data_points)} dated data points")
    return data_points
