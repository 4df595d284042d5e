from html import escape


def _or_placeholder(value):
    return '?' if value is None else value


def _service_label(services_dict, service_id):
    service = services_dict.get(service_id) or services_dict.get(str(service_id)) or {}
    return _or_placeholder(service.get('name'))


def event_list_html(events, services_dict, selected_service_ids):
    """Create HTML for the event list, showing only the selected services per event"""
    selected_service_ids = set(selected_service_ids)
    parts = []

    for event in events:
        title = f"{_or_placeholder(event.get('name'))} ({event.get('startDate')} - {event.get('endDate')})"
        parts.append(f'<h2 class="event-title">{escape(title)}</h2>')

        items = []
        for assignment in event.get('eventServices') or []:
            service_id = assignment.get('serviceId')
            if service_id is None or service_id not in selected_service_ids:
                continue
            label = f"{_service_label(services_dict, service_id)} {_or_placeholder(assignment.get('name'))}"
            items.append(f'<li>{escape(label)}</li>')

        if not items:
            items.append('<li>No services</li>')
        parts.append('<ul class="event-services">' + ''.join(items) + '</ul>')

    return '\n'.join(parts)
