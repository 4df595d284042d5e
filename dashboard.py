import os
import sys
import webbrowser

from config import CHURCHTOOLS_BASE_URL
from churchtools import (fetch_events, fetch_services_dict, fetch_calendars,
                         print_available_calendars, print_available_services,
                         print_event_services)
from counts import count_per_person, cumulative_person_time
from filters import get_user_filter_options
from eventlist import event_list_html
from charts import create_dashboard


def build_dashboard_data(events, services_dict, options):
    """Aggregate the fetched events into the two chart data sets and the event list"""
    by_service = count_per_person(
        events, services_dict, options['services'],
        options['min_services_count'], options['aggregation_type']
    )
    by_date = cumulative_person_time(
        events, options['services'],
        options['min_services_count'], options['aggregation_type']
    )
    events_html = event_list_html(events, services_dict, options['services'])
    return by_service, by_date, events_html


def main():
    """Main execution function"""
    try:
        print("🙌 SERVING DASHBOARD")
        print("="*55)

        if not CHURCHTOOLS_BASE_URL:
            print("❌ Error: CHURCHTOOLS_BASE_URL not set")
            print("Please add CHURCHTOOLS_BASE_URL (and CHURCHTOOLS_TOKEN) to your .env file")
            return

        calendars = fetch_calendars()
        services_dict = fetch_services_dict()
        print_available_calendars(calendars)
        print_available_services(services_dict)

        options = get_user_filter_options()

        known_calendars = {str(c.get('id')) for c in calendars}
        unknown = [c for c in options['calendars'] if str(c) not in known_calendars]
        if calendars and unknown:
            print(f"⚠️ Unknown calendar ids, no events will match them: {unknown}")

        events = fetch_events(options['calendars'], options['from_date'], options['to_date'])

        if '--debug' in sys.argv:
            print_event_services(events, services_dict, options['services'])

        by_service, by_date, events_html = build_dashboard_data(events, services_dict, options)

        html_file = create_dashboard(by_service, by_date, events_html, options)
        if not html_file:
            print("❌ Failed to create dashboard")
            return

        try:
            abs_path = os.path.abspath(html_file)
            webbrowser.open(f"file://{abs_path}")
            print(f"\n🌐 Interactive dashboard opened automatically!")
        except Exception as e:
            print(f"\n⚠️ Couldn't auto-open dashboard: {e}")

        print(f"\n🎉 SERVING DASHBOARD CREATED!")
        print(f"📄 HTML file (interactive): {html_file}")
        print(f"   {len(events)} events · {len({d['person'] for d in by_service})} persons")

    except Exception as e:
        print(f"❌ Error: {e}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    main()
