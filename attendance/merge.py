"""
Merging of admin-recorded and self-reported entries into one timeline.

An intern can carry two parallel lists for the same thing: entries recorded
on the intern record by an admin, and entries the student reported on their
own identity. The combined view is newest first; entries with the same
timestamp keep the order in which the lists were given.
"""

from portal.dates import EPOCH, as_datetime

NOT_AVAILABLE = 'N/A'

ATTENDANCE_OPTIONAL = ('time_in', 'time_out', 'notes')
PROGRESS_OPTIONAL = ('feedback', 'feedback_date')


def _sort_key(field):
    def key(entry):
        return as_datetime(entry.get(field)) or EPOCH
    return key


def merge_newest_first(field, *sequences):
    combined = []
    for sequence in sequences:
        combined.extend(sequence or [])
    # sorted() is stable with reverse=True, so ties stay in list order
    return sorted(combined, key=_sort_key(field), reverse=True)


def merge_attendance(*sequences):
    return merge_newest_first('date', *sequences)


def merge_progress(*sequences):
    return merge_newest_first('timestamp', *sequences)


def fill_missing(entry, fields):
    """Copy of ``entry`` with empty optional fields set to the N/A sentinel."""
    filled = dict(entry)
    for field in fields:
        if filled.get(field) in (None, ''):
            filled[field] = NOT_AVAILABLE
    return filled


def attendance_stats(entries):
    stats = {'present': 0, 'absent': 0, 'late': 0, 'total': len(entries)}
    for entry in entries:
        key = (entry.get('status') or '').lower()
        if key in stats and key != 'total':
            stats[key] += 1
    return stats
