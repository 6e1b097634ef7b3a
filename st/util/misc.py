from datetime import datetime


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


# Format whole seconds as HH:MM:SS. Hours never wrap, so 125 hours is "125:00:00". Negative values clamp to zero.
def format_hms(seconds):
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


# Splits "H", "H:M" or "H:M:S" into (h, m, s), fields read left to right and missing ones are 0.
# Returns None for anything else, negatives included.
def _split_hms(text):
    parts = str(text).strip().split(":")
    if len(parts) > 3:
        return None
    try:
        values = [int(p) for p in parts]
    except ValueError:
        return None
    if any(v < 0 for v in values):
        return None
    values += [0] * (3 - len(values))
    return tuple(values)


# "H[:M[:S]]" -> seconds, or None when it doesn't parse. "1:30" is an hour and a half.
def parse_hms(text):
    fields = _split_hms(text)
    if fields is None:
        return None
    h, m, s = fields
    return h * 3600 + m * 60 + s


# "H[:M[:S]]" -> whole minutes as h*60 + m + s//60. Garbage is 0.
def hms_to_minutes(text):
    fields = _split_hms(text)
    if fields is None:
        return 0
    h, m, s = fields
    return h * 60 + m + s // 60
