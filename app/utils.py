import math
from datetime import datetime
from functools import wraps

import pytz
from flask import current_app, jsonify, request
from flask_login import current_user

from app.exceptions import ForbiddenError


LOCAL_INPUT_FORMAT = '%Y-%m-%dT%H:%M'


def as_utc(value):
    #    Zorg dat een datetime tijdzone-bewust is (UTC); naive waarden uit SQLite worden als UTC gelezen.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


def isoformat_utc(value):
    value = as_utc(value)
    return value.isoformat() if value else None


def app_timezone():
    return pytz.timezone(current_app.config.get('APP_TIMEZONE', 'UTC'))


def format_datetime_local(value, tz):
    #    Zet een datetime om naar de lokale invoerweergave (minuutprecisie, zonder offset).
    return as_utc(value).astimezone(tz).strftime(LOCAL_INPUT_FORMAT)


def local_now(tz):
    return format_datetime_local(datetime.now(pytz.UTC), tz)


def parse_datetime(value, tz):
    """
    Parseer een tijdstip uit het logformulier of van de API.

    Notities:
        - Lokale waarden zonder offset ('2024-01-01T10:00') worden in tz gelokaliseerd.
        - Waarden met offset worden alleen naar UTC omgezet.
    Returns:
        datetime: tijdzone-bewust in UTC, of None als de waarde ongeldig is.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = tz.localize(parsed)
    return parsed.astimezone(pytz.UTC)


def round_half_up(value):
    #    Rond af naar het dichtstbijzijnde gehele getal, .5 naar boven.
    return int(math.floor(value + 0.5))


def parse_finite_number(text):
    # None voor lege, niet-numerieke of oneindige invoer
    if text is None:
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        number = float(text)
    else:
        try:
            number = float(str(text).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def get_pagination(default_per_page):
    #    Lees page/limit uit de querystring, begrensd op redelijke waarden.
    page = request.args.get('page', 1, type=int) or 1
    per_page = request.args.get('limit', default_per_page, type=int) or default_per_page
    return max(page, 1), min(max(per_page, 1), 100)


def pagination_dict(pagination):
    return {
        'page': pagination.page,
        'limit': pagination.per_page,
        'total': pagination.total,
        'pages': pagination.pages,
    }


def success(data, status=200, **extra):
    body = {'success': True, 'data': data}
    body.update(extra)
    return jsonify(body), status


def current_identity():
    from app.auth.identity import Identity  # Lazy import
    return Identity.from_user(current_user)


def admin_required(f):
    #    Decorator die alleen beheerders doorlaat; gebruik na @login_required.
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            raise ForbiddenError('Solo los administradores pueden modificar el catálogo.')
        return f(*args, **kwargs)

    return decorated_function
