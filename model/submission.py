import json
from datetime import datetime

import pytz

from common.utils.validators import sanitize_string

# Client-side field names seen across the marketing sites, canonical name first
FIELD_ALIASES = {
    'full_name': ('full_name', 'name', 'fullName'),
    'email': ('email',),
    'phone': ('phone', 'phone_number', 'phoneNumber'),
    'country_code': ('country_code', 'countryCode'),
    'message': ('message', 'msg'),
}

REQUIRED_FIELDS = ('full_name', 'email', 'message')

MAX_FIELD_LENGTH = 256
MAX_MESSAGE_LENGTH = 5000


def _first_present(payload, keys):
    for key in keys:
        if key in payload and payload[key] not in (None, ''):
            return payload[key]
    return ''


def _utc_timestamp(now=None):
    """ISO-8601 UTC with milliseconds and a Z suffix, e.g. 2025-01-09T16:21:00.000Z"""
    now = now or datetime.now(pytz.utc)
    return now.astimezone(pytz.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class SubmissionMeta:
    """Browser metadata sent alongside the form, plus anything we don't recognize."""

    RECOGNIZED_KEYS = ('page', 'referrer', 'userAgent', 'ip', 'cid')

    def __init__(self):
        self.page = ''
        self.referrer = ''
        self.user_agent = ''
        self.ip = ''
        self.cid = ''
        self.extra = {}

    @classmethod
    def deserialize(cls, d):
        meta = SubmissionMeta()
        if isinstance(d, str):
            # form-encoded posts send meta as a JSON string
            try:
                d = json.loads(d) if d.strip() else {}
            except ValueError:
                d = {}
        if not isinstance(d, dict):
            return meta

        meta.page = sanitize_string(d.get('page'), 2048)
        meta.referrer = sanitize_string(d.get('referrer'), 2048)
        meta.user_agent = sanitize_string(d.get('userAgent'), 512)
        meta.ip = sanitize_string(d.get('ip'), 64)
        meta.cid = sanitize_string(d.get('cid'), 128)
        meta.extra = {k: v for k, v in d.items() if k not in cls.RECOGNIZED_KEYS}
        return meta

    def serialize(self):
        d = {
            'page': self.page,
            'referrer': self.referrer,
            'userAgent': self.user_agent,
            'ip': self.ip,
            'cid': self.cid,
        }
        d = {k: v for k, v in d.items() if v}
        d.update(self.extra)
        return d

    def extra_json(self):
        """The opaque metadata column: passthrough keys plus cid, compact JSON."""
        d = dict(self.extra)
        if self.cid:
            d['cid'] = self.cid
        return json.dumps(d, separators=(',', ':'), default=str)


class SubmissionRecord:
    def __init__(self):
        self.timestamp = ''
        self.full_name = ''
        self.email = ''
        self.phone = ''
        self.message = ''
        self.page = ''
        self.referrer = ''
        self.ip = ''
        self.user_agent = ''
        self.honeypot = ''
        self.meta = SubmissionMeta()

    @classmethod
    def from_payload(cls, payload, headers=None, remote_addr=None, honeypot_field='website', now=None):
        """
        Build a record from a parsed request body.

        Args:
            payload: dict parsed from the JSON or form-encoded body
            headers: request headers (any mapping with .get)
            remote_addr: socket peer address, used when no X-Forwarded-For is present
            honeypot_field: name of the hidden anti-bot field
            now: timestamp override, mostly for tests

        Returns:
            SubmissionRecord
        """
        payload = payload if isinstance(payload, dict) else {}
        headers = headers or {}

        record = SubmissionRecord()
        record.timestamp = _utc_timestamp(now)
        record.full_name = sanitize_string(_first_present(payload, FIELD_ALIASES['full_name']), MAX_FIELD_LENGTH)
        record.email = sanitize_string(_first_present(payload, FIELD_ALIASES['email']), MAX_FIELD_LENGTH)
        record.message = sanitize_string(_first_present(payload, FIELD_ALIASES['message']), MAX_MESSAGE_LENGTH)

        phone = sanitize_string(_first_present(payload, FIELD_ALIASES['phone']), 64)
        country_code = sanitize_string(_first_present(payload, FIELD_ALIASES['country_code']), 8)
        if phone and country_code:
            record.phone = f"{country_code} {phone}"
        else:
            record.phone = phone

        record.honeypot = honeypot_value(payload.get(honeypot_field)) if honeypot_field else ''

        meta = SubmissionMeta.deserialize(payload.get('meta', {}))
        record.meta = meta
        record.page = meta.page
        record.referrer = meta.referrer or sanitize_string(headers.get('Referer'), 2048)
        record.user_agent = meta.user_agent or sanitize_string(headers.get('User-Agent'), 512)
        record.ip = meta.ip or client_ip(headers, remote_addr)
        return record

    def missing_fields(self):
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def is_valid(self):
        return not self.missing_fields()

    @property
    def is_spam(self):
        return bool(self.honeypot)

    def to_row(self):
        """Spreadsheet row, in the column order of the Contact tab."""
        return [
            self.timestamp,
            self.full_name,
            self.email,
            self.message,
            self.page,
            self.referrer,
            self.phone,
            self.ip,
            self.user_agent,
            self.meta.extra_json(),
        ]

    def to_relay_form(self):
        return {
            'name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'message': self.message,
        }

    def serialize(self):
        return {
            'timestamp': self.timestamp,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'message': self.message,
            'page': self.page,
            'referrer': self.referrer,
            'ip': self.ip,
            'user_agent': self.user_agent,
            'meta': self.meta.serialize(),
        }


def honeypot_value(raw):
    """
    Whatever a bot put in the hidden field, as a string; '' when left empty.

    Only null, false, blank strings and empty containers count as empty, so
    JSON bots sending true, 1, ["x"] or {...} are still caught.
    """
    if raw is None or raw is False:
        return ''
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, (list, dict)):
        return json.dumps(raw, default=str) if raw else ''
    return str(raw)


def client_ip(headers, remote_addr=None):
    """First hop of X-Forwarded-For, else the peer address."""
    forwarded = headers.get('X-Forwarded-For') or ''
    first_hop = forwarded.split(',')[0].strip()
    return first_hop or (remote_addr or '')
