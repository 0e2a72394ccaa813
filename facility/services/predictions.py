"""
Predictive alerts shown on the dashboard.

Without ``PREDICTION_ENDPOINT_URL`` the two curated alerts below are
served.  With it, the prompt is posted to the hosted model and the
free-text answer is parsed into the same shape; anything that cannot be
parsed falls back to the curated alerts.
"""
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

SOURCE_STATIC = 'static'
SOURCE_REMOTE = 'remote'


@dataclass
class PlanSection:
    heading: str
    items: list[str] = field(default_factory=list)


@dataclass
class Alert:
    id: str
    title: str
    location: str
    confidence: int
    expectedPatients: int
    impact: str = ''
    plan: list[PlanSection] = field(default_factory=list)

    def __post_init__(self):
        if not self.impact:
            self.impact = f'{self.expectedPatients} additional patients expected.'


STATIC_ALERTS = [
    Alert(
        id='dengue-hubballi',
        title='Dengue Fever Outbreak',
        location='Hubballi',
        confidence=88,
        expectedPatients=50,
        plan=[
            PlanSection('Immediate Actions (Next 24 hours)', [
                'Increase PPE inventory by 40% (masks, gloves, gowns)',
                'Staff 3 additional nurses to respiratory ward',
                'Prepare 15 isolation units for potential cases',
                'Contact respiratory specialists for on-call availability',
            ]),
            PlanSection('Resource Requirements', [
                'Order 200 N95 masks, 500 surgical masks',
                'Stock up on bronchodilators and corticosteroids',
                'Ensure oxygen concentrators are functional',
            ]),
        ],
    ),
    Alert(
        id='pollution-delhi',
        title='Diwali Pollution Surge',
        location='Delhi',
        confidence=95,
        expectedPatients=55,
        plan=[
            PlanSection('Immediate Actions (Next 48 hours)', [
                'Set up dedicated pollution-related triage area',
                'Increase air filtration systems in all wards',
                'Prepare 20 additional beds for respiratory cases',
                'Issue health advisories to local community',
            ]),
            PlanSection('Medicine & Equipment', [
                'Stock inhalers and nebulizers (50+ units each)',
                'Ensure adequate supply of anti-inflammatory medications',
                'Prepare eye wash stations for pollution-related irritation',
            ]),
            PlanSection('Communication Plan', [
                'Alert all department heads about expected surge',
                'Coordinate with nearby hospitals for overflow capacity',
            ]),
        ],
    ),
]

_TITLE_RE = re.compile(r'^\s*(?:title|alert)\s*[:\-]\s*(?P<value>.+?)\s*$', re.I | re.M)
_LOCATION_RE = re.compile(r'^\s*location\s*[:\-]\s*(?P<value>.+?)\s*$', re.I | re.M)
_CONFIDENCE_RE = re.compile(r"confidence\D{0,20}?(?P<value>\d{1,3})\s*%|(?P<bare>\d{1,3})\s*%\s*confidence", re.I)
_PATIENTS_RE = re.compile(r'(?P<value>\d+)\s+additional\s+patients', re.I)
# "Dengue Fever Outbreak - Hubballi" carries both title and location
_HEADLINE_RE = re.compile(r'^\s*(?P<title>[^\n:]+?)\s+-\s+(?P<location>[^\n]+?)\s*$', re.M)
_BULLET_RE = re.compile(r'^\s*(?:[-*•]|\d+[.)])\s+(?P<value>.+?)\s*$', re.M)


def extract_text(payload) -> str:
    """Pull the generated text out of the shapes hosted models reply with."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        data = payload.get('data')
        if isinstance(data, list) and data:
            return extract_text(data[0])
        for key in ('prediction', 'output', 'text'):
            value = payload.get(key)
            if value:
                return extract_text(value)
    if isinstance(payload, list) and payload:
        return extract_text(payload[0])
    return ''


def parse_alert(text: str) -> Optional[Alert]:
    """Parse title, location, confidence and patient count; ``None`` if any is missing."""
    if not text:
        return None
    title = _TITLE_RE.search(text)
    location = _LOCATION_RE.search(text)
    headline = _HEADLINE_RE.search(text)
    confidence = _CONFIDENCE_RE.search(text)
    patients = _PATIENTS_RE.search(text)

    title_value = title.group('value') if title else (headline.group('title') if headline else None)
    location_value = location.group('value') if location else (headline.group('location') if headline else None)
    if not (title_value and location_value and confidence and patients):
        return None
    pct = int(confidence.group('value') or confidence.group('bare'))
    if pct > 100:
        return None

    items = [m.group('value') for m in _BULLET_RE.finditer(text)]
    plan = [PlanSection('Generated Action Plan', items)] if items else []
    return Alert(
        id=re.sub(r'[^a-z0-9]+', '-', f'{title_value} {location_value}'.lower()).strip('-'),
        title=title_value,
        location=location_value,
        confidence=pct,
        expectedPatients=int(patients.group('value')),
        plan=plan,
    )


def fetch_remote_alert() -> Optional[Alert]:
    url = settings.PREDICTION_ENDPOINT_URL
    if not url:
        return None
    try:
        r = requests.post(url, json={'data': [settings.PREDICTION_PROMPT]}, timeout=settings.PREDICTION_TIMEOUT)
        r.raise_for_status()
        try:
            payload = r.json()
        except ValueError:
            payload = r.text
    except requests.RequestException as e:
        logger.warning('prediction endpoint unavailable: %s', e)
        return None
    alert = parse_alert(extract_text(payload))
    if alert is None:
        logger.warning('prediction response could not be parsed; serving static alerts')
    return alert


def get_alerts() -> dict:
    alert = fetch_remote_alert()
    if alert is not None:
        return {'source': SOURCE_REMOTE, 'alerts': [asdict(alert)]}
    return {'source': SOURCE_STATIC, 'alerts': [asdict(a) for a in STATIC_ALERTS]}
