"""
Helper utility functions
"""
from typing import Any, Dict, List, Optional
from datetime import datetime
import pytz

from onboarding.config.settings import settings

DISPLAY_TZ = pytz.timezone(settings.DISPLAY_TIMEZONE)

def to_display_time(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp in the administrators' timezone (naive values are UTC)"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(DISPLAY_TZ).isoformat()

def serialize_doc(doc: Dict) -> Dict:
    """Convert a dumped model to a JSON-friendly dict with localized datetimes"""
    if doc is None:
        return None

    for key, value in doc.items():
        if isinstance(value, datetime):
            doc[key] = to_display_time(value)
        elif isinstance(value, list):
            doc[key] = [serialize_doc(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, dict):
            doc[key] = serialize_doc(value)

    return doc

def serialize_docs(docs: List[Dict]) -> List[Dict]:
    return [serialize_doc(doc) for doc in docs]

def serialize_models(models: List[Any]) -> List[Dict]:
    return serialize_docs([m.model_dump() for m in models])
