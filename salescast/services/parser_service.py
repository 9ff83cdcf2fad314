from __future__ import annotations

from pydantic import BaseModel, TypeAdapter, ValidationError

from salescast.core.errors import NoArrayFoundError
from salescast.db.schemas import ForecastPoint


class _ReplyPoint(BaseModel):
    period: str
    total: float


_reply_points = TypeAdapter(list[_ReplyPoint])


def extract_array(raw_text: str) -> str:
    """Slice from the first ``[`` to the last ``]``; models often wrap JSON in prose."""
    start = raw_text.find("[")
    end = raw_text.rfind("]")
    if start == -1 or end <= start:
        raise NoArrayFoundError("could not find JSON array in response")
    return raw_text[start : end + 1]


def parse(raw_text: str) -> tuple[list[ForecastPoint], str]:
    candidate = extract_array(raw_text or "")
    try:
        points = _reply_points.validate_json(candidate)
    except ValidationError as exc:
        raise NoArrayFoundError(f"failed to decode forecast array: {exc.error_count()} error(s)") from exc
    if not points:
        raise NoArrayFoundError("forecast array is empty")
    return [ForecastPoint(period=p.period, total=p.total) for p in points], raw_text
