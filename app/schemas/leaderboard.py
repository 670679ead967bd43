from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import SuccessResponse


class LeaderboardEntry(BaseModel):
    rank: int = Field(..., ge=1)
    driver_id: str
    name: str
    current_score: int
    last_reset: Optional[datetime] = None
    events_count: int


class LeaderboardResponse(SuccessResponse):
    data: List[LeaderboardEntry]
