"""Help centre schemas."""
from pydantic import BaseModel


class FaqResponse(BaseModel):
    question: str
    answer: str
