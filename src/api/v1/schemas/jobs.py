"""Pydantic schemas for scheduled job endpoints."""

from pydantic import BaseModel


class MergeSweepResponse(BaseModel):
    checked: int
    reverted: int
    failed: int


class ReminderSweepResponse(BaseModel):
    checked: int
    sent: int
