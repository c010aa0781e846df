#!/usr/bin/env python3
""" Pydantic models for quota snapshots and generated clips """

from typing import Any, Dict, Final, Optional

from pydantic import BaseModel, Field

# Public API - functions and classes that external scripts should use
__all__ = [
    'TERMINAL_SUCCESS',
    'QuotaSnapshot',
    'AudioInfo',
    'parse_lyrics'
]

# Statuses at which a clip is playable
TERMINAL_SUCCESS: Final[frozenset] = frozenset({"streaming", "complete"})


class QuotaSnapshot(BaseModel):
    """ Credits reported by the billing endpoint, kept verbatim """
    remaining: int = Field(description="total_credits_left, may be negative")
    period: Optional[str] = Field(default=None, description="Billing period label")
    monthly_limit: Optional[int] = Field(default=None, description="Credits granted per month")
    monthly_usage: Optional[int] = Field(default=None, description="Credits used this month")

    @classmethod
    def from_billing(cls, data: Dict[str, Any]) -> 'QuotaSnapshot':
        """ Map a /api/billing/info/ body; raises KeyError or ValueError on malformed input """
        return cls(
            remaining=data["total_credits_left"],
            period=data.get("period"),
            monthly_limit=data.get("monthly_limit"),
            monthly_usage=data.get("monthly_usage"),
        )

    def to_limit(self) -> Dict[str, Any]:
        """ Shape returned to callers of get_limit """
        return {
            "credits_left": self.remaining,
            "period": self.period,
            "monthly_limit": self.monthly_limit,
            "monthly_usage": self.monthly_usage,
        }


def parse_lyrics(prompt: str) -> str:
    """ Drop blank lines from lyric text """
    lines = [line for line in prompt.split("\n") if line.strip() != ""]
    return "\n".join(lines)


class AudioInfo(BaseModel):
    """ One generation job (clip) as returned to callers """
    id: str
    title: Optional[str] = None
    image_url: Optional[str] = None
    lyric: Optional[str] = None
    audio_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[str] = None
    model_name: Optional[str] = None
    gpt_description_prompt: Optional[str] = None
    prompt: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[str] = None
    negative_tags: Optional[str] = None
    duration: Optional[Any] = None
    error_message: Optional[str] = None

    @classmethod
    def from_clip(cls, clip: Dict[str, Any], clean_lyrics: bool = False) -> 'AudioInfo':
        """ Map a raw clip object from the generate or feed endpoints """
        metadata = clip.get("metadata") or {}
        prompt = metadata.get("prompt")
        if clean_lyrics:
            lyric = parse_lyrics(prompt) if prompt else ""
        else:
            lyric = prompt
        return cls(
            id=clip["id"],
            title=clip.get("title"),
            image_url=clip.get("image_url"),
            lyric=lyric,
            audio_url=clip.get("audio_url"),
            video_url=clip.get("video_url"),
            created_at=clip.get("created_at"),
            model_name=clip.get("model_name"),
            gpt_description_prompt=metadata.get("gpt_description_prompt"),
            prompt=prompt,
            status=clip.get("status"),
            type=metadata.get("type"),
            tags=metadata.get("tags"),
            negative_tags=metadata.get("negative_tags"),
            duration=metadata.get("duration"),
            error_message=metadata.get("error_message"),
        )

    @property
    def is_playable(self) -> bool:
        """ True once the clip is streaming or complete """
        return self.status in TERMINAL_SUCCESS

    @property
    def is_error(self) -> bool:
        """ True when the upstream reports the clip failed """
        return self.status == "error"
