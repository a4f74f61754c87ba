from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime


class Enclosure(BaseModel):
    """Media file attached to an episode."""
    url: str
    type: Optional[str] = None # MIME type, e.g. audio/mpeg
    length: Optional[int] = None # Size in bytes


class EpisodeMetadata(BaseModel):
    """itunes-namespaced fields of a single item."""
    duration: Optional[str] = None # Kept as published ("3600" or "01:00:00")
    explicit: Optional[bool] = None
    episode_type: Optional[str] = None # full / trailer / bonus
    episode: Optional[str] = None # Episode number as text
    image_url: Optional[str] = None


class SourceEpisode(BaseModel):
    """One item as read from the upstream feed."""
    title: Optional[str] = None
    content_snippet: str = ""
    pub_date: Optional[datetime] = None
    pub_date_raw: Optional[str] = None # Original RFC 822 string
    link: Optional[str] = None
    guid: Optional[str] = None
    enclosure: Optional[Enclosure] = None
    itunes: EpisodeMetadata = Field(default_factory=EpisodeMetadata)


class FeedChannel(BaseModel):
    """Channel-level metadata of a podcast feed."""
    title: Optional[str] = None
    description: Optional[str] = None
    copyright: Optional[str] = None
    language: Optional[str] = None
    pub_date: Optional[str] = None
    image_url: Optional[str] = None
    owner_name: Optional[str] = None
    author: Optional[str] = None
    keywords: Optional[Union[str, List[str]]] = None # Scalar or list depending on the source
    explicit: Optional[bool] = None
    summary: Optional[str] = None
    feed_type: Optional[str] = None # itunes:type, episodic / serial


class SourceFeed(BaseModel):
    """Parsed upstream feed. Created per request and never persisted."""
    channel: FeedChannel = Field(default_factory=FeedChannel)
    episodes: List[SourceEpisode] = Field(default_factory=list)


class RedactedChannel(FeedChannel):
    """Channel metadata republished under the service's own address."""
    keywords: Optional[str] = None # Always normalized to a comma-joined string
    feed_url: str
    site_url: str
    ttl: int


class RedactedEpisode(BaseModel):
    """An item with its title replaced and its description behind a disclaimer."""
    title: str
    description: str
    pub_date: Optional[datetime] = None
    pub_date_raw: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    enclosure: Optional[Enclosure] = None
    itunes: EpisodeMetadata = Field(default_factory=EpisodeMetadata)


class RedactedFeed(BaseModel):
    channel: RedactedChannel
    episodes: List[RedactedEpisode] = Field(default_factory=list)
