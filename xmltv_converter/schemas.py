from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ReplacementEntry(BaseModel):
    """Single entry of the replacements JSON file"""
    name: str = Field(..., min_length=1, description="Exact programme title to replace")
    description: str = Field(..., description="Plot text used instead of the guide's desc")
    poster: str = Field(..., min_length=1, description="Poster filename inside the posters folder")


ReplacementFile = TypeAdapter(list[ReplacementEntry])


class EpisodeInfo(BaseModel):
    """Optional episode details; unknown fields are left out of the output"""
    episode: str | None = Field(None, description="Episode sub-title")
    plot: str | None = Field(None, description="Episode plot")
    image: int | None = Field(None, description="1-based mosaic slot, 0 when no slot was assigned")


class MediaEntry(BaseModel):
    """Single programme in a channel schedule"""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Show title")
    start_date: str = Field(..., alias="startDate", description="UTC start, YYYY-MM-DDTHH:MM:SS.fffZ")
    info: EpisodeInfo = Field(default_factory=EpisodeInfo)
    episode_number: str = Field("", alias="episodeNumber", description="Raw episode-num text")


class ChannelSchedule(BaseModel):
    """Channel with its programmes in start order"""
    name: str
    media: list[MediaEntry] = Field(default_factory=list)


GuideSchedule = TypeAdapter(list[ChannelSchedule])
