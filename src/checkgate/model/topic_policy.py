from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class DropPolicyEnum(StrEnum):
    """What a full subscriber queue gives up to make room."""

    DROP_OLDEST = "drop_oldest"
    DROP_NEWEST = "drop_newest"

    @classmethod
    def _missing_(cls, value):
        # config files spell these in upper case
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return None


class TopicPolicyModel(BaseModel):
    """Bounded queue per subscriber; on overflow drop_policy picks the status that is lost."""

    queue_maxsize: int = Field(default=200, ge=1)
    drop_policy: DropPolicyEnum = DropPolicyEnum.DROP_OLDEST

    @field_validator("drop_policy", mode="before")
    @classmethod
    def coerce_drop_policy(cls, v):
        return DropPolicyEnum(v) if isinstance(v, str) else v
