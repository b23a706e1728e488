from enum import StrEnum


class PubSubTopic(StrEnum):
    CHECK_STATUS = "check_status"
