from htbridge.core.config import settings


class HemtjanstTopics:
    ANNOUNCE = "announce"
    LEAVE = "leave"
    DISCOVER = "discover"

    GET = "get"
    SET = "set"

    @staticmethod
    def feature_get(topic: str, feature: str) -> str:
        return f"{topic}/{feature}/{HemtjanstTopics.GET}"

    @staticmethod
    def feature_set(topic: str, feature: str) -> str:
        return f"{topic}/{feature}/{HemtjanstTopics.SET}"


class GatewayChannels:
    EVENT = "event"
    COMMAND = "command"
    STATUS = "status"


class GatewayEvents:
    DEVICE_ADDED = "device_added"
    PROPERTY_CHANGED = "property_changed"
    PROPERTY_SET = "property_set"
    ADAPTER_READY = "adapter_ready"


def topic_to_subject(topic: str) -> str:
    """Hemtjanst topics are '/'-separated, NATS subjects are '.'-separated."""
    return topic.strip("/").replace("/", ".")


def subject_to_topic(subject: str) -> str:
    return subject.replace(".", "/")


def wildcard(prefix: str) -> str:
    return f"{topic_to_subject(prefix)}.>"


class GatewaySubjects:

    @staticmethod
    def _subject(channel: str) -> str:
        return f"gateway.{settings.ADAPTER_ID}.{channel}"

    @staticmethod
    def event() -> str:
        return GatewaySubjects._subject(GatewayChannels.EVENT)

    @staticmethod
    def command() -> str:
        return GatewaySubjects._subject(GatewayChannels.COMMAND)

    @staticmethod
    def status() -> str:
        return GatewaySubjects._subject(GatewayChannels.STATUS)
