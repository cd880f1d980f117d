"""Inbound channel payload schemas.

This module defines the Pydantic v2 schema for the JSON payloads the remote
service pushes to the device. Payloads use short wire keys; the models expose
them under descriptive names through aliases.

Payload shapes:
    Single channel:  {"chnl": {...}, "oth_chnl": "existing_id"}
    Channel list:    {"chnl_lst": [{...}, {...}]}
    Either nested value may also arrive as a JSON-encoded string.

Lenient validation:
    A single bad attribute must never fail a whole payload. Every field of
    ChannelSpec passes through a wrap validator that turns a validation
    failure into None (logged as channel_attribute_malformed), and the
    channel builder then applies that attribute's default.

Example payload entry:
    {
      "id": "OS_news",
      "nm": "News",
      "grp": "OS_content", "grp_nm": "Content",
      "imp": 4, "lght": true, "ledc": "FF00FF00",
      "vib": true, "vib_pt": [0, 250, 250, 250],
      "snd_nm": "chime", "lck": 0, "bdg": true, "bdnd": false,
      "langs": {"de": {"nm": "Nachrichten"}}
    }
"""

import json
from typing import Annotated, Any

import structlog
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

log = structlog.get_logger(__name__)


def _normalize_identifier(value: Any) -> Any:
    """Accept numeric ids and treat blank strings as absent."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


Identifier = Annotated[str | None, BeforeValidator(_normalize_identifier)]


def _degrade_to_none(
    model_name: str,
    value: Any,
    handler: ValidatorFunctionWrapHandler,
    info: ValidationInfo,
) -> Any:
    try:
        return handler(value)
    except ValidationError as e:
        log.warning(
            "channel_attribute_malformed",
            model=model_name,
            field=info.field_name,
            value=repr(value)[:100],
            errors=[err["msg"] for err in e.errors()],
        )
        return None


def _decode_json_string(key: str, value: Any) -> Any:
    """Decode a nested payload value that arrived as a JSON string.

    Push data messages carry only string values, so "chnl" and "chnl_lst"
    may hold JSON text rather than an object or array. Undecodable strings
    are returned unchanged and later degrade to None.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        log.warning("payload_value_not_json", key=key, error=e.msg)
        return value


class ChannelText(BaseModel):
    """Per-language overrides for a channel's user-facing text."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, alias="nm")
    description: str | None = Field(default=None, alias="dscr")
    group_name: str | None = Field(default=None, alias="grp_nm")

    @field_validator("*", mode="wrap")
    @classmethod
    def degrade_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Replace malformed values with None instead of raising."""
        return _degrade_to_none(cls.__name__, value, handler, info)


class ChannelSpec(BaseModel):
    """Declarative description of one notification channel.

    All fields are optional. Missing or malformed fields are None here and
    receive their defaults in the channel builder.

    Attributes:
        id: Channel id; the fallback channel id is used when absent.
        name: Display name (nm).
        description: Description (dscr).
        group_id: Owning group id (grp).
        group_name: Owning group display name (grp_nm).
        importance: Importance level 0-5 (imp).
        priority: Legacy notification priority 0-10 (pri), used only when
            importance is absent.
        show_lights: Use the LED (lght).
        light_color: LED color, hex without "#" or a color name (ledc).
        vibrate: Vibrate (vib). Ignored when vibration_pattern is non-empty.
        vibration_pattern: Durations in ms (vib_pt).
        sound_name: Sound resource name, or "none" for silence (snd_nm).
        lockscreen_visibility: -1, 0 or 1 (lck).
        show_badge: Show launcher badge (bdg).
        bypass_dnd: Bypass do-not-disturb (bdnd).
        langs: Per-language text overrides keyed by language code.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Identifier = None
    name: str | None = Field(default=None, alias="nm")
    description: str | None = Field(default=None, alias="dscr")
    group_id: Identifier = Field(default=None, alias="grp")
    group_name: str | None = Field(default=None, alias="grp_nm")
    importance: int | None = Field(default=None, alias="imp")
    priority: int | None = Field(default=None, alias="pri")
    show_lights: bool | None = Field(default=None, alias="lght")
    light_color: str | None = Field(default=None, alias="ledc")
    vibrate: bool | None = Field(default=None, alias="vib")
    vibration_pattern: list[NonNegativeInt] | None = Field(default=None, alias="vib_pt")
    sound_name: str | None = Field(default=None, alias="snd_nm")
    lockscreen_visibility: int | None = Field(default=None, alias="lck")
    show_badge: bool | None = Field(default=None, alias="bdg")
    bypass_dnd: bool | None = Field(default=None, alias="bdnd")
    langs: dict[str, ChannelText] | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def degrade_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Replace malformed values with None instead of raising."""
        return _degrade_to_none(cls.__name__, value, handler, info)

    def text_for(self, language: str) -> ChannelText:
        """Return name, description and group name for a language.

        Localized values from ``langs[language]`` take precedence; anything
        the localized entry leaves unset comes from the top-level fields.
        """
        localized = (self.langs or {}).get(language)
        if localized is None:
            return ChannelText(
                name=self.name,
                description=self.description,
                group_name=self.group_name,
            )
        return ChannelText(
            name=localized.name or self.name,
            description=localized.description or self.description,
            group_name=localized.group_name or self.group_name,
        )


class ChannelListPayload(BaseModel):
    """Top-level payload pushed by the remote service.

    Attributes:
        channel: Single channel to create (chnl). None means "use the
            fallback channel".
        override_channel_id: Existing channel to use instead of creating
            ``channel`` (oth_chnl).
        channel_list: Full desired channel set (chnl_lst).
    """

    model_config = ConfigDict(populate_by_name=True)

    channel: ChannelSpec | None = Field(default=None, alias="chnl")
    override_channel_id: Identifier = Field(default=None, alias="oth_chnl")
    channel_list: list[ChannelSpec] | None = Field(default=None, alias="chnl_lst")

    @field_validator("channel", mode="before")
    @classmethod
    def decode_channel_string(cls, value: Any) -> Any:
        """Accept a channel object delivered as a JSON-encoded string."""
        return _decode_json_string("chnl", value)

    @field_validator("channel_list", mode="before")
    @classmethod
    def drop_non_object_entries(cls, value: Any) -> Any:
        """Skip list entries that are not JSON objects."""
        value = _decode_json_string("chnl_lst", value)
        if not isinstance(value, list):
            return value
        kept = [item for item in value if isinstance(item, dict | ChannelSpec)]
        if len(kept) != len(value):
            log.warning(
                "channel_list_entries_skipped",
                skipped=len(value) - len(kept),
                total=len(value),
            )
        return kept

    @field_validator("*", mode="wrap")
    @classmethod
    def degrade_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """Replace malformed values with None instead of raising."""
        return _degrade_to_none(cls.__name__, value, handler, info)
