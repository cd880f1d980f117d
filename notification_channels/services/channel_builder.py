"""Channel builder: one channel declaration in, one stored channel out.

This module turns a single ChannelSpec into a ResolvedChannel, writes it
(and its group) to the channel store, and returns the channel id that is in
force afterwards.

Id Selection (first matching rule wins, see ID_SELECTION_RULES):
    1. no_channel         No "chnl" object → ensure the fallback channel
                          exists, return its id.
    2. override_existing  "oth_chnl" names a channel already in the store →
                          return that id, write nothing.
    3. system_default     Declared id is the platform's reserved default
                          channel → swap in the fallback id, then create.
    4. create             Target id is spec.id (or the fallback id) →
                          resolve attributes, write group and channel.

Default Resolution:
    Each attribute is resolved independently. Absent or malformed values
    take the ChannelDefaults value; a non-empty vibration pattern forces
    vibration on; snd_nm "none" makes the channel silent.

Usage:
    >>> builder = ChannelBuilder(InMemoryChannelStore())
    >>> builder.create_notification_channel({"chnl": {"id": "OS_news", "imp": 4}})
    'OS_news'
"""

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from notification_channels.config import (
    get_channel_defaults_file,
    get_device_language,
    get_sounds_dir,
)
from notification_channels.constants import (
    DEFAULT_NOTIFICATION_SOUND_URI,
    FALLBACK_CHANNEL_ID,
    FALLBACK_CHANNEL_NAME,
    IMPORTANCE_DEFAULT,
    IMPORTANCE_NONE,
    PRIORITY_TO_IMPORTANCE,
    SILENT_SOUND_NAMES,
    SYSTEM_DEFAULT_CHANNEL_ID,
    VALID_IMPORTANCE_LEVELS,
    VALID_LOCKSCREEN_VISIBILITIES,
    VISIBILITY_PUBLIC,
)
from notification_channels.exceptions import ConfigurationError
from notification_channels.schemas.channel import ChannelGroup, ResolvedChannel
from notification_channels.schemas.channel_payload import ChannelListPayload, ChannelSpec
from notification_channels.services.channel_store import ChannelStore
from notification_channels.utils.colors import parse_light_color
from notification_channels.utils.sounds import (
    DirectorySoundResolver,
    SoundResolver,
    no_sound_resources,
)

log = structlog.get_logger(__name__)


class ChannelDefaults(BaseModel):
    """Values applied to attributes a channel declaration leaves unset.

    Also describes the fallback channel created when a payload carries no
    channel at all. Instances are immutable; tests and deployments pass an
    alternate instance to ChannelBuilder instead of mutating shared state.

    Example YAML (CHANNEL_DEFAULTS_FILE):
        importance: 4
        light_color: "FF2196F3"
        fallback_channel_name: "General"
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = FALLBACK_CHANNEL_NAME
    importance: int = IMPORTANCE_DEFAULT
    show_lights: bool = True
    light_color: int = 0
    vibrate: bool = True
    sound: str | None = DEFAULT_NOTIFICATION_SOUND_URI
    lockscreen_visibility: int = VISIBILITY_PUBLIC
    show_badge: bool = True
    bypass_dnd: bool = False

    fallback_channel_id: str = FALLBACK_CHANNEL_ID
    fallback_channel_name: str = FALLBACK_CHANNEL_NAME
    fallback_importance: int = IMPORTANCE_DEFAULT

    @field_validator("light_color", mode="before")
    @classmethod
    def parse_hex_light_color(cls, v: Any) -> Any:
        """Allow the light color to be written as hex or a color name."""
        if isinstance(v, str):
            parsed = parse_light_color(v)
            if parsed is None:
                raise ValueError(f"light_color must be AARRGGBB, RRGGBB or a color name: {v}")
            return parsed
        return v

    @field_validator("importance", "fallback_importance")
    @classmethod
    def validate_importance(cls, v: int) -> int:
        if v not in VALID_IMPORTANCE_LEVELS:
            raise ValueError(f"importance must be one of {sorted(VALID_IMPORTANCE_LEVELS)}")
        return v

    @field_validator("lockscreen_visibility")
    @classmethod
    def validate_visibility(cls, v: int) -> int:
        if v not in VALID_LOCKSCREEN_VISIBILITIES:
            raise ValueError(
                f"lockscreen_visibility must be one of {sorted(VALID_LOCKSCREEN_VISIBILITIES)}"
            )
        return v

    def fallback_channel(self) -> ResolvedChannel:
        """Build the fallback channel: audible, lights and vibration on."""
        return ResolvedChannel(
            id=self.fallback_channel_id,
            name=self.fallback_channel_name,
            importance=self.fallback_importance,
            show_lights=True,
            light_color=self.light_color,
            vibrate=True,
            sound=self.sound or DEFAULT_NOTIFICATION_SOUND_URI,
            lockscreen_visibility=self.lockscreen_visibility,
            show_badge=self.show_badge,
            bypass_dnd=False,
        )


def load_channel_defaults(file_path: Path | None = None) -> ChannelDefaults:
    """Load ChannelDefaults, applying overrides from a YAML file if given.

    Args:
        file_path: YAML mapping of ChannelDefaults fields. Defaults to
            CHANNEL_DEFAULTS_FILE; built-in defaults when neither is set.

    Returns:
        ChannelDefaults instance.

    Raises:
        ConfigurationError: If the file is missing, unparseable, not a
            mapping, or contains invalid fields.
    """
    path = file_path or get_channel_defaults_file()
    if path is None:
        return ChannelDefaults()

    if not path.exists():
        raise ConfigurationError(f"Channel defaults file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        line_num = None
        if hasattr(e, "problem_mark") and e.problem_mark is not None:
            line_num = e.problem_mark.line
        log.error("channel_defaults_parse_error", file=str(path), error=str(e), line=line_num)
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        log.warning("channel_defaults_file_empty", file=str(path))
        return ChannelDefaults()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Channel defaults in {path} must be a mapping")

    try:
        defaults = ChannelDefaults.model_validate(raw)
    except ValidationError as e:
        log.error("channel_defaults_validation_error", file=str(path), errors=e.errors())
        raise ConfigurationError(f"Invalid channel defaults in {path}: {e}") from e

    log.info("channel_defaults_loaded", file=str(path), overrides=sorted(raw))
    return defaults


def priority_to_importance(priority: int) -> int:
    """Map a legacy 0-10 notification priority onto an importance level.

    >>> priority_to_importance(10)
    5
    >>> priority_to_importance(6)
    3
    """
    for threshold, importance in PRIORITY_TO_IMPORTANCE:
        if priority > threshold:
            return importance
    return IMPORTANCE_NONE


class IdSelection(enum.Enum):
    """Outcome of the id-selection policy."""

    NO_CHANNEL = "no_channel"
    OVERRIDE_EXISTING = "override_existing"
    SYSTEM_DEFAULT = "system_default"
    CREATE = "create"


@dataclass(frozen=True)
class IdSelectionRule:
    """One row of the id-selection decision table.

    Attributes:
        outcome: Selection made when the rule matches.
        matches: Predicate over (spec, override_channel_id, store).
    """

    outcome: IdSelection
    matches: Callable[[ChannelSpec | None, str | None, ChannelStore], bool]


ID_SELECTION_RULES: tuple[IdSelectionRule, ...] = (
    IdSelectionRule(
        IdSelection.NO_CHANNEL,
        lambda spec, override, store: spec is None,
    ),
    IdSelectionRule(
        IdSelection.OVERRIDE_EXISTING,
        lambda spec, override, store: (
            override is not None and store.get_channel(override) is not None
        ),
    ),
    IdSelectionRule(
        IdSelection.SYSTEM_DEFAULT,
        lambda spec, override, store: spec.id == SYSTEM_DEFAULT_CHANNEL_ID,
    ),
    IdSelectionRule(
        IdSelection.CREATE,
        lambda spec, override, store: True,
    ),
)


def select_id_rule(
    spec: ChannelSpec | None,
    override_channel_id: str | None,
    store: ChannelStore,
    rules: tuple[IdSelectionRule, ...] = ID_SELECTION_RULES,
) -> IdSelection:
    """Return the outcome of the first rule matching the inputs."""
    for rule in rules:
        if rule.matches(spec, override_channel_id, store):
            return rule.outcome
    # The table ends with an unconditional rule
    raise AssertionError("id selection table has no catch-all rule")


class ChannelBuilder:
    """Builds one channel per call and writes it to the channel store.

    Args:
        store: Channel store to read and write.
        defaults: Default attribute values. Defaults to ChannelDefaults().
        sound_resolver: Maps snd_nm to a sound URI. Defaults to a resolver
            that knows no resources, so named sounds fall back to the
            default notification sound.
        language: Language key used for ``langs`` overrides. Defaults to
            DEVICE_LANGUAGE.
    """

    def __init__(
        self,
        store: ChannelStore,
        defaults: ChannelDefaults | None = None,
        sound_resolver: SoundResolver | None = None,
        language: str | None = None,
    ) -> None:
        self._store = store
        self._defaults = defaults or ChannelDefaults()
        self._sound_resolver = sound_resolver or no_sound_resources
        self._language = language or get_device_language()

    @classmethod
    def from_config(cls, store: ChannelStore) -> "ChannelBuilder":
        """Create a builder configured from environment variables.

        Reads CHANNEL_DEFAULTS_FILE, SOUNDS_DIR and DEVICE_LANGUAGE.

        Raises:
            ConfigurationError: If CHANNEL_DEFAULTS_FILE is set but invalid.
        """
        sounds_dir = get_sounds_dir()
        resolver = DirectorySoundResolver(sounds_dir) if sounds_dir else None
        return cls(
            store,
            defaults=load_channel_defaults(),
            sound_resolver=resolver,
            language=get_device_language(),
        )

    @property
    def defaults(self) -> ChannelDefaults:
        return self._defaults

    def create_notification_channel(
        self, payload: Mapping[str, Any] | ChannelListPayload | None
    ) -> str:
        """Build the channel described by a single-channel payload.

        Args:
            payload: ``{"chnl": {...}, "oth_chnl": "..."}``; None or an empty
                mapping selects the fallback channel.

        Returns:
            Id of the channel notifications should be posted to.
        """
        if not isinstance(payload, ChannelListPayload):
            payload = ChannelListPayload.model_validate(payload or {})
        return self.build_channel(payload.channel, payload.override_channel_id)

    def build_channel(
        self,
        spec: ChannelSpec | None,
        override_channel_id: str | None = None,
    ) -> str:
        """Apply the id-selection policy and write the resulting channel.

        Args:
            spec: Channel declaration, or None when the payload had none.
            override_channel_id: Existing channel to reuse if present.

        Returns:
            The effective channel id.

        Raises:
            ChannelStoreError: If a store operation fails.
        """
        outcome = select_id_rule(spec, override_channel_id, self._store)

        if outcome is IdSelection.NO_CHANNEL:
            return self._ensure_fallback_channel()

        if outcome is IdSelection.OVERRIDE_EXISTING:
            log.info(
                "channel_override_used",
                channel_id=override_channel_id,
                declared_id=spec.id if spec else None,
            )
            return override_channel_id

        if outcome is IdSelection.SYSTEM_DEFAULT:
            # the reserved id belongs to the platform; write the fallback instead
            fallback_id = self._defaults.fallback_channel_id
            log.info(
                "system_default_channel_redirected",
                declared_id=spec.id,
                channel_id=fallback_id,
            )
            spec = spec.model_copy(update={"id": fallback_id})

        return self._write_channel(spec)

    def resolve_channel(self, spec: ChannelSpec) -> ResolvedChannel:
        """Resolve every attribute of a declaration to a concrete value.

        Pure: reads nothing from and writes nothing to the store.
        """
        defaults = self._defaults
        text = spec.text_for(self._language)
        pattern = tuple(spec.vibration_pattern) if spec.vibration_pattern else None

        return ResolvedChannel(
            id=spec.id or defaults.fallback_channel_id,
            name=text.name or defaults.name,
            description=text.description,
            importance=self._resolve_importance(spec),
            show_lights=_or_default(spec.show_lights, defaults.show_lights),
            light_color=self._resolve_light_color(spec),
            # a pattern implies vibration regardless of the vib flag
            vibrate=True if pattern else _or_default(spec.vibrate, defaults.vibrate),
            vibration_pattern=pattern,
            sound=self._resolve_sound(spec.sound_name),
            lockscreen_visibility=self._resolve_visibility(spec),
            show_badge=_or_default(spec.show_badge, defaults.show_badge),
            bypass_dnd=_or_default(spec.bypass_dnd, defaults.bypass_dnd),
            group_id=spec.group_id,
        )

    def _ensure_fallback_channel(self) -> str:
        fallback_id = self._defaults.fallback_channel_id
        if self._store.get_channel(fallback_id) is None:
            self._store.create_or_replace_channel(self._defaults.fallback_channel())
            log.info("fallback_channel_created", channel_id=fallback_id)
        return fallback_id

    def _write_channel(self, spec: ChannelSpec) -> str:
        channel = self.resolve_channel(spec)

        if channel.group_id is not None:
            group_name = spec.text_for(self._language).group_name
            if group_name is None:
                # an unnamed reference never renames a group declared elsewhere
                existing_group = self._store.get_group(channel.group_id)
                group_name = existing_group.name if existing_group else channel.group_id
            self._store.create_or_update_group(ChannelGroup(id=channel.group_id, name=group_name))
            log.info(
                "channel_group_synced",
                group_id=channel.group_id,
                group_name=group_name,
            )

        existing = self._store.get_channel(channel.id)
        if existing is not None and existing.group_id != channel.group_id:
            # group membership is fixed at creation; recreate to move
            log.info(
                "channel_group_changed",
                channel_id=channel.id,
                old_group_id=existing.group_id,
                new_group_id=channel.group_id,
            )
            self._store.delete_channel(channel.id)
            existing = None

        self._store.create_or_replace_channel(channel)
        log.info(
            "channel_created" if existing is None else "channel_replaced",
            channel_id=channel.id,
            channel_name=channel.name,
            importance=channel.importance,
            group_id=channel.group_id,
        )
        return channel.id

    def _resolve_importance(self, spec: ChannelSpec) -> int:
        if spec.importance is not None:
            if spec.importance in VALID_IMPORTANCE_LEVELS:
                return spec.importance
            _log_out_of_range(spec, "importance", spec.importance)
            return self._defaults.importance
        if spec.priority is not None:
            return priority_to_importance(spec.priority)
        return self._defaults.importance

    def _resolve_visibility(self, spec: ChannelSpec) -> int:
        visibility = spec.lockscreen_visibility
        if visibility is None:
            return self._defaults.lockscreen_visibility
        if visibility not in VALID_LOCKSCREEN_VISIBILITIES:
            _log_out_of_range(spec, "lockscreen_visibility", visibility)
            return self._defaults.lockscreen_visibility
        return visibility

    def _resolve_light_color(self, spec: ChannelSpec) -> int:
        if spec.light_color is None:
            return self._defaults.light_color
        color = parse_light_color(spec.light_color)
        if color is None:
            _log_out_of_range(spec, "light_color", spec.light_color)
            return self._defaults.light_color
        return color

    def _resolve_sound(self, sound_name: str | None) -> str | None:
        if sound_name is None or not sound_name.strip():
            return self._defaults.sound
        name = sound_name.strip()
        if name.lower() in SILENT_SOUND_NAMES:
            return None
        uri = self._sound_resolver(name)
        if uri is None:
            log.debug("sound_resource_not_found", sound_name=name)
            return self._defaults.sound
        return uri


def _or_default(value: bool | None, default: bool) -> bool:
    return default if value is None else value


def _log_out_of_range(spec: ChannelSpec, field: str, value: Any) -> None:
    log.warning(
        "channel_attribute_out_of_range",
        channel_id=spec.id,
        field=field,
        value=value,
    )
