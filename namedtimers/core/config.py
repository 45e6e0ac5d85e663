# namedtimers/core/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from namedtimers.core.ids import DEFAULT_ID_LENGTH

ENV_PREFIX = "NAMEDTIMERS_"


class RegistryConfig(BaseSettings):
    """
    Settings for a TimerRegistry.

    Fields not passed explicitly are read from NAMEDTIMERS_* environment
    variables, then fall back to their defaults. Values are validated and
    coerced by pydantic, so "false" or "0" for a flag and "12" for a length
    are accepted. Invalid values raise pydantic.ValidationError, a ValueError.

    :param id: Registry id; generated when None.
    :param id_length: Length of generated registry and timer ids.
    :param purge_paused_on_clear_all: Whether clear_all() also forgets paused intervals.
    :param daemon_threads: Whether the default ThreadingScheduler uses daemon threads.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    id: Optional[str] = None
    id_length: int = Field(default=DEFAULT_ID_LENGTH, gt=0)
    purge_paused_on_clear_all: bool = True
    daemon_threads: bool = True

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, environ: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        """
        Build a config from environment variables.

        :param prefix: Variable prefix; names after it are ID, ID_LENGTH,
                       PURGE_PAUSED_ON_CLEAR_ALL and DAEMON_THREADS.
        :param environ: Mapping to read instead of os.environ.
        :raises pydantic.ValidationError: If a variable holds an invalid value.
        """
        if environ is None:
            return cls(_env_prefix=prefix)

        # An explicit mapping replaces the process environment entirely.
        upper_prefix = prefix.upper()
        values = {
            key[len(prefix) :].lower(): value
            for key, value in environ.items()
            if key.upper().startswith(upper_prefix)
        }
        return cls.model_validate(values)
