# SPDX-License-Identifier: MIT
"""Additional Lua configuration that cannot be set with plain defines.

A normal Lua source distribution hard-codes these settings in
luaconf.h, so they only take effect when luaconf.h forwards the LUNKA_*
symbols, preferably in its "local configuration" section:

    #if defined(LUNKA_NOCVTS2N)
    #define LUA_NOCVTS2N
    #endif

    #if defined(LUNKA_EXTRASPACE)
    #define LUA_EXTRASPACE LUNKA_EXTRASPACE
    #endif

The bundled source tree is expected to do this for every field below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

NO_NUMBER_TO_STRING = "LUNKA_NOCVTN2S"
NO_STRING_TO_NUMBER = "LUNKA_NOCVTS2N"
EXTRA_SPACE = "LUNKA_EXTRASPACE"
ID_SIZE = "LUNKA_IDSIZE"


@dataclass(frozen=True)
class LuaConf:
    """Literal-value Lua settings.

    Attributes:
        no_number_to_string: Disable automatic number to string
            coercion (LUNKA_NOCVTN2S for LUA_NOCVTN2S).
        no_string_to_number: Disable automatic string to number
            coercion (LUNKA_NOCVTS2N for LUA_NOCVTS2N).
        extra_space: Size of the raw memory area associated with a
            state, as a C expression such as '8' or 'sizeof(void *)'
            (LUNKA_EXTRASPACE for LUA_EXTRASPACE).
        id_size: Maximum size of a function source description in debug
            information, as a C expression (LUNKA_IDSIZE for LUA_IDSIZE).
    """

    no_number_to_string: bool = False
    no_string_to_number: bool = False
    extra_space: str | None = None
    id_size: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LuaConf:
        """Build a LuaConf from a mapping such as a parsed JSON object.

        Numeric extra_space and id_size values are converted to their
        decimal text.

        Raises:
            ValueError: On unknown keys.
            TypeError: On values of the wrong type.
        """
        allowed = {f.name for f in fields(cls)}
        unknown = {str(key) for key in data if str(key) not in allowed}
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Lua configuration contains unknown keys: {joined}")

        kwargs: dict[str, Any] = {}
        for key in ("no_number_to_string", "no_string_to_number"):
            if key in data:
                value = data[key]
                if not isinstance(value, bool):
                    raise TypeError(f"{key} must be a boolean, got {value!r}")
                kwargs[key] = value
        for key in ("extra_space", "id_size"):
            value = data.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                raise TypeError(f"{key} must be a string or integer, got {value!r}")
            kwargs[key] = str(value)
        return cls(**kwargs)

    def defines(self) -> list[tuple[str, str | None]]:
        """Return the (name, value) defines this configuration asks for."""
        result: list[tuple[str, str | None]] = []
        if self.no_number_to_string:
            result.append((NO_NUMBER_TO_STRING, None))
        if self.no_string_to_number:
            result.append((NO_STRING_TO_NUMBER, None))
        if self.extra_space is not None:
            result.append((EXTRA_SPACE, self.extra_space))
        if self.id_size is not None:
            result.append((ID_SIZE, self.id_size))
        return result
