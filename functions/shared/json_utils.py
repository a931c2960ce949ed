# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Converts dict keys between snake_case (Python) and camelCase (Firestore/JS)."""

import re
from typing import Any, Literal

# Firestore fields written by the web client that don't follow plain camelCase.
_SNAKE_TO_CAMEL_OVERRIDES = {"photo_url": "photoURL"}
_CAMEL_TO_SNAKE_OVERRIDES = {v: k for k, v in _SNAKE_TO_CAMEL_OVERRIDES.items()}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_to_camel(key: str) -> str:
    if key in _SNAKE_TO_CAMEL_OVERRIDES:
        return _SNAKE_TO_CAMEL_OVERRIDES[key]
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(key: str) -> str:
    if key in _CAMEL_TO_SNAKE_OVERRIDES:
        return _CAMEL_TO_SNAKE_OVERRIDES[key]
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def convert_keys(
    data: Any, direction: Literal["snake_to_camel", "camel_to_snake"]
) -> Any:
    """
    Recursively converts the keys of every dict in `data`.

    Values that are not dicts or lists (strings, numbers, datetimes, Firestore
    sentinels) are returned as-is.
    """
    if direction == "snake_to_camel":
        convert = snake_to_camel
    elif direction == "camel_to_snake":
        convert = camel_to_snake
    else:
        raise ValueError(f"Unknown direction: {direction}")

    def _convert(value: Any) -> Any:
        if isinstance(value, dict):
            return {
                (convert(k) if isinstance(k, str) else k): _convert(v)
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [_convert(item) for item in value]
        return value

    return _convert(data)
