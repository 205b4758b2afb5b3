# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""HTTP body serializers for wire records."""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

class BodySerializer(ABC):
    content_type: str = "application/octet-stream"

    @abstractmethod
    def serialize(self, data: Any) -> Optional[str]:
        pass

class BodyDeserializer(ABC):
    @abstractmethod
    def deserialize(self, data: Union[str, bytes, None]) -> Any:
        pass

class JsonBodySerializer(BodySerializer):
    content_type = "application/json"

    def __init__(self, encoder: Optional[Callable] = None):
        self._encoder = encoder

    def serialize(self, data: Any) -> Optional[str]:
        if data is None:
            return None
        return json.dumps(data, default=self._encoder, separators=(",", ":"))

class JsonBodyDeserializer(BodyDeserializer):
    def __init__(self, object_hook: Optional[Callable] = None):
        self._object_hook = object_hook

    def deserialize(self, data: Union[str, bytes, None]) -> Any:
        # 204 No Content and empty 200s decode to an empty record
        if not data:
            return {}
        if isinstance(data, bytes):
            data = data.decode('utf-8')
        return json.loads(data, object_hook=self._object_hook)
