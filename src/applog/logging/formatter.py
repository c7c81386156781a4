"""Log payload rendering.

This module renders structured payloads either as single human-readable
lines for the dev server console or as compact JSON for cloud log ingestion.
"""

import json
from typing import Any, FrozenSet, Mapping, Optional, Union

from applog.logging.payload import MESSAGE_KEY, SOURCE_LOCATION_KEY, TRACE_KEY

_TRACE_SEPARATOR = "/traces/"


def to_compact_json(obj: Any) -> str:
    """Serialize to compact JSON, preserving key order.

    Values that are not JSON-serializable are rendered with ``str()``.
    Mappings with non-scalar keys or circular references are rendered
    after stringifying those keys and cutting the cycles.
    """
    try:
        return json.dumps(obj, separators=(",", ":"), default=_json_serializer)
    except (TypeError, ValueError, RecursionError):
        return json.dumps(_sanitize(obj), separators=(",", ":"), default=_json_serializer)


def _sanitize(obj: Any, parents: FrozenSet[int] = frozenset()) -> Any:
    if not isinstance(obj, (Mapping, list, tuple, set, frozenset)):
        return obj
    if id(obj) in parents:
        return "<circular>"
    parents = parents | {id(obj)}
    if isinstance(obj, Mapping):
        return {_json_key(k): _sanitize(v, parents) for k, v in obj.items()}
    return [_sanitize(v, parents) for v in obj]


def _json_key(key: Any) -> Any:
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


def _json_serializer(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    try:
        return str(obj)
    except Exception:
        return f"<unserializable: {type(obj).__name__}>"


def human_prefix(location: Optional[Mapping[str, Any]], trace_id: Optional[str]) -> str:
    """Build the ``type:method:line: [traceId] `` prefix of a console line."""
    prefix = ""
    if location:
        prefix += f"{location['file']}:{location['function']}:{location['line']}: "
    if trace_id:
        prefix += f"[{trace_id}] "
    return prefix


def _trace_id_of(payload: Mapping[str, Any]) -> Optional[str]:
    resource = payload.get(TRACE_KEY)
    if not resource:
        return None
    return str(resource).rpartition(_TRACE_SEPARATOR)[2]


class HumanReadableFormatter:
    """Render payloads for a human scanning a console.

    Example output:
        courses.CourseService:create:42: [0af7651916cd43dd] Course created
    """

    def render(self, payload: Mapping[str, Any]) -> str:
        prefix = human_prefix(payload.get(SOURCE_LOCATION_KEY), _trace_id_of(payload))
        return prefix + str(payload.get(MESSAGE_KEY, ""))

    def render_event(self, payload: Mapping[str, Any], details: Mapping[str, Any]) -> str:
        """Render an event line with the details dumped for local debugging."""
        return self.render(payload) + " extra_info: " + to_compact_json(details)


class CloudLoggingFormatter:
    """Render payloads as compact JSON for the cloud log backend.

    Example output:
        {"message":"Course created","severity":"INFO",
         "logging.googleapis.com/trace":"projects/my-app/traces/0af7..."}
    """

    def render(self, payload: Mapping[str, Any]) -> str:
        return to_compact_json(payload)

    def render_event(self, payload: Mapping[str, Any], details: Mapping[str, Any]) -> str:
        # details are already merged into the payload
        return self.render(payload)


PayloadFormatter = Union[HumanReadableFormatter, CloudLoggingFormatter]

_HUMAN = HumanReadableFormatter()
_CLOUD = CloudLoggingFormatter()


def get_formatter(local: bool) -> PayloadFormatter:
    """Select the rendering strategy for the environment mode."""
    return _HUMAN if local else _CLOUD


def render(payload: Mapping[str, Any], local: bool) -> str:
    """Render a payload in dev (``local=True``) or cloud mode."""
    return get_formatter(local).render(payload)
