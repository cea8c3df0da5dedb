"""
Types exposed by the Mangadex v2 API.

Only the subset needed to download chapters is covered. Every response is
wrapped in an envelope: {"code": 200, "status": "OK", "data": {...}}.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def unwrap(payload: Any) -> Dict[str, Any]:
    """Returns the `data` member of an API response envelope."""
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    for key in ('code', 'status', 'data'):
        if key not in payload:
            raise KeyError(key)
    data = payload['data']
    if not isinstance(data, dict):
        raise TypeError(f"expected `data` to be an object, got {type(data).__name__}")
    return data


def expect_string(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected `{name}` to be a string, got {type(value).__name__}")
    return value


def string_field(data: Dict[str, Any], key: str) -> str:
    """Returns a required string member; JSON null is rejected."""
    return expect_string(data[key], key)


@dataclass
class ApiSeries:
    id: int
    title: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiSeries":
        return cls(id=int(data['id']), title=string_field(data, 'title'))


@dataclass
class ApiGroup:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiGroup":
        return cls(id=int(data['id']), name=string_field(data, 'name'))


@dataclass
class ApiChapter:
    id: int
    volume: str
    chapter: str
    language: str
    groups: List[int]
    timestamp: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiChapter":
        return cls(
            id=int(data['id']),
            volume=string_field(data, 'volume'),
            chapter=string_field(data, 'chapter'),
            language=string_field(data, 'language'),
            groups=[int(group_id) for group_id in data['groups']],
            timestamp=int(data['timestamp']),
        )


@dataclass
class ApiSeriesWithChapters:
    series: ApiSeries
    chapters: List[ApiChapter]
    groups: List[ApiGroup]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiSeriesWithChapters":
        return cls(
            series=ApiSeries.from_dict(data['manga']),
            chapters=[ApiChapter.from_dict(chapter) for chapter in data['chapters']],
            groups=[ApiGroup.from_dict(group) for group in data['groups']],
        )

    def group_names(self) -> Dict[int, str]:
        return {group.id: group.name for group in self.groups}


@dataclass
class ApiChapterDetail:
    id: int
    hash: str
    pages: List[str]
    server: str
    server_fallback: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiChapterDetail":
        fallback = data.get('serverFallback')
        return cls(
            id=int(data['id']),
            hash=string_field(data, 'hash'),
            pages=[expect_string(page, 'pages[]') for page in data['pages']],
            server=string_field(data, 'server'),
            server_fallback=expect_string(fallback, 'serverFallback') if fallback is not None else None,
        )
