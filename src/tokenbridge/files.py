"""File records exchanged between providers, the analyzer and the transformer."""

from dataclasses import dataclass, asdict, replace
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Sequence, Union

PRESENTATIONAL_EXTENSIONS = (".tsx", ".jsx")

# Everything a component directory may contain that is worth reading
SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".css")


@dataclass(frozen=True)
class ComponentFile:
    name: str
    path: str
    content: str

    @property
    def extension(self) -> str:
        return PurePosixPath(self.name or self.path).suffix.lower()

    def with_content(self, content: str) -> "ComponentFile":
        return replace(self, content=content)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


FileLike = Union[ComponentFile, Dict[str, Any]]


def coerce_file(item: FileLike) -> ComponentFile:
    """Accept ComponentFile or a ``{name, path, content}`` mapping."""
    if isinstance(item, ComponentFile):
        return item
    try:
        path = str(item.get("path") or item["name"])
        name = str(item.get("name") or PurePosixPath(path).name)
        return ComponentFile(name=name, path=path, content=str(item["content"]))
    except (KeyError, AttributeError, TypeError) as e:
        raise ValueError(f"Not a file record: {item!r}") from e


def coerce_files(items: Iterable[FileLike]) -> List[ComponentFile]:
    return [coerce_file(item) for item in items]


def is_presentational(file: ComponentFile, extensions: Sequence[str] = PRESENTATIONAL_EXTENSIONS) -> bool:
    return file.extension in extensions
