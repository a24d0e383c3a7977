"""
Component file providers.

A provider turns a component name into ``ComponentFile`` records. Three are
available:

- local:      a directory already on disk
- clone:      a git clone kept up to date with ``git fetch/checkout/pull``
- github-api: the GitHub contents API, no checkout needed

Components live under a directory given by a pattern such as
``src/components/{componentName}``. Every provider raises ``RepositoryError``
for I/O failures so callers handle one exception type.
"""

import base64
import json
import logging
import os
import subprocess
import time
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .files import SOURCE_EXTENSIONS, ComponentFile, FileLike, coerce_files

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_PATTERN = "src/components/{componentName}"
COMPONENT_PLACEHOLDER = "{componentName}"
GIT_TIMEOUT = 120
HTTP_TIMEOUT = 30
HTTP_RETRIES = 3
GITHUB_API_URL = "https://api.github.com"


class RepositoryError(RuntimeError):
    """A provider could not read or write repository content."""


def component_dir(pattern: str) -> str:
    """Directory part of a component pattern (``src/components``)."""
    index = pattern.find(COMPONENT_PLACEHOLDER)
    if index == -1:
        raise RepositoryError(f"Invalid component pattern: {pattern}. Must include {COMPONENT_PLACEHOLDER}")
    return pattern[:index].rstrip("/")


def has_source_extension(name: str, extensions: Sequence[str] = SOURCE_EXTENSIONS) -> bool:
    return name.lower().endswith(tuple(extensions))


class RepositoryAccess:
    """Base provider. Subclasses implement listing and reading."""

    def __init__(self, component_pattern: str = DEFAULT_COMPONENT_PATTERN):
        self.component_pattern = component_pattern
        self.component_dir = component_dir(component_pattern)

    def setup(self):
        """Prepare the provider (clone, authenticate). No-op by default."""

    def list_components(self) -> List[str]:
        raise NotImplementedError

    def get_component_files(self, component_name: str) -> List[ComponentFile]:
        raise NotImplementedError


# === LOCAL DIRECTORY ===

class LocalDirectoryAccess(RepositoryAccess):
    """Components read straight from a directory on disk."""

    def __init__(self, root: str, component_pattern: str = DEFAULT_COMPONENT_PATTERN):
        super().__init__(component_pattern)
        self.root = Path(root).expanduser()

    @property
    def components_path(self) -> Path:
        return self.root / self.component_dir

    def list_components(self) -> List[str]:
        """Component directories and single-file components, sorted by name."""
        base = self.components_path
        if not base.is_dir():
            raise RepositoryError(f"Component directory does not exist: {base}")
        components = []
        for entry in sorted(base.iterdir()):
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                components.append(entry.name)
            elif has_source_extension(entry.name):
                components.append(entry.stem)
        return components

    def _component_paths(self, component_name: str) -> List[Path]:
        base = self.components_path
        directory = base / component_name
        if directory.is_dir():
            return sorted(
                p for p in directory.rglob("*")
                if p.is_file() and has_source_extension(p.name)
            )
        single = [base / f"{component_name}{ext}" for ext in SOURCE_EXTENSIONS]
        found = [p for p in single if p.is_file()]
        if not found:
            raise RepositoryError(f"Component not found: {component_name} in {base}")
        return found

    def get_component_files(self, component_name: str) -> List[ComponentFile]:
        files = []
        for path in self._component_paths(component_name):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise RepositoryError(f"Failed to read {path}: {e}") from e
            files.append(ComponentFile(
                name=path.name,
                path=path.relative_to(self.root).as_posix(),
                content=content,
            ))
        return files


# === LOCAL CLONE ===

class LocalCloneAccess(LocalDirectoryAccess):
    """A git clone at ``local_path``, created or refreshed by ``setup()``."""

    def __init__(
        self,
        repo_url: str,
        local_path: str,
        branch: str = "main",
        component_pattern: str = DEFAULT_COMPONENT_PATTERN,
        timeout: int = GIT_TIMEOUT,
    ):
        super().__init__(local_path, component_pattern)
        self.repo_url = repo_url
        self.branch = branch
        self.timeout = timeout

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> str:
        cmd = ["git"] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RepositoryError(f"git {args[0]} timed out after {self.timeout}s") from e
        except OSError as e:
            raise RepositoryError(f"Cannot run git: {e}") from e

        if result.returncode != 0:
            raise RepositoryError(f"git {args[0]} failed: {(result.stderr or '').strip()[:500]}")
        return result.stdout

    def setup(self):
        if self.root.exists():
            if not (self.root / ".git").exists():
                raise RepositoryError(f"Path exists but is not a git repository: {self.root}")
            logger.info(f"Updating repository at {self.root}")
            self._git(["fetch", "origin"], cwd=self.root)
            self._git(["checkout", self.branch], cwd=self.root)
            self._git(["pull", "origin", self.branch], cwd=self.root)
        else:
            logger.info(f"Cloning {self.repo_url} ({self.branch}) to {self.root}")
            self.root.parent.mkdir(parents=True, exist_ok=True)
            self._git(["clone", "--depth", "1", "--branch", self.branch, self.repo_url, str(self.root)])


# === GITHUB CONTENTS API ===

class GitHubAPIAccess(RepositoryAccess):
    """Reads components through ``GET /repos/{owner}/{repo}/contents/{path}``."""

    def __init__(
        self,
        owner: str,
        repo: str,
        ref: str = "main",
        token: Optional[str] = None,
        component_pattern: str = DEFAULT_COMPONENT_PATTERN,
        timeout: int = HTTP_TIMEOUT,
        retries: int = HTTP_RETRIES,
        api_url: str = GITHUB_API_URL,
    ):
        super().__init__(component_pattern)
        self.owner = owner
        self.repo = repo
        self.ref = ref
        self.token = token or os.environ.get("GITHUB_TOKEN")
        self.timeout = timeout
        self.retries = max(1, retries)
        self.api_url = api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "tokenbridge/0.1",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _contents_url(self, path: str) -> str:
        quoted = urllib.parse.quote(path.strip("/"))
        query = urllib.parse.urlencode({"ref": self.ref})
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{quoted}?{query}"

    def _get(self, path: str) -> Any:
        """GET a contents path. Retries server errors and network failures."""
        url = self._contents_url(path)
        last_error = ""
        for attempt in range(1, self.retries + 1):
            try:
                req = urllib.request.Request(url, headers=self._headers())
                with urllib.request.urlopen(req, timeout=self.timeout) as response:
                    return json.loads(response.read())
            except urllib.error.HTTPError as e:
                error_body = e.read().decode() if e.fp else ""
                last_error = f"GitHub API error ({e.code}): {error_body[:200]}"
                if e.code < 500:
                    break
            except urllib.error.URLError as e:
                last_error = f"GitHub API unreachable: {e.reason}"
            except json.JSONDecodeError as e:
                last_error = f"Invalid response from GitHub API: {e}"
                break
            if attempt < self.retries:
                logger.warning(f"{last_error}; retrying ({attempt}/{self.retries})")
                time.sleep(0.5 * attempt)
        raise RepositoryError(f"{last_error} [{path}]")

    def list_components(self) -> List[str]:
        entries = self._get(self.component_dir)
        if not isinstance(entries, list):
            raise RepositoryError(f"Not a directory: {self.component_dir}")
        components = []
        for item in entries:
            if item.get("type") == "dir":
                components.append(item["name"])
            elif item.get("type") == "file" and has_source_extension(item["name"]):
                components.append(item["name"].rsplit(".", 1)[0])
        return components

    def _collect(self, path: str) -> List[Dict[str, Any]]:
        data = self._get(path)
        if isinstance(data, dict):
            return [data]
        items = []
        for item in data:
            if item.get("type") == "dir":
                items.extend(self._collect(item["path"]))
            elif item.get("type") == "file" and has_source_extension(item["name"]):
                items.append(item)
        return items

    def _decode(self, item: Dict[str, Any]) -> ComponentFile:
        if "content" not in item:
            # directory listings omit file content
            item = self._get(item["path"])
        try:
            content = base64.b64decode(item.get("content") or "").decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise RepositoryError(f"Cannot decode {item.get('path')}: {e}") from e
        return ComponentFile(name=item["name"], path=item["path"], content=content)

    def get_component_files(self, component_name: str) -> List[ComponentFile]:
        path = f"{self.component_dir}/{component_name}" if self.component_dir else component_name
        return [self._decode(item) for item in self._collect(path)]


# === FACTORY ===

SOURCE_TYPES = ("local", "clone", "github-api")


def create_repository_access(source_type: str, **config) -> RepositoryAccess:
    """
    Build and set up a provider.

    Args:
        source_type: local | clone | github-api
        **config: provider constructor arguments

    Raises:
        RepositoryError: unknown source type, missing settings, or setup failure
    """
    try:
        if source_type == "local":
            access = LocalDirectoryAccess(**config)
        elif source_type in ("clone", "local-clone"):
            access = LocalCloneAccess(**config)
        elif source_type == "github-api":
            access = GitHubAPIAccess(**config)
        else:
            raise RepositoryError(f"Unknown source type: {source_type}. Use one of {', '.join(SOURCE_TYPES)}")
    except TypeError as e:
        raise RepositoryError(f"Invalid {source_type} settings: {e}") from e

    access.setup()
    return access


def write_component_files(files: Iterable[FileLike], output_dir: str) -> List[str]:
    """Write files under ``output_dir`` keeping their relative paths. Returns written paths."""
    base = Path(output_dir)
    written = []
    for file in coerce_files(files):
        target = (base / file.path).resolve()
        if base.resolve() not in target.parents:
            raise RepositoryError(f"Refusing to write outside {base}: {file.path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(file.content, encoding="utf-8")
        except OSError as e:
            raise RepositoryError(f"Failed to write {target}: {e}") from e
        written.append(str(target))
    logger.info(f"Wrote {len(written)} file(s) to {base}")
    return written
