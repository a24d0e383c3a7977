"""
Pytest fixtures for tokenbridge tests.
"""

import logging

import pytest

from tokenbridge.catalog import get_default_catalog
from tokenbridge.config import TransformerConfig
from tokenbridge.files import ComponentFile
from tokenbridge.matcher import TokenMatcher


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    home = tmp_path / "tokenbridge-home"
    monkeypatch.setenv("TOKENBRIDGE_HOME", str(home))
    monkeypatch.delenv("TOKENBRIDGE_CONFIG", raising=False)
    monkeypatch.delenv("TOKENBRIDGE_API_KEYS", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield home
    logger = logging.getLogger("tokenbridge")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def catalog():
    return get_default_catalog()


@pytest.fixture
def matcher(catalog):
    return TokenMatcher(catalog=catalog)


@pytest.fixture
def config():
    return TransformerConfig(max_workers=1)


def make_file(content: str, path: str = "src/components/Button/Button.tsx") -> ComponentFile:
    return ComponentFile(name=path.rsplit("/", 1)[-1], path=path, content=content)


@pytest.fixture
def component_file():
    return make_file


@pytest.fixture
def sample_component():
    """A small component touching every token category."""
    return make_file(
        """import React from 'react';

export function Card({ title }) {
  return (
    <div className="rounded-[8px] shadow-[0px_2px_10px_2px_rgba(0,0,0,0.1)] bg-[#25C9D0] p-4">
      <h2 className="text-xl font-semibold leading-7">{title}</h2>
      <p style={{ color: '#555555', borderRadius: '12px' }}>Body</p>
    </div>
  );
}
"""
    )


@pytest.fixture
def component_repo(tmp_path):
    """A local project with two components under src/components."""
    root = tmp_path / "project"
    button = root / "src" / "components" / "Button"
    button.mkdir(parents=True)
    (button / "Button.tsx").write_text(
        'export const Button = () => <button className="bg-[#25C9D0] rounded-[4px]">Go</button>;\n',
        encoding="utf-8",
    )
    (button / "index.ts").write_text("export * from './Button';\n", encoding="utf-8")
    (button / "README.md").write_text("# Button\n", encoding="utf-8")

    card = root / "src" / "components" / "Card"
    card.mkdir(parents=True)
    (card / "Card.tsx").write_text(
        "export const Card = () => <div style={{ boxShadow: '0px 1px 3px 0px rgba(0, 0, 0, 0.10)' }} />;\n",
        encoding="utf-8",
    )
    return root
