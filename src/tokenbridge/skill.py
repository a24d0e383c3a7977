"""
Skill: design_token_transformer
Description: Rewrite hardcoded colors, radii, shadows and type styles into design token references
Version: 1.0.0

Interface:
- SKILL_META: metadata about this skill
- REQUIRES: list of required capabilities
- run(args, tools, context) -> dict: main execution function

Usage via orchestrator:
    run_skill(skill_name="design_token_transformer", args={
        "code_dir": "path/to/src/components",
        "dry_run": True,
    })
"""

from pathlib import PurePosixPath
from typing import Any, Dict, List

from .analyzer import analyze
from .catalog import CatalogError
from .config import ConfigError, config_from_dict, load_config
from .files import ComponentFile
from .transformer import transform

SKILL_META = {
    "name": "design_token_transformer",
    "description": "Rewrite hardcoded style literals into design token references",
    "tier": "tested",
    "version": "1.0.0",
    "author": "tokenbridge",
    "keywords": ["design tokens", "tailwind", "transform", "colors", "shadows", "typography"],
    "triggers": ["apply design tokens", "tokenize styles", "replace hardcoded colors"],
    "side_effects": ["writes_file"],
}

REQUIRES = ["read_file", "glob_files"]

DEFAULT_PATTERNS = ["**/*.tsx", "**/*.jsx"]
OUTPUT_FORMATS = ("standard", "diff")


def _find_files(tools: Dict[str, Any], code_dir: str, patterns: List[str]) -> List[str]:
    seen = set()
    paths = []
    for pattern in patterns:
        for path in tools["glob_files"](pattern=pattern, path=code_dir) or []:
            if path not in seen:
                seen.add(path)
                paths.append(path)
    return paths


def run(args: Dict[str, Any], tools: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
    """
    Main skill execution function.

    Args:
        args: {
            code_dir: str - directory to scan
            pattern: str | list (optional) - glob(s) relative to code_dir
            dry_run: bool (optional) - don't write transformed files (default True)
            output_format: str (optional) - "standard" or "diff"
            config: dict (optional) - inline transformer config
        }
        tools: {
            read_file: callable - read a file
            glob_files: callable - find files by pattern
            write_file: callable (optional) - write a file, needed when dry_run is False
        }
        context: {run_id, config_path}

    Returns:
        {success, summary, files_transformed, transformation, analysis, errors}
    """
    code_dir = args.get("code_dir", "")
    pattern = args.get("pattern") or DEFAULT_PATTERNS
    patterns = [pattern] if isinstance(pattern, str) else list(pattern)
    dry_run = args.get("dry_run", True)
    output_format = args.get("output_format", "standard")

    if not code_dir:
        return {"success": False, "error": "code_dir is required"}
    if output_format not in OUTPUT_FORMATS:
        return {"success": False, "error": f"Invalid output_format: {output_format}. Valid: {', '.join(OUTPUT_FORMATS)}"}
    if not dry_run and "write_file" not in tools:
        return {"success": False, "error": "write_file tool is required when dry_run is false"}

    try:
        if args.get("config"):
            config = config_from_dict(args["config"])
        else:
            config = load_config(context.get("config_path"))
    except ConfigError as e:
        return {"success": False, "error": str(e)}

    errors = []
    files = []
    try:
        paths = _find_files(tools, code_dir, patterns)
    except Exception as e:
        return {"success": False, "error": f"Failed to list files in {code_dir}: {e}"}

    for path in paths:
        try:
            content = tools["read_file"](path)
        except Exception as e:
            errors.append(f"Failed to read {path}: {e}")
            continue
        if content is None:
            errors.append(f"Failed to read {path}: no content")
            continue
        files.append(ComponentFile(name=PurePosixPath(path).name, path=path, content=content))

    if not files:
        errors.append(f"No files matching {', '.join(patterns)} in {code_dir}")
        return {
            "success": False,
            "summary": "No component files found",
            "files_transformed": 0,
            "transformation": None,
            "analysis": None,
            "errors": errors,
        }

    try:
        analysis = analyze(files, extensions=config.presentational_extensions)
        result = transform(files, analysis=analysis, config=config)
    except CatalogError as e:
        return {"success": False, "error": f"Catalog error: {e}", "errors": errors}

    errors.extend(analysis.errors)
    errors.extend(result.errors)

    changed = result.changed_files
    if not dry_run:
        for file in changed:
            try:
                tools["write_file"](file.path, file.content)
            except Exception as e:
                errors.append(f"Failed to write {file.path}: {e}")

    totals = result.summary
    summary = (
        f"{len(changed)} of {len(files)} file(s) changed: "
        f"{totals.colors_transformed} colors, {totals.border_radii_transformed} radii, "
        f"{totals.shadows_transformed} shadows, {totals.typography_transformed} typography"
    )
    if totals.token_imports_transformed:
        summary += f", {totals.token_imports_transformed} token imports"
    if dry_run:
        summary += " (dry run)"

    transformation = result.to_dict()
    if output_format == "diff":
        transformation["diff"] = result.diff()

    return {
        "success": not result.errors,
        "summary": summary,
        "files_transformed": len(changed),
        "transformation": transformation,
        "analysis": analysis.to_dict(),
        "errors": errors,
        "run_id": context.get("run_id"),
    }
