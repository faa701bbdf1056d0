import json
from pathlib import Path
from datetime import datetime
from typing import Optional

import yaml

def create_output_directory(base_dir: str = "results", subfix: str = "", timestamp: bool = True, project_root: Optional[Path] = None) -> Path:
    """
    Create output directory with timestamp relative to project root.

    Args:
        base_dir: Base directory name (default: "results")
        subfix: Optional suffix for directory name
        timestamp: Whether to include a timestamp in the directory name
        project_root: Project root path. If None, uses PROJECT_ROOT from config

    Returns:
        Path: Created directory path
    """
    from blockstage_core.config import PROJECT_ROOT

    root = project_root if project_root is not None else PROJECT_ROOT
    ts = datetime.now().strftime("%m%d-%H%M") if timestamp else ""

    if ts:
        output_dir = root / base_dir / f"{ts}_{subfix}" if subfix else root / base_dir / ts
    else:
        output_dir = root / base_dir / subfix

    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir

def load_project_file(path: Path | str) -> dict:
    """
    Load a project description (sprites and their block programs) from YAML or JSON.

    Expected shape:
        stage: {width: 480, height: 360}      # optional
        sprites:
          - name: Cat
            asset: cat
            blocks:
              - key: when_clicked
              - key: move
                inputs: {0: "10"}

    Args:
        path: Path to a .yaml/.yml or .json file

    Returns:
        dict: the parsed project

    Raises:
        ValueError: if the file does not describe a list of sprites
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get('sprites'), list):
        raise ValueError(f"Project file {path} must contain a 'sprites' list")
    return data
