import asyncio
import logging

import yaml
from omegaconf import OmegaConf

from main import run_project


def test_run_project_records_frames(tmp_path):
    project = {
        "sprites": [
            {"name": "Cat", "blocks": [{"key": "when_clicked"}, {"key": "turn", "inputs": {0: "30"}}]},
            {"name": "Ball", "asset": "ball", "position": [150, 100]},
        ]
    }
    project_path = tmp_path / "project.yaml"
    project_path.write_text(yaml.safe_dump(project, allow_unicode=True), encoding="utf-8")
    cfg = OmegaConf.create({
        "stage": {"width": 480, "height": 360, "sprite_size": 60},
        "engine": {"step_delay": 0.01, "tick_interval": 0.005, "collision_cooldown": 0.5, "auto_stop": 0.05},
        "execution": {"project": str(project_path), "frame_interval": 0.01},
    })

    trace = asyncio.run(run_project(cfg, logging.getLogger("test")))

    assert len(trace["frames"]) >= 2
    last = trace["frames"][-1]["sprites"]
    assert [s["name"] for s in last] == ["Cat", "Ball"]
    assert last[0]["rotation"] == 30
    assert last[1]["logical"] == {"x": 150, "y": 100}
    assert len(trace["programs"]) == 2
