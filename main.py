import asyncio
import json
import time
from pathlib import Path
import traceback
from tqdm import tqdm

project_root = Path(__file__).parent

from omegaconf import DictConfig, ListConfig
from argparser import BlockStageArgumentParser
from blockstage_core import StageSession
from blockstage_core.utils import create_output_directory, get_logger, load_project_file, setup_logging

async def run_project(cfg: DictConfig | ListConfig, logger, **kwargs) -> dict:
    """Load the configured project, run it once and record sprite snapshots."""
    project_path = Path(cfg.execution.project)
    if not project_path.is_absolute():
        project_path = kwargs.get('project_root', project_root) / project_path

    try:
        logger.info(f"Loading project {project_path}")
        project = load_project_file(project_path)
        session = StageSession.from_project(project, cfg)

        frame_interval = float(cfg.execution.frame_interval)
        auto_stop = cfg.engine.get('auto_stop')
        total = int(auto_stop / frame_interval) if auto_stop else None

        frames = []
        start = time.monotonic()
        await session.play()
        with tqdm(total=total, desc="Stage run", leave=True) as pbar:
            while session.is_playing:
                frames.append({'t': round(time.monotonic() - start, 3), 'sprites': session.snapshot()})
                await asyncio.sleep(frame_interval)
                pbar.update(1)
        await session.wait()
        frames.append({'t': round(time.monotonic() - start, 3), 'sprites': session.snapshot()})

        logger.info(f"Run finished after {frames[-1]['t']}s with {len(frames)} frames")
        return {
            'project': str(project_path),
            'stage': {'width': session.stage.width, 'height': session.stage.height},
            'frames': frames,
            'programs': {
                sprite.id: [block.to_dict() for block in session.programs.get(sprite.id)]
                for sprite in session.sprites()
            },
        }

    except Exception as e:
        logger.error(f"Error in run_project: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise

def main() -> None:
    parser = BlockStageArgumentParser(project_root)
    args = parser.parse_args()
    cfg = parser.get_config(args)

    output_dir = create_output_directory(cfg.execution.result_dir, timestamp=False, project_root=project_root)
    setup_logging(output_dir)

    logger = get_logger('main')
    print("BlockStage run started")
    logger.debug(f"Command line arguments: {args}")

    trace = asyncio.run(run_project(cfg, logger, project_root=project_root))
    with open(output_dir / 'trace.json', 'w', encoding='utf-8') as f:
        json.dump(trace, f, indent=2, ensure_ascii=False)

    timestamp = time.strftime("%Y%m%d_%H%M%S")
    print(f"BlockStage run completed at {timestamp}, trace written to {output_dir / 'trace.json'}")

if __name__ == "__main__":
    main()
